"""High-level PowerFlex REST client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .authenticator import VERSION_PATH, Authenticator
from .config import ClientConfig
from .executor import RequestExecutor, TimeRecorder
from .http import Transport
from .resources import SystemsResource, VolumesResource
from .session import Credentials, Session, SessionManager, VersionState

logger = logging.getLogger(__name__)


class PowerFlexClient:
    """Wrap PowerFlex REST endpoints with helper methods."""

    def __init__(
        self,
        *,
        endpoint: str,
        version: str | None = None,
        verify_ssl: bool | str = True,
        use_certs: bool = False,
        timeout: float = 30.0,
        default_headers: Mapping[str, str] | None = None,
        show_http: bool = False,
        session: requests.Session | None = None,
        time_recorder: TimeRecorder | None = None,
    ) -> None:
        self.config = ClientConfig(
            endpoint=endpoint,
            verify_ssl=verify_ssl,
            use_certs=use_certs,
            timeout=timeout,
            version=version or None,
            default_headers=default_headers,
            show_http=show_http,
        )
        logger.debug(
            "PowerFlex client init (endpoint=%s, version=%s, verify_ssl=%s, use_certs=%s)",
            endpoint,
            version or "unspecified",
            verify_ssl,
            use_certs,
        )
        self._suppress_insecure_warning_if_needed()
        self._transport = Transport(
            session,
            verify=self.config.resolved_verify(),
            timeout=timeout,
            show_http=show_http,
        )
        self._sessions = SessionManager(Session(endpoint=endpoint, version=version or None))
        self._authenticator = Authenticator(
            self._sessions, self._transport, default_headers=default_headers
        )
        self._executor = RequestExecutor(
            self._sessions,
            self._transport,
            self._authenticator,
            default_headers=default_headers,
            time_recorder=time_recorder,
        )
        self.systems = SystemsResource(self)
        self.volumes = VolumesResource(self)

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> PowerFlexClient:
        return cls(
            endpoint=config.endpoint,
            version=config.version,
            verify_ssl=config.verify_ssl,
            use_certs=config.use_certs,
            timeout=config.timeout,
            default_headers=config.default_headers,
            show_http=config.show_http,
            **kwargs,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **kwargs: Any) -> PowerFlexClient:
        """Build a client from ``POWERFLEX_*`` environment variables."""

        return cls.from_config(ClientConfig.from_env(environ), **kwargs)

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> PowerFlexClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Public API --------------------------------------------------------------
    def authenticate(
        self, username: str, password: str, *, timeout: float | None = None
    ) -> str:
        """Log in and return the session token."""

        return self._authenticator.authenticate(
            Credentials(username=username, password=password), timeout=timeout
        )

    def execute(
        self,
        method: str,
        path: str,
        *,
        payload: Any | None = None,
        params: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        return self._executor.execute(
            method, path, payload=payload, params=params, timeout=timeout
        )

    def execute_scalar(
        self,
        method: str,
        path: str,
        *,
        payload: Any | None = None,
        params: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        return self._executor.execute_scalar(
            method, path, payload=payload, params=params, timeout=timeout
        )

    def get_version(self, *, refresh: bool = False, timeout: float | None = None) -> str:
        """Return the protocol version; ``refresh`` re-reads it through the retry path."""

        if not refresh or self._sessions.current.version_state is VersionState.UNKNOWN:
            return self._authenticator.discover_version(timeout=timeout)
        raw = self._executor.execute_scalar("GET", VERSION_PATH, timeout=timeout)
        return self._authenticator.record_version(raw)

    @property
    def session(self) -> Session:
        """Copy of the current session state."""

        return self._sessions.snapshot()

    def use_session(self, session: Session) -> None:
        """Replace the session, e.g. to reuse a token obtained elsewhere."""

        self._sessions.install(session)

    @property
    def token(self) -> str:
        return self._sessions.current.token

    def set_token(self, token: str) -> None:
        self._sessions.set_token(token)

    @property
    def version(self) -> str | None:
        return self._sessions.current.version

    @property
    def time_recorder(self) -> TimeRecorder | None:
        return self._executor.time_recorder

    @time_recorder.setter
    def time_recorder(self, recorder: TimeRecorder | None) -> None:
        self._executor.time_recorder = recorder

    def close(self) -> None:
        self._transport.close()

    # Internal helpers -------------------------------------------------------
    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)
