"""Login exchange and protocol version discovery."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from .config import resolved_headers
from .exceptions import (
    AuthenticationError,
    PowerFlexError,
    UnexpectedResponseError,
    VersionError,
)
from .http import Transport, decode_scalar, is_success, parse_error
from .session import Credentials, SessionManager, VersionState

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/login"
VERSION_PATH = "/api/version"

_VERSION_PREFIX_RX = re.compile(r"^(\d+\.\d+)")


def extract_version(raw: str) -> str:
    """Return the ``major.minor`` prefix of ``raw``, or ``raw`` unchanged."""

    match = _VERSION_PREFIX_RX.match(raw)
    if match:
        return match.group(1)
    return raw


class Authenticator:
    """Obtain session tokens and pin the protocol version."""

    def __init__(
        self,
        sessions: SessionManager,
        transport: Transport,
        *,
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        self._sessions = sessions
        self._transport = transport
        self._default_headers = default_headers

    def authenticate(self, credentials: Credentials, *, timeout: float | None = None) -> str:
        """Log in with ``credentials`` and return the new session token.

        The previous session is discarded before the login call; only its
        cached version survives. When no version is known yet, discovery runs
        right after the login and its failure fails the whole operation.

        Raises:
            AuthenticationError: the array rejected the credentials (HTTP 401).
            APIError: the login call failed with any other status.
            VersionError: version discovery failed after a successful login.
        """

        session = self._sessions.start()
        headers = resolved_headers(session.version, self._default_headers)
        credentials.as_auth().apply(headers)
        response = self._transport.send(
            "GET", session.resolve_url(LOGIN_PATH), headers=headers, timeout=timeout
        )
        if not is_success(response.status_code):
            error = parse_error(response)
            if error.status_code == 401:
                raise AuthenticationError(
                    str(error),
                    status_code=401,
                    error_code=error.error_code,
                    details=error.details,
                ) from error
            raise error

        token = decode_scalar(response)
        if not token:
            raise UnexpectedResponseError(
                "Login response did not contain a session token",
                status_code=response.status_code,
            )
        self._sessions.establish(token, credentials)
        logger.info("Authenticated to PowerFlex as %s", credentials.username)

        if self._sessions.current.version_state is VersionState.UNKNOWN:
            try:
                self.discover_version(timeout=timeout)
            except PowerFlexError as exc:
                raise VersionError(f"error getting version of PowerFlex: {exc}") from exc
        return token

    def discover_version(self, *, refresh: bool = False, timeout: float | None = None) -> str:
        """Return the protocol version, asking the array once per session.

        This is a single attempt: a 401 here is surfaced, not recovered.
        """

        current = self._sessions.current
        if not refresh and current.version_state is VersionState.RESOLVED:
            return current.version  # type: ignore[return-value]

        headers = current.headers(self._default_headers)
        response = self._transport.send(
            "GET", current.resolve_url(VERSION_PATH), headers=headers, timeout=timeout
        )
        if not is_success(response.status_code):
            raise parse_error(response)
        return self.record_version(decode_scalar(response))

    def record_version(self, raw: str) -> str:
        version = extract_version(raw)
        self._sessions.set_version(version)
        logger.debug("PowerFlex protocol version resolved to %s (raw %r)", version, raw)
        return version


__all__ = ["Authenticator", "LOGIN_PATH", "VERSION_PATH", "extract_version"]
