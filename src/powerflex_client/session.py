"""Session state shared by every call issued through one client."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from urllib.parse import urljoin, urlparse

from .auth.basic import BasicAuth
from .auth.token import SessionTokenAuth
from .capabilities import parse_version
from .config import resolved_headers


class VersionState(Enum):
    UNKNOWN = "unknown"
    RESOLVED = "resolved"


@dataclass(frozen=True, slots=True)
class Credentials:
    username: str
    password: str = field(repr=False)

    def as_auth(self) -> BasicAuth:
        return BasicAuth(self.username, self.password)


def normalize_endpoint(endpoint: str) -> str:
    """Strip a trailing slash and a trailing ``/api`` segment."""

    normalized = endpoint.strip().rstrip("/")
    if normalized.endswith("/api"):
        normalized = normalized[: -len("/api")]
    return normalized


@dataclass(slots=True)
class Session:
    """Token, credentials and protocol version for one login."""

    endpoint: str
    version: str | None = None
    token: str = ""
    credentials: Credentials | None = None

    @property
    def version_state(self) -> VersionState:
        return VersionState.RESOLVED if self.version else VersionState.UNKNOWN

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def resolve_url(self, path: str) -> str:
        parsed = urlparse(path)
        if parsed.scheme and parsed.netloc:
            return path
        return urljoin(f"{normalize_endpoint(self.endpoint)}/", path.lstrip("/"))

    def headers(self, default_headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Build the content negotiation pair plus the token header.

        Raises:
            VersionError: the version is set but not numeric.
        """

        parse_version(self.version)
        headers = resolved_headers(self.version, default_headers)
        SessionTokenAuth(self.token, self.version).apply(headers)
        return headers


class SessionManager:
    """Own the current `Session` of a client; the only writer of its fields."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._lock = threading.Lock()

    @property
    def current(self) -> Session:
        return self._session

    def snapshot(self) -> Session:
        with self._lock:
            return replace(self._session)

    def start(self) -> Session:
        """Replace the session wholesale, dropping the token.

        The cached version and the credentials of the last successful login
        carry over; `establish` replaces the credentials once a login succeeds.
        """

        with self._lock:
            self._session = Session(
                endpoint=self._session.endpoint,
                version=self._session.version,
                credentials=self._session.credentials,
            )
            return self._session

    def establish(self, token: str, credentials: Credentials) -> None:
        with self._lock:
            self._session.token = token
            self._session.credentials = credentials

    def install(self, session: Session) -> None:
        with self._lock:
            self._session = session

    def set_token(self, token: str) -> None:
        with self._lock:
            self._session.token = token

    def set_version(self, version: str | None) -> None:
        with self._lock:
            self._session.version = version or None


__all__ = ["Credentials", "Session", "SessionManager", "VersionState", "normalize_endpoint"]
