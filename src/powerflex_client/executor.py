"""Authenticated request execution with one-shot re-login on HTTP 401."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from requests import Response

from .authenticator import Authenticator
from .exceptions import AuthenticationError, PowerFlexError, UnauthorizedError
from .http import Transport, decode_json, decode_scalar, is_success, parse_error
from .session import SessionManager, VersionState

logger = logging.getLogger(__name__)

T = TypeVar("T")

TimeRecorder = Callable[[str, float], None]


def encode_payload(payload: Any | None) -> bytes | None:
    """Serialize a request body once so a replay sends identical bytes."""

    if payload is None:
        return None
    if isinstance(payload, bytes):
        return payload
    return json.dumps(payload).encode("utf-8")


class RequestExecutor:
    """Single chokepoint for every call made on behalf of resource wrappers.

    A call that comes back with HTTP 401 is replayed exactly once after logging
    in again with the credentials of the last successful login. Every other
    failure, and any failure of the replay, reaches the caller as raised.
    """

    def __init__(
        self,
        sessions: SessionManager,
        transport: Transport,
        authenticator: Authenticator,
        *,
        default_headers: Mapping[str, str] | None = None,
        time_recorder: TimeRecorder | None = None,
    ) -> None:
        self._sessions = sessions
        self._transport = transport
        self._authenticator = authenticator
        self._default_headers = default_headers
        self.time_recorder = time_recorder

    def execute(
        self,
        method: str,
        path: str,
        *,
        payload: Any | None = None,
        params: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Issue a call and return the decoded JSON body (``None`` when empty)."""

        return self._run(method, path, payload, params, timeout, decode_json)

    def execute_scalar(
        self,
        method: str,
        path: str,
        *,
        payload: Any | None = None,
        params: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        """Issue a call whose response is a bare JSON string."""

        return self._run(method, path, payload, params, timeout, decode_scalar)

    def with_reauth(self, attempt: Callable[[], T], *, timeout: float | None = None) -> T:
        """Run ``attempt``; on HTTP 401 log in again and run it one more time."""

        try:
            return attempt()
        except UnauthorizedError:
            credentials = self._sessions.current.credentials
            if credentials is None:
                raise
            logger.info("PowerFlex session token rejected, re-authenticating")
            try:
                self._authenticator.authenticate(credentials, timeout=timeout)
            except PowerFlexError as exc:
                raise AuthenticationError(
                    f"Error authenticating: {exc}",
                    status_code=exc.status_code,
                    details=exc.details,
                ) from exc
        return attempt()

    def _run(
        self,
        method: str,
        path: str,
        payload: Any | None,
        params: Mapping[str, str] | None,
        timeout: float | None,
        decoder: Callable[[Response], T],
    ) -> T:
        started = time.monotonic()
        body = encode_payload(payload)
        try:
            if self._sessions.current.version_state is VersionState.UNKNOWN:
                self._authenticator.discover_version(timeout=timeout)
            return self.with_reauth(
                lambda: self._attempt(method, path, body, params, timeout, decoder),
                timeout=timeout,
            )
        finally:
            if self.time_recorder is not None:
                self.time_recorder(f"{method.upper()} {path}", time.monotonic() - started)

    def _attempt(
        self,
        method: str,
        path: str,
        body: bytes | None,
        params: Mapping[str, str] | None,
        timeout: float | None,
        decoder: Callable[[Response], T],
    ) -> T:
        session = self._sessions.current
        url = session.resolve_url(path)
        headers = session.headers(self._default_headers)
        logger.info("PowerFlex request %s %s", method.upper(), url)
        response = self._transport.send(
            method, url, headers=headers, params=params, data=body, timeout=timeout
        )
        if not is_success(response.status_code):
            raise parse_error(response)
        return decoder(response)


__all__ = ["RequestExecutor", "encode_payload"]
