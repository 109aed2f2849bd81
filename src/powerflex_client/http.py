"""HTTP utilities for PowerFlex API access."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import requests
from requests import PreparedRequest, Response

from .exceptions import (
    APIError,
    BodyReadError,
    RequestError,
    UnauthorizedError,
    UnexpectedResponseError,
)

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"
REDACTED = "******"


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def read_body(response: Response) -> bytes:
    """Drain and close the response body.

    Raises:
        BodyReadError: the stream broke before the body was consumed.
    """

    try:
        return response.content
    except (requests.RequestException, OSError) as exc:
        raise BodyReadError("error reading body") from exc
    finally:
        response.close()


def decode_scalar(response: Response) -> str:
    """Return a bare string result such as ``"4.0"`` without its quotes."""

    body = read_body(response)
    text = body.decode(response.encoding or "utf-8", errors="replace").strip()
    return text.removeprefix('"').removesuffix('"')


def decode_json(response: Response) -> Any:
    """Parse JSON with helpful error context; an empty body yields ``None``."""

    body = read_body(response)
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as exc:
        raise UnexpectedResponseError(
            "Response did not contain valid JSON", status_code=response.status_code
        ) from exc


def parse_error(response: Response) -> APIError:
    """Turn a non-2xx response into a structured error.

    A 401 becomes `UnauthorizedError` so callers can tell an expired session
    apart from other rejections. Bodies that do not carry a ``message`` give a
    generic error with the HTTP status and reason.
    """

    status = response.status_code
    error_cls = UnauthorizedError if status == 401 else APIError
    try:
        body = read_body(response)
    except BodyReadError:
        body = b""

    payload: Any = None
    if body.strip():
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None

    if isinstance(payload, Mapping):
        message = payload.get("message")
        if isinstance(message, str) and message:
            error_code = payload.get("errorCode")
            return error_cls(
                message,
                status_code=status,
                error_code=error_code if isinstance(error_code, int) else None,
                details=payload.get("details"),
            )

    message = (response.reason or "").strip() or "unparseable error response"
    raw = body.decode("utf-8", errors="replace")[:200] or None
    return error_cls(message, status_code=status, details=raw)


class Transport:
    """Send requests over a shared `requests.Session`."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        verify: bool | str = True,
        timeout: float = 30.0,
        show_http: bool = False,
    ) -> None:
        self._session = session or requests.Session()
        self.verify = verify
        self.timeout = timeout
        self.show_http = show_http

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None = None,
        data: bytes | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Issue one request; the caller owns (and must close) the response.

        Raises:
            RequestError: the request could not be sent or no response arrived.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=dict(headers),
                data=data,
                timeout=self.timeout if timeout is None else timeout,
                verify=self.verify,
                stream=True,
            )
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            raise RequestError(
                f"Failed to communicate with PowerFlex API: {reason}", details=reason
            ) from exc
        if self.show_http:
            log_exchange(response)
        return response

    def close(self) -> None:
        self._session.close()


def log_exchange(response: Response) -> None:
    request = response.request
    if request is not None:
        logger.debug("PowerFlex HTTP request:\n%s", dump_request(request))
    logger.debug(
        "PowerFlex HTTP response: %s %s\n%s",
        response.status_code,
        response.reason,
        _format_headers(response.headers),
    )


def dump_request(request: PreparedRequest) -> str:
    lines = [f"{request.method} {request.url}", _format_headers(request.headers)]
    body = request.body
    if body and not is_octet_stream(request.headers):
        lines.append(body.decode("utf-8", errors="replace") if isinstance(body, bytes) else str(body))
    return "\n".join(line for line in lines if line)


def is_octet_stream(headers: Mapping[str, str]) -> bool:
    return OCTET_STREAM in (headers.get("Content-Type") or "")


def _format_headers(headers: Mapping[str, str]) -> str:
    rendered = []
    for key, value in headers.items():
        if key.lower() == "authorization":
            value = REDACTED
        rendered.append(f"{key}: {value}")
    return "\n".join(rendered)
