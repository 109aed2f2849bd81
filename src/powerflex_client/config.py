"""Configuration helpers for PowerFlex client."""

from __future__ import annotations

import os
import ssl
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import PowerFlexError

JSON_MEDIA_TYPE = "application/json"

_FALSEY = {"0", "false", "no", "off", ""}


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    value = environ.get(name)
    if value is None:
        return False
    return value.strip().lower() not in _FALSEY


@dataclass(slots=True)
class ClientConfig:
    """Typed configuration for `PowerFlexClient`."""

    endpoint: str
    verify_ssl: bool | str = True
    use_certs: bool = False
    timeout: float = 30.0
    version: str | None = None
    default_headers: Mapping[str, str] | None = None
    show_http: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a configuration from ``POWERFLEX_*`` environment variables."""

        env = os.environ if environ is None else environ
        endpoint = (env.get("POWERFLEX_ENDPOINT") or "").strip()
        if not endpoint:
            raise PowerFlexError("endpoint is required")
        timeout = env.get("POWERFLEX_TIMEOUT")
        return cls(
            endpoint=endpoint,
            verify_ssl=not _env_flag(env, "POWERFLEX_INSECURE"),
            use_certs=_env_flag(env, "POWERFLEX_USECERTS"),
            timeout=float(timeout) if timeout else 30.0,
            version=(env.get("POWERFLEX_VERSION") or "").strip() or None,
            show_http=_env_flag(env, "POWERFLEX_SHOWHTTP"),
        )

    def resolved_verify(self) -> bool | str:
        """Value handed to ``requests`` as ``verify``."""

        if self.verify_ssl is True and self.use_certs:
            paths = ssl.get_default_verify_paths()
            return paths.cafile or paths.openssl_cafile or True
        return self.verify_ssl


def content_type_for(version: str | None) -> str:
    """Return the JSON media type, qualified with ``version`` when known."""

    if version:
        return f"{JSON_MEDIA_TYPE};version={version}"
    return JSON_MEDIA_TYPE


def resolved_headers(
    version: str | None, default_headers: Mapping[str, str] | None = None
) -> dict[str, str]:
    media_type = content_type_for(version)
    headers: dict[str, str] = dict(default_headers or {})
    headers["Accept"] = media_type
    headers["Content-Type"] = media_type
    return headers
