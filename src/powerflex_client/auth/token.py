"""Session token presentation."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field

from requests.auth import _basic_auth_str

from ..capabilities import resolve_capabilities
from .base import AuthStrategy


@dataclass(slots=True)
class SessionTokenAuth(AuthStrategy):
    """Apply a login-issued token.

    Version 4.0 and later gateways accept ``Bearer <token>``; older ones expect
    the token as the password of an anonymous basic credential.
    """

    token: str = field(repr=False)
    version: str | None = None

    def apply(self, headers: MutableMapping[str, str]) -> None:
        if not self.token:
            return
        if resolve_capabilities(self.version).bearer_token:
            headers["Authorization"] = f"Bearer {self.token}"
        else:
            headers["Authorization"] = _basic_auth_str("", self.token)
