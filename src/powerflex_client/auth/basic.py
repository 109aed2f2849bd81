"""HTTP Basic authentication support."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field

from requests.auth import _basic_auth_str

from .base import AuthStrategy


@dataclass(frozen=True, slots=True)
class BasicAuth(AuthStrategy):
    """Username/password pair used for the login exchange."""

    username: str
    password: str = field(repr=False)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        headers["Authorization"] = _basic_auth_str(self.username, self.password)
