"""High-level PowerFlex client entrypoints."""
from .client import PowerFlexClient
from .config import ClientConfig
from .exceptions import APIError, PowerFlexError
from .links import Link, resolve_link
from .session import Session, VersionState

__all__ = [
    "PowerFlexClient",
    "ClientConfig",
    "PowerFlexError",
    "APIError",
    "Link",
    "resolve_link",
    "Session",
    "VersionState",
]
