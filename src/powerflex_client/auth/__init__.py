"""Authentication strategies for PowerFlex."""
from .base import AuthStrategy
from .basic import BasicAuth
from .token import SessionTokenAuth

__all__ = ["AuthStrategy", "BasicAuth", "SessionTokenAuth"]
