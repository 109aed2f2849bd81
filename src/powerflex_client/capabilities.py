"""Capability matrix for PowerFlex REST protocol versions."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .exceptions import VersionError

VersionTuple = tuple[int, int]

_RELEASE_RX = re.compile(r"^\s*(\d+)(?:\.(\d+))?")


@dataclass(frozen=True, slots=True)
class CapabilityProfile:
    """Feature surface of a PowerFlex protocol version family."""

    label: str
    min_version: VersionTuple
    bearer_token: bool


_BASE_PROFILES: Sequence[CapabilityProfile] = (
    CapabilityProfile(label="3.x", min_version=(0, 0), bearer_token=False),
    CapabilityProfile(label="4.0", min_version=(4, 0), bearer_token=True),
)


def resolve_capabilities(version: str | None) -> CapabilityProfile:
    """Return the profile for ``version``; an unknown version gets the legacy profile."""

    version_tuple = parse_version(version)
    profile = _BASE_PROFILES[0]
    if version_tuple is not None:
        for candidate in _BASE_PROFILES:
            if version_tuple >= candidate.min_version:
                profile = candidate
    return profile


def parse_version(version: str | None) -> VersionTuple | None:
    """Parse ``major.minor``; ``None`` for an empty value.

    Raises:
        VersionError: the value does not start with a number.
    """

    if not version:
        return None
    match = _RELEASE_RX.match(version)
    if not match:
        raise VersionError(f"invalid PowerFlex protocol version {version!r}")
    return int(match.group(1)), int(match.group(2) or 0)


__all__ = ["CapabilityProfile", "parse_version", "resolve_capabilities"]
