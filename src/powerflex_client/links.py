"""Hyperlink records embedded in PowerFlex resource bodies."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import LinkNotFoundError


@dataclass(frozen=True, slots=True)
class Link:
    """A relation/href pair as returned in a resource's ``links`` list."""

    rel: str
    href: str

    @classmethod
    def from_payload(cls, payload: Link | Mapping[str, Any]) -> Link:
        if isinstance(payload, Link):
            return payload
        return cls(rel=str(payload.get("rel", "")), href=str(payload.get("href", "")))


def resolve_link(links: Iterable[Link | Mapping[str, Any]] | None, rel: str) -> Link:
    """Return the first link whose relation equals ``rel`` exactly.

    Raises:
        LinkNotFoundError: no record carries the relation.
    """

    for entry in links or ():
        link = Link.from_payload(entry)
        if link.rel == rel:
            return link
    raise LinkNotFoundError(rel)


__all__ = ["Link", "resolve_link"]
