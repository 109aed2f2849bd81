"""PowerFlex system (cluster) helpers."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import ResolutionError
from .base import ResourceBase

STATISTICS_REL = "/api/System/relationship/Statistics"


class SystemsResource(ResourceBase):
    """Work with the systems managed by the gateway."""

    def list(self) -> list[dict[str, Any]]:
        return self._get("/api/types/System/instances") or []

    def get(self, href: str) -> dict[str, Any]:
        return self._get(href)

    def find(self, *, system_id: str | None = None, name: str | None = None) -> dict[str, Any]:
        """Return the first system matching ``system_id`` or ``name``.

        Raises:
            ResolutionError: no system matched.
        """

        for system in self.list():
            if system_id and system.get("id") == system_id:
                return system
            if name and system.get("name") == name:
                return system
        raise ResolutionError("systemid or systemname not found")

    def statistics(self, system: Mapping[str, Any]) -> dict[str, Any]:
        return self._follow(system, STATISTICS_REL)


__all__ = ["SystemsResource"]
