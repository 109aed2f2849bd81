"""Volume helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import ResourceBase

STATISTICS_REL = "/api/Volume/relationship/Statistics"
DEFAULT_REMOVE_MODE = "ONLY_ME"


class VolumesResource(ResourceBase):
    """Work with PowerFlex volumes."""

    def list(self) -> list[dict[str, Any]]:
        return self._get("/api/types/Volume/instances") or []

    def get(self, volume_id: str) -> dict[str, Any]:
        return self._get(f"/api/instances/Volume::{volume_id}")

    def find_id(self, name: str) -> str:
        """Resolve a volume name to its identifier."""

        return self._post_scalar(
            "/api/types/Volume/instances/action/queryIdByKey", {"name": name}
        )

    def create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return self._post("/api/types/Volume/instances", dict(payload))

    def statistics(self, volume: Mapping[str, Any]) -> dict[str, Any]:
        return self._follow(volume, STATISTICS_REL)

    def remove(self, volume: Mapping[str, Any], mode: str = DEFAULT_REMOVE_MODE) -> None:
        self._action(volume, "removeVolume", {"removeMode": mode or DEFAULT_REMOVE_MODE})

    def set_size(self, volume: Mapping[str, Any], size_in_gb: int | str) -> None:
        self._action(volume, "setVolumeSize", {"sizeInGB": str(size_in_gb)})
