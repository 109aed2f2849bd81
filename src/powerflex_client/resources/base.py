"""Common helpers for resource wrappers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..links import Link, resolve_link

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import PowerFlexClient

SELF_REL = "self"


class ResourceBase:
    """Provide shared helpers for resource modules."""

    def __init__(self, client: PowerFlexClient) -> None:
        self._client = client

    def _get(self, path: str, *, params: Mapping[str, str] | None = None) -> Any:
        return self._client.execute("GET", path, params=params)

    def _post(self, path: str, payload: Any | None = None) -> Any:
        return self._client.execute("POST", path, payload=payload)

    def _post_scalar(self, path: str, payload: Any | None = None) -> str:
        return self._client.execute_scalar("POST", path, payload=payload)

    @staticmethod
    def _link(resource: Mapping[str, Any], rel: str) -> Link:
        links: Iterable[Any] = resource.get("links") or ()
        return resolve_link(links, rel)

    def _follow(self, resource: Mapping[str, Any], rel: str) -> Any:
        """GET the target of the ``rel`` link embedded in ``resource``."""

        return self._get(self._link(resource, rel).href)

    def _action(self, resource: Mapping[str, Any], action: str, payload: Any) -> Any:
        """POST ``payload`` to ``<self href>/action/<action>``."""

        href = self._link(resource, SELF_REL).href.rstrip("/")
        return self._post(f"{href}/action/{action}", payload)
