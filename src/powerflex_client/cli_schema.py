"""Schema describing important fields for CLI table rendering."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

Row = Mapping[str, Any]
ValueFormatter = Callable[[Any], str]
SortKey = Callable[[Row], Any]


@dataclass(frozen=True)
class Column:
    """Describe how to pull and format a column for Rich tables."""

    header: str
    keys: tuple[str, ...] = ()
    formatter: ValueFormatter | None = None
    justify: str = "left"

    def render(self, row: Row) -> str:
        value: Any | None = None
        for key in self.keys:
            value = row.get(key)
            if value is not None:
                break
        if value is None:
            return ""
        if self.formatter:
            return self.formatter(value)
        return str(value)


@dataclass(frozen=True)
class TableView:
    """Describe a Rich table for a CLI command."""

    title: str
    columns: tuple[Column, ...]
    sort_key: SortKey | None = None


def _kb_to_gib(value: Any) -> str:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return ""
    return f"{number / (1024**2):.2f}"


def _sort_name(row: Row) -> str:
    return str(row.get("name") or row.get("id") or "").lower()


CLI_TABLE_VIEWS: dict[str, TableView] = {
    "systems.list": TableView(
        title="Systems",
        columns=(
            Column("Name", keys=("name",)),
            Column("ID", keys=("id",)),
            Column("Version", keys=("systemVersionName",)),
            Column("MDM Cluster", keys=("mdmClusterState",)),
        ),
        sort_key=_sort_name,
    ),
    "volumes.list": TableView(
        title="Volumes",
        columns=(
            Column("Name", keys=("name",)),
            Column("ID", keys=("id",)),
            Column("Pool ID", keys=("storagePoolId",)),
            Column("Size (GiB)", keys=("sizeInKb",), formatter=_kb_to_gib, justify="right"),
            Column("Type", keys=("volumeType",)),
        ),
        sort_key=_sort_name,
    ),
}
