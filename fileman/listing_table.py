"""Row-indexed projection of the most recently listed directory.

Row ``i`` always maps to ``snapshot.all_entries[i]`` until the next ``load``.
Presentation-layer sorting goes through ``sorted_rows``, which returns a
view-to-model index order and never reorders the rows themselves.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .file_model import ListingSnapshot, PathEntry
from .presentation import PresentationProvider


@dataclass(frozen=True)
class TableColumn:
    key: str
    title: str
    value_type: type


COLUMNS: tuple[TableColumn, ...] = (
    TableColumn("icon", "Icon", str),
    TableColumn("name", "File", str),
    TableColumn("path", "Path/name", str),
    TableColumn("size", "Size", int),
    TableColumn("modified", "Last Modified", datetime),
    TableColumn("readable", "R", bool),
    TableColumn("writable", "W", bool),
    TableColumn("executable", "E", bool),
    TableColumn("directory", "D", bool),
    TableColumn("file", "F", bool),
)

TableListener = Callable[["ListingTable"], None]


class ListingTable:
    """Ten fixed columns over one ``ListingSnapshot``."""

    def __init__(self, presentation: PresentationProvider) -> None:
        self._presentation = presentation
        self._snapshot: ListingSnapshot | None = None
        self._rows: tuple[PathEntry, ...] = ()
        self._listeners: list[TableListener] = []
        self.version = 0

    @property
    def snapshot(self) -> ListingSnapshot | None:
        return self._snapshot

    @property
    def directory(self) -> Path | None:
        return self._snapshot.directory_entry.path if self._snapshot is not None else None

    def add_listener(self, listener: TableListener) -> None:
        self._listeners.append(listener)

    def load(self, snapshot: ListingSnapshot) -> None:
        """Replace every row; row indices from before the call are stale."""
        self._snapshot = snapshot
        self._rows = snapshot.all_entries
        self.version += 1
        for listener in list(self._listeners):
            listener(self)

    def row_count(self) -> int:
        return len(self._rows)

    def column_count(self) -> int:
        return len(COLUMNS)

    def entry_at(self, row: int) -> PathEntry:
        if row < 0 or row >= len(self._rows):
            raise IndexError(f"row {row} out of range for {len(self._rows)} rows")
        return self._rows[row]

    def value_at(self, row: int, column: int) -> object:
        entry = self.entry_at(row)
        key = COLUMNS[column].key
        if key == "icon":
            return self._presentation.icon_for(entry.path)
        if key == "name":
            return self._presentation.display_name_for(entry.path)
        if key == "path":
            return str(entry.path)
        if key == "size":
            return entry.size_bytes
        if key == "modified":
            return entry.last_modified
        if key == "readable":
            return entry.can_read
        if key == "writable":
            return entry.can_write
        if key == "executable":
            return entry.can_execute
        if key == "directory":
            return entry.is_directory
        return entry.is_regular_file

    def row_values(self, row: int) -> tuple[object, ...]:
        return tuple(self.value_at(row, column) for column in range(len(COLUMNS)))

    def sorted_rows(self, column: int, descending: bool = False) -> list[int]:
        """Model row indices ordered by ``column``; ties keep model order."""
        rows = list(range(len(self._rows)))
        if COLUMNS[column].value_type is str:
            return sorted(
                rows,
                key=lambda row: str(self.value_at(row, column)).casefold(),
                reverse=descending,
            )
        return sorted(rows, key=lambda row: self.value_at(row, column), reverse=descending)


__all__ = [
    "TableColumn",
    "COLUMNS",
    "TableListener",
    "ListingTable",
]
