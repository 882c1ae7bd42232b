"""Domain datatypes for filesystem entries observed at listing time."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


class EntryKind(enum.Enum):
    """Kind of entry a create operation should make."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class PathEntry:
    """One filesystem path plus metadata captured when it was observed.

    Entries are never refreshed in place; a later listing produces new ones.
    """

    path: Path
    is_directory: bool = False
    is_regular_file: bool = False
    size_bytes: int = 0
    mtime_ns: int = 0
    can_read: bool = False
    can_write: bool = False
    can_execute: bool = False

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    @property
    def parent_path(self) -> Path:
        return self.path.parent

    @property
    def last_modified(self) -> datetime:
        return datetime.fromtimestamp(self.mtime_ns / 1_000_000_000)


__all__ = [
    "EntryKind",
    "PathEntry",
]
