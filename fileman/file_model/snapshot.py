"""Immutable one-level directory listing results."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import EnumerationFailed
from .types import PathEntry


@dataclass(frozen=True)
class ListingSnapshot:
    """All entries of one directory plus the subdirectory subset.

    ``subdirectory_entries`` keeps the relative order of ``all_entries``.
    """

    directory_entry: PathEntry
    all_entries: tuple[PathEntry, ...] = ()
    subdirectory_entries: tuple[PathEntry, ...] = ()

    @classmethod
    def from_entries(cls, directory_entry: PathEntry, entries: list[PathEntry]) -> "ListingSnapshot":
        return cls(
            directory_entry=directory_entry,
            all_entries=tuple(entries),
            subdirectory_entries=tuple(entry for entry in entries if entry.is_directory),
        )

    @classmethod
    def empty(cls, directory_entry: PathEntry) -> "ListingSnapshot":
        return cls(directory_entry=directory_entry)


@dataclass(frozen=True)
class ListingResult:
    """Outcome of one enumeration: a snapshot, or an empty one plus ``error``."""

    snapshot: ListingSnapshot
    error: EnumerationFailed | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "ListingSnapshot",
    "ListingResult",
]
