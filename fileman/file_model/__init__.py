"""Domain model for filesystem entries and one-level directory listings.

This package contains non-UI primitives:
- path entries with metadata captured at listing time
- immutable listing snapshots and Result-shaped listing outcomes
- the synchronous directory lister used by background workers
"""

from __future__ import annotations

from .types import EntryKind, PathEntry
from .snapshot import ListingResult, ListingSnapshot
from .fs import canonical_path, is_hidden_name, list_directory, listing_sort_key, path_entry_for

__all__ = [
    "EntryKind",
    "PathEntry",
    "ListingSnapshot",
    "ListingResult",
    "canonical_path",
    "path_entry_for",
    "is_hidden_name",
    "listing_sort_key",
    "list_directory",
]
