"""Current-file selection and the tree/table picks that drive it.

``SelectionCoordinator`` is the only writer of ``SelectionState.current``.
Table reloads are tagged with a token so a listing that finishes after a
newer pick updates the tree but not the table.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .file_model import ListingResult, PathEntry
from .listing_table import ListingTable
from .tree_model import DirectoryTree, ListingSubmitter, NodeRef

SelectionListener = Callable[[PathEntry | None], None]


@dataclass
class SelectionState:
    current: PathEntry | None = None


class SelectionCoordinator:
    def __init__(
        self,
        state: SelectionState,
        tree: DirectoryTree,
        table: ListingTable,
        scheduler: ListingSubmitter,
    ) -> None:
        self.state = state
        self._tree = tree
        self._table = table
        self._scheduler = scheduler
        self._table_token = 0
        self._listeners: list[SelectionListener] = []

    @property
    def current(self) -> PathEntry | None:
        return self.state.current

    def add_listener(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def _set_current(self, entry: PathEntry) -> None:
        self.state.current = entry
        for listener in list(self._listeners):
            listener(entry)

    def table_loader(self) -> Callable[[ListingResult], None]:
        """Return a callback that loads the table unless a newer load was requested."""
        self._table_token += 1
        token = self._table_token

        def load(result: ListingResult) -> None:
            if token != self._table_token:
                return
            self._table.load(result.snapshot)

        return load

    def select_from_tree(self, ref: NodeRef) -> PathEntry:
        """Make ``ref``'s entry current, expand it, and list it into the table."""
        entry = self._tree.entry(ref)
        self._set_current(entry)
        load_table = self.table_loader() if entry.is_directory else None
        expanding = self._tree.expand(ref, on_loaded=load_table)
        if load_table is not None and not expanding:
            self._scheduler.submit(entry.path, load_table)
        return entry

    def select_from_table(self, row: int) -> PathEntry:
        """Make table row ``row`` current; raises ``IndexError`` for a bad row."""
        entry = self._table.entry_at(row)
        self._set_current(entry)
        return entry

    def show_listing(self, directory: Path) -> None:
        """Reload the table with ``directory`` without changing ``current``."""
        self._scheduler.submit(directory, self.table_loader())


__all__ = [
    "SelectionListener",
    "SelectionState",
    "SelectionCoordinator",
]
