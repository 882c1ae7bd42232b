"""Composition root for one browser window.

``BrowserSession`` wires the listing scheduler, directory tree, listing
table, selection coordinator, and file operations together. The GUI shell
calls ``pump`` periodically on its interactive thread; every tree and table
mutation happens inside that call or inside a direct pick/file-op call.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from ..copier import copy_file
from ..errors import NoSelectionError
from ..file_model import EntryKind, ListingResult, PathEntry, list_directory
from ..file_ops import CopyResult, CreateResult, DeleteResult, FileOps, RenameResult, Target
from ..launcher import Launcher
from ..listing_table import ListingTable
from ..presentation import DefaultPresentationProvider, PresentationProvider
from ..selection import SelectionCoordinator, SelectionState
from ..tree_model import DirectoryTree, NodeRef
from .listing_scheduler import ListingScheduler

logger = logging.getLogger(__name__)


class BrowserSession:
    def __init__(
        self,
        presentation: PresentationProvider | None = None,
        *,
        show_hidden: bool = False,
        max_workers: int = 4,
        launcher: Launcher | None = None,
        copier: Callable[[Path, Path], bool] = copy_file,
        list_fn: Callable[[Path, bool], ListingResult] = list_directory,
    ) -> None:
        self.presentation = presentation or DefaultPresentationProvider()
        self.show_hidden = show_hidden
        self.scheduler = ListingScheduler(list_fn, max_workers=max_workers, show_hidden=show_hidden)
        self.tree = DirectoryTree(self.scheduler)
        self.table = ListingTable(self.presentation)
        self.selection = SelectionState()
        self.coordinator = SelectionCoordinator(self.selection, self.tree, self.table, self.scheduler)
        self.file_ops = FileOps(self.selection, self.tree, self.coordinator, copier, show_hidden=show_hidden)
        self.launcher = launcher or Launcher()

        roots = self.presentation.roots()
        self.tree.seed(roots, lambda path: list_fn(path, show_hidden))
        logger.debug("seeded tree with %d roots", len(roots))

    @property
    def current(self) -> PathEntry | None:
        return self.selection.current

    @property
    def busy(self) -> bool:
        return self.scheduler.busy

    def pump(self) -> int:
        """Apply finished listings on the calling (interactive) thread."""
        return self.scheduler.dispatch_completed()

    def wait_idle(self, timeout_seconds: float = 5.0, poll_seconds: float = 0.01) -> bool:
        """Pump until no listing is in flight; ``False`` if ``timeout_seconds`` ran out."""
        deadline = time.monotonic() + timeout_seconds
        while True:
            self.pump()
            if not self.busy:
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(poll_seconds)

    def expand(self, ref: NodeRef) -> bool:
        return self.tree.expand(ref)

    def select_from_tree(self, ref: NodeRef) -> PathEntry:
        return self.coordinator.select_from_tree(ref)

    def select_from_table(self, row: int) -> PathEntry:
        return self.coordinator.select_from_table(row)

    def rename(self, target: Target, new_name: str) -> RenameResult:
        return self.file_ops.rename(target, new_name)

    def delete(self, target: Target = None) -> DeleteResult:
        return self.file_ops.delete(target)

    def create_entry(self, parent_path: Target, name: str, kind: EntryKind) -> CreateResult:
        return self.file_ops.create_entry(parent_path, name, kind)

    def copy(self, target: Target, new_name: str) -> CopyResult:
        return self.file_ops.copy(target, new_name)

    def launch_current(self, action: str) -> str | None:
        """Run launcher ``action`` on the current file; return an error message or ``None``."""
        if self.current is None:
            return str(NoSelectionError(f"No file selected to {action}."))
        return self.launcher.launch(action, self.current.path)

    def close(self) -> None:
        self.scheduler.close()

    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


__all__ = ["BrowserSession"]
