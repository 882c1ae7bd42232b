"""Rename, delete, create, and copy with tree/table follow-up.

Every operation runs validate -> mutate filesystem -> mutate tree -> report.
Failures come back as result objects carrying a ``FileManagerError``; nothing
raises past this module. When the parent directory has no materialized tree
node the tree step is skipped and only the table is refreshed.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .copier import copy_file
from .errors import (
    AlreadyExists,
    CopyFailed,
    CreateFailed,
    DeleteFailed,
    FileManagerError,
    NoSelectionError,
    RenameFailed,
)
from .file_model import EntryKind, PathEntry, canonical_path, is_hidden_name, path_entry_for
from .selection import SelectionCoordinator, SelectionState
from .tree_model import DirectoryTree

logger = logging.getLogger(__name__)

Target = PathEntry | Path | str | None


@dataclass(frozen=True)
class FileOpResult:
    path: Path | None
    error: FileManagerError | None = None
    tree_updated: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RenameResult(FileOpResult):
    new_path: Path | None = None


@dataclass(frozen=True)
class DeleteResult(FileOpResult):
    pass


@dataclass(frozen=True)
class CreateResult(FileOpResult):
    kind: EntryKind | None = None
    hidden: bool = False


@dataclass(frozen=True)
class CopyResult(FileOpResult):
    new_path: Path | None = None


def invalid_name_reason(name: str) -> str | None:
    """Return why ``name`` is not a single path component, or ``None``."""
    if not name or not name.strip():
        return "the new name is empty"
    if name in (".", ".."):
        return f"'{name}' is not a valid name"
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    if any(separator in name for separator in separators):
        return "names cannot contain path separators"
    if "\0" in name:
        return "names cannot contain NUL characters"
    return None


def delete_quietly(path: Path) -> tuple[bool, str | None]:
    """Delete ``path`` (recursively for directories) without raising.

    Symlinks are removed, never followed. Returns ``(deleted, cause)``; the
    path counts as deleted only when nothing remains at it.
    """
    cause: str | None = None
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, ignore_errors=True)
    else:
        try:
            path.unlink()
        except OSError as exc:
            cause = exc.strerror or str(exc)
    if os.path.lexists(path):
        return False, cause or "some entries could not be removed"
    return True, None


class FileOps:
    def __init__(
        self,
        state: SelectionState,
        tree: DirectoryTree,
        coordinator: SelectionCoordinator,
        copier: Callable[[Path, Path], bool] = copy_file,
        show_hidden: bool = False,
    ) -> None:
        self._state = state
        self._tree = tree
        self._coordinator = coordinator
        self._copier = copier
        self.show_hidden = show_hidden

    def _entry_for(self, target: Target) -> PathEntry:
        if target is None:
            assert self._state.current is not None
            return self._state.current
        if isinstance(target, PathEntry):
            return target
        return path_entry_for(canonical_path(target))

    def _refresh_parent(self, directory: Path) -> bool:
        """List ``directory`` into the table, merging into its node when found."""
        ref = self._tree.find_node(directory)
        if ref is None:
            logger.debug("no tree node for %s; refreshing table only", directory)
            self._coordinator.show_listing(directory)
            return False
        self._tree.refresh(ref, on_loaded=self._coordinator.table_loader())
        return True

    def _remove_tree_node(self, path: Path) -> bool:
        ref = self._tree.find_node(path)
        if ref is None:
            logger.debug("no tree node for %s; skipping removal", path)
            return False
        self._tree.remove_node(ref)
        return True

    def rename(self, target: Target, new_name: str) -> RenameResult:
        if self._state.current is None:
            return RenameResult(path=None, error=NoSelectionError("No file selected to rename."))
        entry = self._entry_for(target)
        path = entry.path

        if not os.path.lexists(path):
            return RenameResult(path=path, error=RenameFailed(path, "it no longer exists"))
        reason = invalid_name_reason(new_name)
        if reason is not None:
            return RenameResult(path=path, error=RenameFailed(path, reason))
        destination = entry.parent_path / new_name
        if os.path.lexists(destination):
            return RenameResult(path=path, error=RenameFailed(path, f"'{new_name}' already exists"))

        was_directory = path.is_dir()
        try:
            os.rename(path, destination)
        except OSError as exc:
            return RenameResult(path=path, error=RenameFailed(path, exc.strerror or str(exc)))
        logger.info("renamed %s -> %s", path, destination)

        tree_updated = self._remove_tree_node(path) if was_directory else False
        self._refresh_parent(entry.parent_path)
        return RenameResult(path=path, new_path=destination, tree_updated=tree_updated)

    def delete(self, target: Target = None) -> DeleteResult:
        """Delete ``target`` (default: the current file); the caller confirms first."""
        if self._state.current is None:
            return DeleteResult(path=None, error=NoSelectionError("No file selected for deletion."))
        entry = self._entry_for(target)
        path = entry.path

        if not os.path.lexists(path):
            return DeleteResult(path=path, error=DeleteFailed(path, "it no longer exists"))
        deleted, cause = delete_quietly(path)
        if not deleted:
            return DeleteResult(path=path, error=DeleteFailed(path, cause or "unknown error"))
        logger.info("deleted %s", path)

        tree_updated = self._remove_tree_node(path)
        self._refresh_parent(entry.parent_path)
        return DeleteResult(path=path, tree_updated=tree_updated)

    def create_entry(self, parent_path: Target, name: str, kind: EntryKind) -> CreateResult:
        """Create ``name`` under ``parent_path`` (a file resolves to its directory)."""
        if self._state.current is None:
            return CreateResult(path=None, kind=kind, error=NoSelectionError("No location selected for new file."))
        directory = self._entry_for(parent_path).path
        if not directory.is_dir():
            directory = directory.parent

        reason = invalid_name_reason(name)
        if reason is not None:
            return CreateResult(path=directory, kind=kind, error=CreateFailed(directory / name, reason))
        path = directory / name
        try:
            if kind is EntryKind.DIRECTORY:
                os.mkdir(path)
            else:
                with open(path, "x", encoding="utf-8"):
                    pass
        except FileExistsError:
            return CreateResult(path=path, kind=kind, error=AlreadyExists(path))
        except OSError as exc:
            return CreateResult(path=path, kind=kind, error=CreateFailed(path, exc.strerror or str(exc)))
        logger.info("created %s %s", kind.value, path)

        tree_updated = False
        hidden = not self.show_hidden and is_hidden_name(name)
        if hidden:
            logger.debug("%s is hidden from listings; skipping insert", path)
        elif kind is EntryKind.DIRECTORY:
            parent_ref = self._tree.find_node(directory)
            if parent_ref is not None:
                self._tree.insert_child(parent_ref, path_entry_for(path))
                tree_updated = True
            else:
                logger.debug("no tree node for %s; skipping insert", directory)
        self._refresh_parent(directory)
        return CreateResult(path=path, kind=kind, tree_updated=tree_updated, hidden=hidden)

    def copy(self, target: Target, new_name: str) -> CopyResult:
        """Copy a regular file next to itself under ``new_name``."""
        if self._state.current is None:
            return CopyResult(path=None, error=NoSelectionError("No file selected to copy."))
        entry = self._entry_for(target)
        path = entry.path

        if not path.is_file():
            return CopyResult(path=path, error=CopyFailed(path, "only regular files can be copied"))
        reason = invalid_name_reason(new_name)
        if reason is not None:
            return CopyResult(path=path, error=CopyFailed(path, reason))
        destination = entry.parent_path / new_name
        if not self._copier(path, destination):
            if os.path.lexists(destination):
                cause = f"'{new_name}' already exists"
            else:
                cause = "the transfer did not complete"
            return CopyResult(path=path, error=CopyFailed(path, cause))
        logger.info("copied %s -> %s", path, destination)

        self._refresh_parent(entry.parent_path)
        return CopyResult(path=path, new_path=destination)


__all__ = [
    "FileOpResult",
    "RenameResult",
    "DeleteResult",
    "CreateResult",
    "CopyResult",
    "invalid_name_reason",
    "delete_quietly",
    "FileOps",
]
