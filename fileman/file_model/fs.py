"""Filesystem metadata capture and one-level directory enumeration."""

from __future__ import annotations

import logging
import os
import stat as stat_module
from pathlib import Path

from ..errors import EnumerationFailed
from .snapshot import ListingResult, ListingSnapshot
from .types import PathEntry

logger = logging.getLogger(__name__)


def canonical_path(path: Path | str) -> Path:
    """Return an absolute, lexically normalized path.

    Symlinks are kept as-is so children listed under a linked directory stay
    under the link's path, which is the path its tree node carries.
    """
    return Path(os.path.abspath(Path(path).expanduser()))


def _describe_os_error(exc: OSError) -> str:
    return exc.strerror or str(exc)


def path_entry_for(path: Path | str, stat_result: os.stat_result | None = None) -> PathEntry:
    """Capture a ``PathEntry`` for ``path``.

    Symlinks are followed; a dangling link is described by its own ``lstat``.
    A path that cannot be stat'ed at all yields an entry with every flag off.
    """
    path = Path(path)
    if stat_result is None:
        try:
            stat_result = path.stat()
        except OSError:
            try:
                stat_result = path.lstat()
            except OSError:
                return PathEntry(path=path)

    mode = stat_result.st_mode
    is_directory = stat_module.S_ISDIR(mode)
    return PathEntry(
        path=path,
        is_directory=is_directory,
        is_regular_file=stat_module.S_ISREG(mode),
        size_bytes=0 if is_directory else int(stat_result.st_size),
        mtime_ns=int(stat_result.st_mtime_ns),
        can_read=os.access(path, os.R_OK),
        can_write=os.access(path, os.W_OK),
        can_execute=os.access(path, os.X_OK),
    )


def _entry_for_dir_entry(child: os.DirEntry) -> PathEntry:
    child_path = Path(child.path)
    try:
        stat_result = child.stat()
    except OSError:
        return path_entry_for(child_path)
    return path_entry_for(child_path, stat_result)


def is_hidden_name(name: str) -> bool:
    return name.startswith(".")


def listing_sort_key(entry: PathEntry) -> tuple[str, str]:
    """Sort by case-folded name, then raw name, so equal folds stay deterministic."""
    return (entry.name.casefold(), entry.name)


def list_directory(directory: Path | str, show_hidden: bool = False) -> ListingResult:
    """Enumerate exactly one level of ``directory``.

    Entries are sorted with ``listing_sort_key``. Names starting with ``.``
    are skipped unless ``show_hidden``. Any failure returns an empty snapshot
    with ``error`` set; nothing is raised.
    """
    resolved = canonical_path(directory)
    directory_entry = path_entry_for(resolved)

    if not directory_entry.is_directory:
        if resolved.exists() or resolved.is_symlink():
            cause = "not a directory"
        else:
            cause = "no such directory"
        return _failed(directory_entry, cause)

    entries: list[PathEntry] = []
    try:
        with os.scandir(resolved) as scanned:
            for child in scanned:
                if not show_hidden and is_hidden_name(child.name):
                    continue
                entries.append(_entry_for_dir_entry(child))
    except OSError as exc:
        return _failed(directory_entry, _describe_os_error(exc))

    entries.sort(key=listing_sort_key)
    return ListingResult(snapshot=ListingSnapshot.from_entries(directory_entry, entries))


def _failed(directory_entry: PathEntry, cause: str) -> ListingResult:
    error = EnumerationFailed(directory_entry.path, cause)
    logger.debug("listing %s failed: %s", directory_entry.path, cause)
    return ListingResult(snapshot=ListingSnapshot.empty(directory_entry), error=error)


__all__ = [
    "canonical_path",
    "path_entry_for",
    "is_hidden_name",
    "listing_sort_key",
    "list_directory",
]
