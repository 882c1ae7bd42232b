"""Icon keys, display names, and filesystem roots for rendering entries.

``DefaultPresentationProvider`` keeps no mutable state, so listing workers may
call it while the interactive thread renders.
"""

from __future__ import annotations

import os
import string
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from .file_model import PathEntry, canonical_path, path_entry_for

ICON_FOLDER = "folder"
ICON_FILE = "file"
ICON_LINK = "link"
ICON_DRIVE = "drive"
ICON_MISSING = "missing"


class PresentationProvider(Protocol):
    def icon_for(self, path: Path) -> str: ...

    def display_name_for(self, path: Path) -> str: ...

    def roots(self) -> list[PathEntry]: ...


def platform_root_paths() -> list[Path]:
    """Return drive roots on Windows, otherwise ``/``."""
    if sys.platform == "win32":
        listdrives = getattr(os, "listdrives", None)
        if listdrives is not None:
            return [Path(drive) for drive in listdrives()]
        return [Path(f"{letter}:\\") for letter in string.ascii_uppercase if os.path.exists(f"{letter}:\\")]
    return [Path("/")]


class DefaultPresentationProvider:
    """Presentation based on ``os.stat`` data and configured tree roots."""

    def __init__(self, root_paths: Sequence[Path] | None = None) -> None:
        self._root_paths = tuple(canonical_path(path) for path in (root_paths or ()))

    def icon_for(self, path: Path) -> str:
        path = Path(path)
        if path.parent == path:
            return ICON_DRIVE
        if path.is_symlink():
            return ICON_LINK
        if path.is_dir():
            return ICON_FOLDER
        if path.exists():
            return ICON_FILE
        return ICON_MISSING

    def display_name_for(self, path: Path) -> str:
        path = Path(path)
        return path.name or str(path)

    def roots(self) -> list[PathEntry]:
        paths = list(self._root_paths) or platform_root_paths()
        return [path_entry_for(path) for path in paths]


__all__ = [
    "ICON_FOLDER",
    "ICON_FILE",
    "ICON_LINK",
    "ICON_DRIVE",
    "ICON_MISSING",
    "PresentationProvider",
    "platform_root_paths",
    "DefaultPresentationProvider",
]
