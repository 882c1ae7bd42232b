"""Error taxonomy for listing, selection, and file-operation failures.

Every error carries the offending path and a human-readable cause so the GUI
can show ``title`` plus ``str(error)`` without further formatting.
"""

from __future__ import annotations

from pathlib import Path


class FileManagerError(Exception):
    """Base error: ``path`` that failed and ``cause`` describing why."""

    title = "Error"
    verb = "process"

    def __init__(self, path: Path | str | None, cause: str) -> None:
        self.path = Path(path) if path is not None else None
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        if self.path is None:
            return self.cause
        return f"The file '{self.path}' could not be {self.verb}: {self.cause}"


class EnumerationFailed(FileManagerError):
    title = "Listing Failed"
    verb = "listed"


class NoSelectionError(FileManagerError):
    title = "Select File"

    def __init__(self, cause: str = "No file selected.") -> None:
        super().__init__(None, cause)


class RenameFailed(FileManagerError):
    title = "Rename Failed"
    verb = "renamed"


class DeleteFailed(FileManagerError):
    title = "Delete Failed"
    verb = "deleted"


class CreateFailed(FileManagerError):
    title = "Create Failed"
    verb = "created"


class AlreadyExists(CreateFailed):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "it already exists")


class CopyFailed(FileManagerError):
    title = "Copy Failed"
    verb = "copied"


class LauncherUnsupported(FileManagerError):
    title = "Not Supported"
    verb = "launched"


__all__ = [
    "FileManagerError",
    "EnumerationFailed",
    "NoSelectionError",
    "RenameFailed",
    "DeleteFailed",
    "CreateFailed",
    "AlreadyExists",
    "CopyFailed",
    "LauncherUnsupported",
]
