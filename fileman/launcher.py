"""Open, edit, and print files through the host OS handlers.

Launch helpers return an error message string instead of raising so the GUI
can show it directly. Commands are started detached; the call does not wait
for the handler to exit.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Mapping
from pathlib import Path

from .errors import LauncherUnsupported

OPEN = "open"
EDIT = "edit"
PRINT = "print"
ACTIONS = (OPEN, EDIT, PRINT)


class Launcher:
    def __init__(
        self,
        platform_name: str | None = None,
        environ: Mapping[str, str] | None = None,
        which: Callable[[str], str | None] = shutil.which,
        popen: Callable[..., object] = subprocess.Popen,
    ) -> None:
        self._platform = platform_name or sys.platform
        self._environ = os.environ if environ is None else environ
        self._which = which
        self._popen = popen

    def _editor_command(self) -> list[str] | None:
        for variable in ("VISUAL", "EDITOR"):
            raw = self._environ.get(variable, "").strip()
            if raw:
                cmd = shlex.split(raw)
                if cmd:
                    return cmd
        return None

    def _first_available(self, *names: str) -> list[str] | None:
        for name in names:
            resolved = self._which(name)
            if resolved:
                return [resolved]
        return None

    def command_for(self, action: str, target: Path) -> list[str] | None:
        """Return the argv used for ``action`` on ``target``, or ``None``."""
        path = str(target)
        if action == OPEN:
            opener = self._first_available("open" if self._platform == "darwin" else "xdg-open")
            return [*opener, path] if opener else None
        if action == EDIT:
            editor = self._editor_command()
            if editor:
                return [*editor, path]
            if self._platform == "darwin":
                opener = self._first_available("open")
                return [*opener, "-t", path] if opener else None
            opener = self._first_available("xdg-open")
            return [*opener, path] if opener else None
        if action == PRINT:
            printer = self._first_available("lp", "lpr")
            return [*printer, path] if printer else None
        return None

    def is_supported(self, action: str) -> bool:
        if action not in ACTIONS:
            return False
        if self._platform == "win32":
            return hasattr(os, "startfile")
        return self.command_for(action, Path(".")) is not None

    def launch(self, action: str, target: Path) -> str | None:
        if not self.is_supported(action):
            return str(LauncherUnsupported(target, f"'{action}' is not supported on this system"))
        try:
            if self._platform == "win32":
                os.startfile(str(target), action)
                return None
            cmd = self.command_for(action, target)
            assert cmd is not None
            self._popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except Exception as exc:
            return f"Failed to {action} '{target}': {exc}"
        return None

    def open(self, target: Path) -> str | None:
        return self.launch(OPEN, target)

    def edit(self, target: Path) -> str | None:
        return self.launch(EDIT, target)

    def print(self, target: Path) -> str | None:
        return self.launch(PRINT, target)


__all__ = [
    "OPEN",
    "EDIT",
    "PRINT",
    "ACTIONS",
    "Launcher",
]
