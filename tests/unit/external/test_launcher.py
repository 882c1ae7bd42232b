"""Tests for OS handler command selection and detached launching."""

from __future__ import annotations

import unittest
from pathlib import Path

from fileman.launcher import EDIT, OPEN, PRINT, Launcher


def _which_from(available: set[str]):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class LauncherTests(unittest.TestCase):
    def test_linux_commands(self) -> None:
        launcher = Launcher("linux", environ={}, which=_which_from({"xdg-open", "lpr"}))
        target = Path("/tmp/report.pdf")

        self.assertEqual(launcher.command_for(OPEN, target), ["/usr/bin/xdg-open", "/tmp/report.pdf"])
        self.assertEqual(launcher.command_for(EDIT, target), ["/usr/bin/xdg-open", "/tmp/report.pdf"])
        self.assertEqual(launcher.command_for(PRINT, target), ["/usr/bin/lpr", "/tmp/report.pdf"])

    def test_editor_environment_wins_for_edit(self) -> None:
        launcher = Launcher(
            "linux",
            environ={"EDITOR": "vim", "VISUAL": "code --wait"},
            which=_which_from({"xdg-open"}),
        )

        self.assertEqual(launcher.command_for(EDIT, Path("/x")), ["code", "--wait", "/x"])

    def test_darwin_edit_falls_back_to_text_editor(self) -> None:
        launcher = Launcher("darwin", environ={}, which=_which_from({"open"}))

        self.assertEqual(launcher.command_for(EDIT, Path("/x")), ["/usr/bin/open", "-t", "/x"])
        self.assertEqual(launcher.command_for(OPEN, Path("/x")), ["/usr/bin/open", "/x"])

    def test_unsupported_action_returns_message(self) -> None:
        launcher = Launcher("linux", environ={}, which=_which_from(set()))

        message = launcher.print(Path("/tmp/a.txt"))

        self.assertFalse(launcher.is_supported(PRINT))
        self.assertIn("not supported", message)
        self.assertFalse(launcher.is_supported("explode"))

    def test_launch_starts_detached_process(self) -> None:
        calls = []
        launcher = Launcher(
            "linux",
            environ={},
            which=_which_from({"xdg-open"}),
            popen=lambda cmd, **kwargs: calls.append((cmd, kwargs)),
        )

        self.assertIsNone(launcher.open(Path("/tmp/a.txt")))

        cmd, kwargs = calls[0]
        self.assertEqual(cmd, ["/usr/bin/xdg-open", "/tmp/a.txt"])
        self.assertTrue(kwargs["start_new_session"])

    def test_launch_failure_becomes_message(self) -> None:
        def failing_popen(cmd, **kwargs):
            raise FileNotFoundError("xdg-open vanished")

        launcher = Launcher("linux", environ={}, which=_which_from({"xdg-open"}), popen=failing_popen)

        message = launcher.open(Path("/tmp/a.txt"))

        self.assertTrue(message.startswith("Failed to open '/tmp/a.txt'"))


if __name__ == "__main__":
    unittest.main()
