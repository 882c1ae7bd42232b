"""End-to-end browsing over a real worker pool and a temporary directory tree."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from fileman.file_model import EntryKind
from fileman.launcher import OPEN, Launcher
from fileman.presentation import DefaultPresentationProvider
from fileman.runtime import BrowserSession


class BrowserSessionIntegrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "projects" / "alpha").mkdir(parents=True)
        (self.root / "projects" / "beta").mkdir()
        (self.root / "projects" / "plan.md").write_text("# plan\n", encoding="utf-8")
        (self.root / "music").mkdir()
        self.launched: list[list[str]] = []
        launcher = Launcher(
            "linux",
            environ={},
            which=lambda name: f"/usr/bin/{name}",
            popen=lambda cmd, **kwargs: self.launched.append(cmd),
        )
        self.session = BrowserSession(DefaultPresentationProvider([self.root]), max_workers=2, launcher=launcher)
        self.addCleanup(self.session.close)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _names(self, refs) -> list[str]:
        return [self.session.tree.entry(ref).name for ref in refs]

    def _table_names(self) -> list[str]:
        table = self.session.table
        return [table.entry_at(row).name for row in range(table.row_count())]

    def test_seeded_tree_shows_root_and_first_level(self) -> None:
        (root_ref,) = self.session.tree.roots()

        self.assertEqual(self.session.tree.entry(root_ref).path, self.root)
        self.assertEqual(self._names(self.session.tree.children(root_ref)), ["music", "projects"])
        self.assertFalse(self.session.busy)

    def test_browse_select_and_open(self) -> None:
        projects = self.session.tree.find_node(self.root / "projects")

        self.session.select_from_tree(projects)
        self.assertTrue(self.session.busy)
        self.assertTrue(self.session.wait_idle())

        self.assertEqual(self._names(self.session.tree.children(projects)), ["alpha", "beta"])
        self.assertEqual(self._table_names(), ["alpha", "beta", "plan.md"])

        entry = self.session.select_from_table(2)
        self.assertEqual(self.session.current, entry)
        self.assertIsNone(self.session.launch_current(OPEN))
        self.assertEqual(self.launched, [["/usr/bin/xdg-open", str(self.root / "projects" / "plan.md")]])

    def test_launch_without_selection_reports_message(self) -> None:
        message = self.session.launch_current(OPEN)

        self.assertIn("No file selected", message)
        self.assertEqual(self.launched, [])

    def test_file_operations_keep_tree_and_table_in_step(self) -> None:
        projects = self.session.tree.find_node(self.root / "projects")
        self.session.select_from_tree(projects)
        self.assertTrue(self.session.wait_idle())

        created = self.session.create_entry(self.root / "projects", "gamma", EntryKind.DIRECTORY)
        self.assertTrue(self.session.wait_idle())
        self.assertTrue(created.ok)
        self.assertEqual(self._names(self.session.tree.children(projects)), ["alpha", "beta", "gamma"])

        renamed = self.session.rename(self.root / "projects" / "alpha", "delta")
        self.assertTrue(self.session.wait_idle())
        self.assertTrue(renamed.ok)
        self.assertEqual(self._names(self.session.tree.children(projects)), ["beta", "gamma", "delta"])

        copied = self.session.copy(self.root / "projects" / "plan.md", "plan-copy.md")
        self.assertTrue(self.session.wait_idle())
        self.assertTrue(copied.ok)

        deleted = self.session.delete(self.root / "projects" / "beta")
        self.assertTrue(self.session.wait_idle())
        self.assertTrue(deleted.ok)

        self.assertEqual(self._names(self.session.tree.children(projects)), ["gamma", "delta"])
        self.assertEqual(self._table_names(), ["delta", "gamma", "plan-copy.md", "plan.md"])

    def test_repeated_expand_lists_once(self) -> None:
        music = self.session.tree.find_node(self.root / "music")

        self.assertTrue(self.session.expand(music))
        self.assertTrue(self.session.expand(music))
        self.assertEqual(self.session.scheduler.in_flight, 1)
        self.assertTrue(self.session.wait_idle())
        self.assertFalse(self.session.expand(music))
        self.assertTrue(self.session.tree.is_loaded(music))


if __name__ == "__main__":
    unittest.main()
