"""Tests for one-level directory listing and path-entry metadata."""

from __future__ import annotations

import os
import stat
import tempfile
import unittest
from pathlib import Path

from fileman.errors import EnumerationFailed
from fileman.file_model import list_directory, path_entry_for


class DirectoryListingTests(unittest.TestCase):
    def test_directory_with_only_files_has_no_subdirectory_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("one.txt", "two.txt", "three.log"):
                (root / name).write_text(name, encoding="utf-8")

            result = list_directory(root)

            self.assertTrue(result.ok)
            self.assertEqual(result.snapshot.subdirectory_entries, ())
            self.assertEqual(len(result.snapshot.all_entries), 3)
            self.assertTrue(all(entry.is_regular_file for entry in result.snapshot.all_entries))

    def test_partition_and_relisting_after_delete(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "t"
            root.mkdir()
            (root / "a.txt").write_text("a", encoding="utf-8")
            (root / "b").mkdir()

            snapshot = list_directory(root).snapshot
            self.assertEqual([entry.name for entry in snapshot.all_entries], ["a.txt", "b"])
            self.assertEqual([entry.name for entry in snapshot.subdirectory_entries], ["b"])
            self.assertEqual(snapshot.directory_entry.path, root)

            (root / "a.txt").unlink()
            relisted = list_directory(root).snapshot
            self.assertEqual([entry.name for entry in relisted.all_entries], ["b"])

    def test_entries_are_sorted_case_insensitively(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("beta", "Alpha", "gamma"):
                (root / name).write_text("", encoding="utf-8")

            names = [entry.name for entry in list_directory(root).snapshot.all_entries]

            self.assertEqual(names, ["Alpha", "beta", "gamma"])

    def test_hidden_entries_are_skipped_unless_requested(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".hidden").mkdir()
            (root / "visible.txt").write_text("", encoding="utf-8")

            default_names = [entry.name for entry in list_directory(root).snapshot.all_entries]
            all_names = [entry.name for entry in list_directory(root, show_hidden=True).snapshot.all_entries]

            self.assertEqual(default_names, ["visible.txt"])
            self.assertEqual(all_names, [".hidden", "visible.txt"])

    def test_missing_directory_yields_empty_snapshot_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp).resolve() / "gone"

            result = list_directory(missing)

            self.assertFalse(result.ok)
            self.assertIsInstance(result.error, EnumerationFailed)
            self.assertEqual(result.snapshot.all_entries, ())
            self.assertEqual(result.snapshot.subdirectory_entries, ())
            self.assertIn(str(missing), str(result.error))

    def test_listing_a_file_is_an_error_not_an_exception(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp).resolve() / "plain.txt"
            target.write_text("x", encoding="utf-8")

            result = list_directory(target)

            self.assertIsNotNone(result.error)
            self.assertEqual(result.error.cause, "not a directory")
            self.assertEqual(result.snapshot.all_entries, ())

    @unittest.skipIf(os.name != "posix" or os.geteuid() == 0, "permission bits are not enforced")
    def test_unreadable_directory_yields_empty_snapshot(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            locked = Path(tmp).resolve() / "locked"
            locked.mkdir()
            (locked / "inner.txt").write_text("x", encoding="utf-8")
            locked.chmod(0)
            try:
                result = list_directory(locked)
            finally:
                locked.chmod(stat.S_IRWXU)

            self.assertIsNotNone(result.error)
            self.assertEqual(result.snapshot.all_entries, ())

    def test_path_entry_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            data = root / "data.bin"
            data.write_bytes(b"12345")
            folder = root / "folder"
            folder.mkdir()

            file_entry = path_entry_for(data)
            dir_entry = path_entry_for(folder)

            self.assertEqual(file_entry.size_bytes, 5)
            self.assertTrue(file_entry.is_regular_file)
            self.assertFalse(file_entry.is_directory)
            self.assertTrue(file_entry.can_read)
            self.assertEqual(file_entry.mtime_ns, data.stat().st_mtime_ns)
            self.assertEqual(dir_entry.size_bytes, 0)
            self.assertTrue(dir_entry.is_directory)
            self.assertFalse(dir_entry.is_regular_file)

    def test_path_entry_for_missing_path_has_every_flag_off(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            entry = path_entry_for(Path(tmp) / "nope")

            self.assertFalse(entry.is_directory)
            self.assertFalse(entry.is_regular_file)
            self.assertFalse(entry.can_read)
            self.assertEqual(entry.size_bytes, 0)


if __name__ == "__main__":
    unittest.main()
