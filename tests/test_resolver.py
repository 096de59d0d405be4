import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from importdoc.errors import FileResolutionError
from importdoc.resolver import describe_import, is_wildcard, resolve_files


class TestFileResolver(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()

    def _touch(self, *parts: str) -> Path:
        path = self.root.joinpath(*parts)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("content", encoding="utf-8")
        return path

    def test_is_wildcard_checks_file_name_only(self):
        self.assertTrue(is_wildcard("docs/*.pdf"))
        self.assertTrue(is_wildcard("report-?.txt"))
        self.assertTrue(is_wildcard("docs/[ab].md"))
        self.assertFalse(is_wildcard("docs/report.pdf"))
        self.assertFalse(is_wildcard("do*cs/report.pdf"))

    def test_literal_paths_keep_argument_order(self):
        a = self._touch("a.txt")
        b = self._touch("b.txt")
        self.assertEqual(resolve_files([str(b), str(a)]), [b, a])

    def test_missing_literal_path_aborts(self):
        a = self._touch("a.txt")
        missing = self.root / "missing.txt"
        with self.assertRaises(FileResolutionError) as ctx:
            resolve_files([str(a), str(missing)])
        self.assertEqual(ctx.exception.path, missing)
        self.assertIn("does not exist", str(ctx.exception))

    def test_directory_is_not_a_literal_file(self):
        (self.root / "folder").mkdir()
        with self.assertRaises(FileResolutionError):
            resolve_files([str(self.root / "folder")])

    def test_wildcard_expands_to_matching_files_in_listing_order(self):
        self._touch("docs", "a.pdf")
        self._touch("docs", "b.pdf")
        self._touch("docs", "notes.txt")
        (self.root / "docs" / "sub.pdf").mkdir()

        resolved = resolve_files([str(self.root / "docs" / "*.pdf")])

        listing = [
            self.root / "docs" / name
            for name in os.listdir(self.root / "docs")
            if name.endswith(".pdf") and (self.root / "docs" / name).is_file()
        ]
        self.assertEqual(resolved, listing)
        self.assertEqual(sorted(p.name for p in resolved), ["a.pdf", "b.pdf"])

    def test_wildcard_without_matches_is_not_an_error(self):
        a = self._touch("a.txt")
        resolved = resolve_files([str(self.root / "*.pdf"), str(a)])
        self.assertEqual(resolved, [a])

    def test_wildcard_in_missing_directory_aborts(self):
        with self.assertRaises(FileResolutionError):
            resolve_files([str(self.root / "nowhere" / "*.pdf")])

    def test_wildcard_group_stays_in_argument_position(self):
        first = self._touch("first.md")
        self._touch("docs", "only.pdf")
        last = self._touch("last.md")

        resolved = resolve_files([str(first), str(self.root / "docs" / "*.pdf"), str(last)])

        self.assertEqual(resolved, [first, self.root / "docs" / "only.pdf", last])

    def test_relative_paths_become_absolute(self):
        self._touch("rel.txt")
        cwd = os.getcwd()
        os.chdir(self.root)
        self.addCleanup(os.chdir, cwd)
        resolved = resolve_files(["rel.txt"])
        self.assertTrue(resolved[0].is_absolute())
        self.assertEqual(resolved[0].name, "rel.txt")

    def test_describe_import(self):
        a = self._touch("a.txt")
        self.assertEqual(describe_import([a]), f"Importing file {a}...")
        self.assertEqual(describe_import([a, a]), "Importing 2 files...")
        self.assertEqual(describe_import([]), "Importing 0 files...")


if __name__ == "__main__":
    unittest.main()
