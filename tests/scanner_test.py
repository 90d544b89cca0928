# --- tests/scanner_test.py ---

import os
import shutil
import sys
import tempfile
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from errors import ScanError
from filters import SUPPORTED_EXTENSIONS
from models import EntryKind
from scanner import list_directory
from utils import has_hidden_segment


def touch(path, content=""):
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


class TestListDirectory(unittest.TestCase):
    """Tests for scanner.list_directory against a real temp folder"""

    def setUp(self):
        self.root = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_basic_listing(self):
        # notes.txt, image.png, sub/ and a hidden .git/
        touch(os.path.join(self.root, "notes.txt"), "hello")
        touch(os.path.join(self.root, "image.png"))
        os.mkdir(os.path.join(self.root, "sub"))
        os.mkdir(os.path.join(self.root, ".git"))

        listing = list_directory(self.root)

        self.assertEqual([e.name for e in listing], ["sub", "notes.txt"])
        self.assertEqual(listing[0].kind, EntryKind.DIRECTORY)
        self.assertEqual(listing[1].kind, EntryKind.FILE)
        self.assertEqual(listing[1].ext, ".txt")
        self.assertEqual(listing.directory, os.path.abspath(self.root))

    def test_ordering(self):
        for name in ("b.py", "A.md", "c.TXT", "readme"):
            touch(os.path.join(self.root, name))
        for name in ("zeta", "Alpha", "beta"):
            os.mkdir(os.path.join(self.root, name))

        listing = list_directory(self.root)
        entries = list(listing)

        self.assertEqual([e.name for e in entries], ["Alpha", "beta", "zeta", "A.md", "b.py", "c.TXT"])

        # Directories strictly before files
        kinds = [e.is_dir for e in entries]
        self.assertEqual(kinds, sorted(kinds, reverse=True))

        for group in (listing.directories, listing.files):
            paths = [e.path.lower() for e in group]
            self.assertEqual(paths, sorted(paths))

    def test_only_supported_files_and_visible_dirs(self):
        for name in ("a.txt", "b.exe", "c.json", ".hidden.yml", "d.jpeg", "e.cpp"):
            touch(os.path.join(self.root, name))
        os.mkdir(os.path.join(self.root, ".config"))
        os.mkdir(os.path.join(self.root, "src"))

        listing = list_directory(self.root)

        for entry in listing.files:
            self.assertIn(entry.ext, SUPPORTED_EXTENSIONS)
        for entry in listing.directories:
            self.assertFalse(has_hidden_segment(entry.path))
        self.assertEqual(
            sorted(e.name for e in listing),
            sorted([".hidden.yml", "a.txt", "c.json", "e.cpp", "src"])
        )

    def test_bare_extension_file_is_listed(self):
        touch(os.path.join(self.root, ".md"))
        touch(os.path.join(self.root, ".bashrc"))

        listing = list_directory(self.root)
        self.assertEqual([e.name for e in listing], [".md"])
        self.assertEqual(listing[0].ext, ".md")

    def test_not_recursive(self):
        sub = os.path.join(self.root, "sub")
        os.mkdir(sub)
        touch(os.path.join(sub, "inner.txt"))

        listing = list_directory(self.root)
        self.assertEqual([e.name for e in listing], ["sub"])

        inner = list_directory(sub)
        self.assertEqual([e.name for e in inner], ["inner.txt"])

    def test_empty_directory(self):
        listing = list_directory(self.root)
        self.assertEqual(len(listing), 0)
        self.assertEqual(list(listing), [])

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_broken_symlink_is_skipped(self):
        try:
            os.symlink(os.path.join(self.root, "missing.txt"), os.path.join(self.root, "link.txt"))
        except (OSError, NotImplementedError):
            self.skipTest("cannot create symlinks here")
        touch(os.path.join(self.root, "real.txt"))

        listing = list_directory(self.root)
        self.assertEqual([e.name for e in listing], ["real.txt"])

    def test_missing_directory(self):
        missing = os.path.join(self.root, "does-not-exist")
        with self.assertRaises(ScanError) as ctx:
            list_directory(missing)
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)
        self.assertEqual(ctx.exception.path, missing)

    def test_path_is_a_file(self):
        path = os.path.join(self.root, "notes.txt")
        touch(path)
        with self.assertRaises(ScanError):
            list_directory(path)

    def test_find(self):
        touch(os.path.join(self.root, "notes.txt"))
        listing = list_directory(self.root)
        path = os.path.join(listing.directory, "notes.txt")
        self.assertEqual(listing.find(path).name, "notes.txt")
        self.assertIsNone(listing.find(os.path.join(listing.directory, "other.txt")))


if __name__ == "__main__":
    unittest.main()
