# --- tests/file_ops_test.py ---

import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import file_ops
from errors import CreateError, DeleteError, ReadError, WriteError


class TestFileOps(unittest.TestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp()
        self.path = os.path.join(self.root, "file.txt")

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_write_then_read(self):
        file_ops.write_text(self.path, "first version, much longer")
        file_ops.write_text(self.path, "second")
        self.assertEqual(file_ops.read_text(self.path), "second")

    def test_read_missing(self):
        with self.assertRaises(ReadError) as ctx:
            file_ops.read_text(self.path)
        self.assertEqual(ctx.exception.path, self.path)
        self.assertIn("file.txt", str(ctx.exception))

    def test_write_into_missing_folder(self):
        with self.assertRaises(WriteError):
            file_ops.write_text(os.path.join(self.root, "nope", "file.txt"), "x")

    def test_create_is_exclusive(self):
        file_ops.create_empty_file(self.path)
        self.assertEqual(os.path.getsize(self.path), 0)
        with self.assertRaises(CreateError) as ctx:
            file_ops.create_empty_file(self.path)
        self.assertIn("already exists", str(ctx.exception))

    def test_delete_permanently(self):
        file_ops.create_empty_file(self.path)
        file_ops.delete_file(self.path, use_trash=False)
        self.assertFalse(os.path.exists(self.path))

    def test_delete_missing(self):
        for use_trash in (True, False):
            with self.assertRaises(DeleteError) as ctx:
                file_ops.delete_file(self.path, use_trash=use_trash)
            self.assertIsInstance(ctx.exception.cause, FileNotFoundError)

    def test_delete_refuses_directory(self):
        os.mkdir(self.path)
        with self.assertRaises(DeleteError):
            file_ops.delete_file(self.path, use_trash=False)
        self.assertTrue(os.path.isdir(self.path))

    def test_trash_errors_are_wrapped(self):
        file_ops.create_empty_file(self.path)
        with mock.patch("file_ops.send2trash", side_effect=RuntimeError("no trash here")):
            with self.assertRaises(DeleteError) as ctx:
                file_ops.delete_file(self.path, use_trash=True)
        self.assertIsInstance(ctx.exception.cause, RuntimeError)


if __name__ == "__main__":
    unittest.main()
