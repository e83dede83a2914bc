"""
Unit tests for document root access.
"""

import os

import pytest

from fileserver.storage import FileStore
from conftest import INDEX_HTML, LOGO_PNG


class TestFileStore:
    """Tests for FileStore reads."""

    def test_root_must_exist(self, tmp_path):
        """A missing root is rejected at construction."""
        with pytest.raises(ValueError):
            FileStore(tmp_path / "nope")

    def test_root_must_be_directory(self, tmp_path):
        """A file is not a document root."""
        f = tmp_path / "file"
        f.write_bytes(b"x")
        with pytest.raises(ValueError):
            FileStore(f)

    def test_root_is_resolved(self, docroot):
        """The root is stored as an absolute path."""
        assert FileStore(str(docroot)).root_dir == docroot.resolve()

    def test_read_text(self, docroot):
        """Existing files are returned byte for byte."""
        assert FileStore(docroot).read("index.html") == INDEX_HTML

    def test_read_binary(self, docroot):
        """Binary content is not altered."""
        assert FileStore(docroot).read("logo.png") == LOGO_PNG

    def test_read_nested(self, docroot):
        """Paths with directories are resolved below the root."""
        assert FileStore(docroot).read("docs/guide.html") == b"<p>guide</p>"

    def test_read_empty(self, docroot):
        """An empty file reads as b"", not None."""
        assert FileStore(docroot).read("empty.txt") == b""

    def test_missing(self, docroot):
        """A missing file gives None."""
        assert FileStore(docroot).read("missing.html") is None

    def test_directory(self, docroot):
        """A directory is not a file."""
        assert FileStore(docroot).read("docs") is None

    def test_absolute_path_outside_root(self, docroot):
        """An absolute path pointing elsewhere is refused."""
        outside = docroot.parent / "secret.txt"
        outside.write_bytes(b"secret")
        assert FileStore(docroot).read(str(outside)) is None

    def test_symlink_escape(self, docroot):
        """A symlink pointing outside the root is refused."""
        outside = docroot.parent / "secret.txt"
        outside.write_bytes(b"secret")
        os.symlink(outside, docroot / "link.txt")
        assert FileStore(docroot).read("link.txt") is None

    def test_symlink_inside_root(self, docroot):
        """A symlink that stays inside the root is followed."""
        os.symlink(docroot / "style.css", docroot / "alias.css")
        assert FileStore(docroot).read("alias.css") is not None

    def test_null_byte(self, docroot):
        """A name the OS refuses gives None instead of raising."""
        assert FileStore(docroot).read("index.html\x00.png") is None
