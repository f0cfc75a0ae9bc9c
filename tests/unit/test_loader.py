"""
Unit tests for content loading.
"""

import pytest

from staticweb.config import WebConfig
from staticweb.core.buffer import BufferStore
from staticweb.core.loader import ContentLoader
from staticweb.core.roots import RootMap


def make_loader(root, **options) -> ContentLoader:
    options.setdefault("rootDir", root if isinstance(root, dict) else str(root))
    config = WebConfig.from_options(options)
    buffer = BufferStore()
    if config.buffering:
        buffer.rebuild(config)
    return ContentLoader(config, RootMap(config.roots, config.url), buffer)


class TestLoadFromBuffer:
    """Tests for buffered loads."""

    def test_hit(self, htdocs):
        """Test a buffered file is served with its type."""
        content = make_loader(htdocs).load("/style.css")
        assert content.body == b"body { color: red; }"
        assert content.mime == "text/css"
        assert content.source == "/style.css"

    def test_buffer_wins_over_disk(self, htdocs):
        """Test disk changes are not seen until the buffer is rebuilt."""
        loader = make_loader(htdocs)
        (htdocs / "docs" / "a.txt").write_bytes(b"changed")
        assert loader.load("/docs/a.txt").body == b"alpha"


class TestLoadFromDisk:
    """Tests for disk loads."""

    def test_unbuffered(self, htdocs):
        """Test every load reads the file when buffering is off."""
        loader = make_loader(htdocs, buffering=False)
        (htdocs / "docs" / "a.txt").write_bytes(b"changed")
        content = loader.load("/docs/a.txt")
        assert content.body == b"changed"
        assert content.source.endswith("docs/a.txt")

    def test_oversized_falls_back_to_disk(self, htdocs):
        """Test files over the cap still load from disk."""
        loader = make_loader(htdocs, bufferingMaxSize=5)
        content = loader.load("/docs/sub/c.txt")
        assert content.body == b"charlie"

    def test_unsupported_type_loads_without_mime(self, htdocs):
        """Test a file outside the mime table loads with mime None."""
        content = make_loader(htdocs, buffering=False).load("/README")
        assert content.body == b"not served"
        assert content.mime is None

    def test_missing(self, htdocs):
        """Test a path with no file gives None."""
        assert make_loader(htdocs).load("/nope.txt") is None

    def test_directory_is_not_content(self, htdocs):
        """Test a directory without an index is not loaded."""
        assert make_loader(htdocs, buffering=False).load("/docs") is None

    def test_index_inside_directory(self, htdocs):
        """Test directory index names are tried below a directory."""
        loader = make_loader(htdocs, buffering=False, directoryIndexs=["a.txt"])
        assert loader.load("/docs").body == b"alpha"

    def test_mount_isolation(self, two_roots):
        """Test a mount only serves paths under its own prefix."""
        loader = make_loader(two_roots, buffering=False)
        assert loader.load("/a/x.txt").body == b"from A"
        assert loader.load("/b/x.txt").body == b"from B"
        assert loader.load("/x.txt") is None

    def test_first_mount_wins(self, tmp_path):
        """Test overlapping mounts are visited in insertion order."""
        (tmp_path / "site" / "a").mkdir(parents=True)
        (tmp_path / "dirA").mkdir()
        (tmp_path / "site" / "a" / "x.txt").write_bytes(b"from site")
        (tmp_path / "dirA" / "x.txt").write_bytes(b"from A")

        loader = make_loader(
            {"/": str(tmp_path / "site"), "/a": str(tmp_path / "dirA")},
            buffering=False,
        )

        assert loader.load("/a/x.txt").body == b"from site"

    def test_unreadable_file_raises(self, htdocs, monkeypatch):
        """Test read errors propagate to the caller."""
        loader = make_loader(htdocs, buffering=False)

        def refuse(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("builtins.open", refuse)
        with pytest.raises(OSError):
            loader.load("/docs/a.txt")
