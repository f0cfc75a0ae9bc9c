"""
Unit tests for the in-memory buffer.
"""

import pytest

from staticweb.config import WebConfig
from staticweb.core.buffer import BufferStore, Reserved, ScanError
from staticweb.core.roots import Mount, RootMap
from staticweb.handlers.listing import TEMPLATE_PATH


SITE_KEYS = [
    "/404.html",
    "/docs/a.txt",
    "/docs/b.txt",
    "/docs/sub/c.txt",
    "/index.html",
    "/style.css",
]


def config_for(root, **options) -> WebConfig:
    options["rootDir"] = root if isinstance(root, dict) else str(root)
    return WebConfig.from_options(options)


class TestRebuild:
    """Tests for BufferStore.rebuild()."""

    def test_keys_in_scan_order(self, htdocs):
        """Test servable files are keyed by URL, depth-first in name order."""
        store = BufferStore().rebuild(config_for(htdocs))
        assert store.keys() == SITE_KEYS

    def test_content(self, htdocs):
        """Test buffered bytes match the files."""
        store = BufferStore().rebuild(config_for(htdocs))
        assert store.get("/docs/sub/c.txt") == b"charlie"
        assert store.get("/index.html") == (htdocs / "index.html").read_bytes()

    def test_unsupported_extension_skipped(self, htdocs):
        """Test files without a mime entry are never buffered."""
        store = BufferStore().rebuild(config_for(htdocs))
        assert "/README" not in store

    def test_size_boundary(self, tmp_path):
        """Test a file exactly at the cap is buffered and one byte more is not."""
        (tmp_path / "fits.txt").write_bytes(b"x" * 10)
        (tmp_path / "over.txt").write_bytes(b"x" * 11)

        store = BufferStore().rebuild(config_for(tmp_path, bufferingMaxSize=10))

        assert "/fits.txt" in store
        assert "/over.txt" not in store

    def test_zero_cap_keeps_empty_files(self, tmp_path):
        """Test a zero cap still buffers empty files."""
        (tmp_path / "empty.txt").write_bytes(b"")
        (tmp_path / "one.txt").write_bytes(b"1")

        store = BufferStore().rebuild(config_for(tmp_path, bufferingMaxSize=0))

        assert store.keys() == ["/empty.txt"]

    def test_idempotent(self, htdocs):
        """Test rebuilding twice gives the same contents."""
        config = config_for(htdocs)
        store = BufferStore().rebuild(config)
        first = {key: store.get(key) for key in store}
        store.rebuild(config)
        assert {key: store.get(key) for key in store} == first

    def test_sees_disk_changes(self, htdocs):
        """Test a rebuild picks up new and deleted files."""
        config = config_for(htdocs)
        store = BufferStore().rebuild(config)

        (htdocs / "docs" / "a.txt").unlink()
        (htdocs / "new.txt").write_bytes(b"new")
        store.rebuild(config)

        assert "/docs/a.txt" not in store
        assert store.get("/new.txt") == b"new"

    def test_mounts(self, two_roots):
        """Test every mount contributes keys under its prefix."""
        store = BufferStore().rebuild(config_for(two_roots))
        assert store.get("/a/x.txt") == b"from A"
        assert store.get("/b/x.txt") == b"from B"
        assert len(store) == 2

    def test_sibling_directory_name(self, tmp_path):
        """Test a mount directory that prefixes another by name keeps its own keys."""
        (tmp_path / "site").mkdir()
        (tmp_path / "site2").mkdir()
        (tmp_path / "site" / "x.txt").write_bytes(b"site")
        (tmp_path / "site2" / "x.txt").write_bytes(b"site2")

        store = BufferStore().rebuild(config_for({
            "/other": str(tmp_path / "site2"),
            "/": str(tmp_path / "site"),
        }))

        assert store.get("/other/x.txt") == b"site2"
        assert store.get("/x.txt") == b"site"
        assert "/2/x.txt" not in store

    def test_nested_mounts_keyed_per_mount(self, tmp_path):
        """Test a file under two mounts is buffered under both URLs."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "x.txt").write_bytes(b"x")

        store = BufferStore().rebuild(config_for({
            "/": str(tmp_path),
            "/s": str(tmp_path / "sub"),
        }))

        assert store.get("/sub/x.txt") == b"x"
        assert store.get("/s/x.txt") == b"x"

    def test_missing_root_raises(self, tmp_path):
        """Test an unreadable root aborts with ScanError."""
        with pytest.raises(ScanError) as exc_info:
            BufferStore().rebuild(config_for(tmp_path / "missing"))
        assert exc_info.value.path.endswith("missing")

    def test_failed_rebuild_keeps_previous_entries(self, htdocs, tmp_path):
        """Test the store is unchanged after a failing rebuild."""
        store = BufferStore().rebuild(config_for(htdocs))

        with pytest.raises(ScanError):
            store.rebuild(config_for(tmp_path / "missing"))

        assert store.keys() == SITE_KEYS
        assert store.rebuilds == 1


class TestReserved:
    """Tests for reserved buffer slots."""

    def test_not_found_page(self, htdocs):
        """Test the notFound page is loaded into its slot."""
        config = config_for(htdocs, notFound=str(htdocs / "404.html"))
        store = BufferStore().rebuild(config)
        assert store.reserved(Reserved.NOT_FOUND) == b"<h1>Nothing here</h1>"

    def test_not_found_page_missing(self, htdocs):
        """Test a missing notFound page fails the rebuild."""
        config = config_for(htdocs, notFound=str(htdocs / "nope.html"))
        with pytest.raises(ScanError):
            BufferStore().rebuild(config)

    def test_not_found_status_only(self, htdocs):
        """Test notFound=True loads no page."""
        store = BufferStore().rebuild(config_for(htdocs, notFound=True))
        assert store.reserved(Reserved.NOT_FOUND) is None

    def test_list_template(self, htdocs):
        """Test the listing template is loaded only with listNavigator on."""
        off = BufferStore().rebuild(config_for(htdocs), list_template=TEMPLATE_PATH)
        assert off.reserved(Reserved.LIST_NAVIGATOR) is None

        on = BufferStore().rebuild(
            config_for(htdocs, listNavigator=True), list_template=TEMPLATE_PATH
        )
        assert b"{lists}" in on.reserved(Reserved.LIST_NAVIGATOR)

    def test_reserved_not_reachable_by_url(self, htdocs):
        """Test reserved slots never appear among URL keys."""
        config = config_for(htdocs, notFound=str(htdocs / "404.html"), listNavigator=True)
        store = BufferStore().rebuild(config, list_template=TEMPLATE_PATH)
        assert all(key.startswith("/") for key in store)
        assert store.keys() == SITE_KEYS


class TestChildren:
    """Tests for BufferStore.children()."""

    def test_direct_children_only(self, htdocs):
        """Test only keys one segment below are listed."""
        store = BufferStore().rebuild(config_for(htdocs))
        assert store.children("/docs") == ["/docs/a.txt", "/docs/b.txt"]
        assert store.children("/docs/") == ["/docs/a.txt", "/docs/b.txt"]

    def test_sibling_prefix_excluded(self, tmp_path):
        """Test "/docsx" files are not children of "/docs"."""
        (tmp_path / "docs").mkdir()
        (tmp_path / "docsx").mkdir()
        (tmp_path / "docs" / "a.txt").write_bytes(b"a")
        (tmp_path / "docsx" / "b.txt").write_bytes(b"b")

        store = BufferStore().rebuild(config_for(tmp_path))

        assert store.children("/docs") == ["/docs/a.txt"]

    def test_root_children(self, htdocs):
        """Test the site root lists its top level files."""
        store = BufferStore().rebuild(config_for(htdocs))
        assert store.children("/") == ["/404.html", "/index.html", "/style.css"]


class TestAddEntry:
    """Tests for BufferStore.add_entry()."""

    def test_stores_under_mount_url(self, two_roots):
        """Test the key is derived from the mount directory."""
        config = config_for(two_roots)
        store = BufferStore().rebuild(config)
        roots = RootMap(config.roots, config.url)

        key = store.add_entry(two_roots["/b"] + "/y.txt", b"yankee", roots)

        assert key == "/b/y.txt"
        assert store.get("/b/y.txt") == b"yankee"

    def test_outside_every_mount(self, two_roots):
        """Test paths outside the mounts store nothing."""
        config = config_for(two_roots)
        store = BufferStore().rebuild(config)
        roots = RootMap(config.roots, config.url)

        assert store.add_entry("/elsewhere/y.txt", b"lost", roots) is None
        assert len(store) == 2


class TestScanMount:
    """Tests for BufferStore.scan_mount()."""

    def test_merges_without_dropping(self, htdocs, two_roots):
        """Test scanning one mount keeps the other entries."""
        config = config_for(htdocs)
        store = BufferStore().rebuild(config)

        config = config.with_root("/a", two_roots["/a"])
        store.scan_mount(Mount("/a", two_roots["/a"]), config)

        assert store.get("/a/x.txt") == b"from A"
        assert store.get("/index.html") is not None

    def test_missing_directory(self, htdocs, tmp_path):
        """Test a failing mount scan leaves the store untouched."""
        config = config_for(htdocs)
        store = BufferStore().rebuild(config)
        missing = str(tmp_path / "missing")

        with pytest.raises(ScanError):
            store.scan_mount(Mount("/m", missing), config.with_root("/m", missing))

        assert store.keys() == SITE_KEYS


class TestStats:
    """Tests for BufferStore.stats()."""

    def test_empty(self):
        """Test a fresh store reports nothing."""
        assert BufferStore().stats() == {
            "entries": 0,
            "bytes": 0,
            "reserved": [],
            "rebuilds": 0,
        }

    def test_after_rebuild(self, htdocs):
        """Test counts reflect the buffered files."""
        config = config_for(htdocs, notFound=str(htdocs / "404.html"))
        store = BufferStore().rebuild(config)
        stats = store.stats()

        expected_bytes = sum(
            (htdocs / key.lstrip("/")).stat().st_size for key in SITE_KEYS
        )
        assert stats["entries"] == len(SITE_KEYS)
        assert stats["bytes"] == expected_bytes
        assert stats["reserved"] == ["notfound"]
        assert stats["rebuilds"] == 1

    def test_clear(self, htdocs):
        """Test clear() drops entries and reserved slots."""
        config = config_for(htdocs, notFound=str(htdocs / "404.html"))
        store = BufferStore().rebuild(config)
        store.clear()
        assert len(store) == 0
        assert store.reserved(Reserved.NOT_FOUND) is None
