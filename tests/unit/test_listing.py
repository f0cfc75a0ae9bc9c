"""
Unit tests for directory listings.
"""

from datetime import datetime

from staticweb.config import WebConfig
from staticweb.core.buffer import BufferStore
from staticweb.core.roots import RootMap
from staticweb.handlers.listing import COMMENT_LABEL, TEMPLATE_PATH, DirectoryNavigator


FIXED_NOW = datetime(2024, 6, 10, 10, 55, 36)


def make_navigator(root, **options) -> DirectoryNavigator:
    options.setdefault("rootDir", str(root))
    options.setdefault("listNavigator", True)
    config = WebConfig.from_options(options)
    buffer = BufferStore()
    if config.buffering:
        buffer.rebuild(config, list_template=TEMPLATE_PATH)
    return DirectoryNavigator(
        config, RootMap(config.roots, config.url), buffer, now=lambda: FIXED_NOW
    )


class TestRender:
    """Tests for DirectoryNavigator.render()."""

    def test_lists_direct_children(self, htdocs):
        """Test one row per file directly inside the directory."""
        page = make_navigator(htdocs).render("/docs/")

        assert page.count('href="/docs/') == 2
        assert '<a href="/docs/a.txt">a.txt</a>' in page
        assert '<a href="/docs/b.txt">b.txt</a>' in page
        assert "c.txt" not in page

    def test_placeholders_filled(self, htdocs):
        """Test url, back link and footer are substituted."""
        page = make_navigator(htdocs).render("/docs")

        assert "<title>Index of /docs</title>" in page
        assert '<a href="/">..</a>' in page
        assert f"{COMMENT_LABEL} | 2024/06/10 10:55:36" in page
        assert "{lists}" not in page
        assert "{url}" not in page

    def test_nested_back_link(self, htdocs):
        """Test the back link points at the parent directory."""
        page = make_navigator(htdocs).render("/docs/sub/")
        assert '<a href="/docs">..</a>' in page
        assert '<a href="/docs/sub/c.txt">c.txt</a>' in page

    def test_names_escaped(self, tmp_path):
        """Test file names are HTML-escaped."""
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "a&b.txt").write_bytes(b"x")

        page = make_navigator(tmp_path).render("/d")

        assert ">a&amp;b.txt</a>" in page

    def test_base_url_in_links(self, htdocs):
        """Test links carry the published subdirectory."""
        page = make_navigator(htdocs, url="/site").render("/site/docs")
        assert '<a href="/site/docs/a.txt">a.txt</a>' in page

    def test_empty_directory(self, htdocs):
        """Test a directory with no buffered files gives no page."""
        (htdocs / "empty").mkdir()
        assert make_navigator(htdocs).render("/empty/") is None

    def test_buffered_file_is_not_listed(self, htdocs):
        """Test a file path never renders as a directory."""
        assert make_navigator(htdocs).render("/docs/a.txt") is None

    def test_requires_buffering(self, htdocs):
        """Test listings are unavailable without buffering."""
        assert make_navigator(htdocs, buffering=False).render("/docs/") is None

    def test_requires_template(self, htdocs):
        """Test nothing renders when listNavigator was off at rebuild."""
        assert make_navigator(htdocs, listNavigator=False).render("/docs/") is None


class TestTimestamp:
    """Tests for DirectoryNavigator.timestamp()."""

    def test_format(self, htdocs):
        """Test the footer clock format."""
        assert make_navigator(htdocs).timestamp() == "2024/06/10 10:55:36"
