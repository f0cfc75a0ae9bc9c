"""
pytest configuration and fixtures.
"""

from pathlib import Path
from typing import Callable

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from staticweb import StaticWeb
from staticweb.http import HTTPRequest, HTTPResponse


INDEX_HTML = b"<p>hi!</p>"  # 10 bytes


@pytest.fixture
def htdocs(tmp_path: Path) -> Path:
    """
    A small site:

        htdocs/
        ├── index.html
        ├── style.css
        ├── README            (no extension)
        ├── 404.html
        └── docs/
            ├── a.txt
            ├── b.txt
            └── sub/
                └── c.txt
    """
    root = tmp_path / "htdocs"
    (root / "docs" / "sub").mkdir(parents=True)
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_bytes(b"body { color: red; }")
    (root / "README").write_bytes(b"not served")
    (root / "404.html").write_bytes(b"<h1>Nothing here</h1>")
    (root / "docs" / "a.txt").write_bytes(b"alpha")
    (root / "docs" / "b.txt").write_bytes(b"bravo")
    (root / "docs" / "sub" / "c.txt").write_bytes(b"charlie")
    return root


@pytest.fixture
def two_roots(tmp_path: Path) -> dict[str, str]:
    """Two mounts, each holding its own x.txt."""
    dir_a = tmp_path / "dirA"
    dir_b = tmp_path / "dirB"
    dir_a.mkdir()
    dir_b.mkdir()
    (dir_a / "x.txt").write_bytes(b"from A")
    (dir_b / "x.txt").write_bytes(b"from B")
    return {"/a": str(dir_a), "/b": str(dir_b)}


@pytest.fixture
def make_web(htdocs: Path) -> Callable[..., StaticWeb]:
    """Factory for a StaticWeb rooted at the htdocs fixture."""
    def factory(**options) -> StaticWeb:
        options.setdefault("rootDir", str(htdocs))
        return StaticWeb(options)
    return factory


def get(web: StaticWeb, url: str) -> tuple[bool, HTTPResponse]:
    """Run one request through listen()."""
    response = HTTPResponse()
    handled = web.listen(HTTPRequest(url=url), response)
    return handled, response


@pytest.fixture
def fetch() -> Callable[[StaticWeb, str], tuple[bool, HTTPResponse]]:
    """The get() helper, as a fixture."""
    return get


class RecordingAccessLog:
    """Access log sink that remembers every call."""

    def __init__(self):
        self.calls = []

    def write(self, mode, request, response, message=None):
        self.calls.append((mode, request, response, message))


@pytest.fixture
def access_log() -> RecordingAccessLog:
    return RecordingAccessLog()
