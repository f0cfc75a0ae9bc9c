"""
=============================================================================
ROOT MAP
=============================================================================

Maps URL prefixes (mount points) to filesystem directories.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         MOUNTS                                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   rootDir = "htdocs"                                                │
    │       → ( Mount("/", "htdocs"), )                                   │
    │                                                                      │
    │   rootDir = {"/": "htdocs", "/assets": "build/assets"}              │
    │       → ( Mount("/", "htdocs"), Mount("/assets", "build/assets") )  │
    │                                                                      │
    │   GET /assets/app.js                                                │
    │       "/"       → htdocs/assets/app.js                              │
    │       "/assets" → build/assets/app.js                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A bare string root is always lifted into the mounted form at configuration
time, so nothing downstream has to care which form the user wrote.

Candidate filesystem paths are produced in mount insertion order; the first
one that exists wins. A mount is only consulted when the request path lies
under its prefix ("/assets" matches "/assets" and "/assets/x", never
"/assetsx").

=============================================================================
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, Mapping, NamedTuple, Optional, Union


logger = logging.getLogger(__name__)


_SLASHES = re.compile(r"/{2,}")


def collapse_slashes(path: str) -> str:
    """Collapse every run of slashes into one: "/a//b///c" → "/a/b/c"."""
    return _SLASHES.sub("/", path)


class Mount(NamedTuple):
    """One servable subtree: URL prefix → directory."""

    prefix: str
    directory: str

    def url_base(self) -> str:
        """Prefix as used when building URL keys ("/" contributes nothing)."""
        return "" if self.prefix == "/" else self.prefix

    def covers(self, path: str) -> bool:
        """True when a site-relative path lies under this mount."""
        if self.prefix == "/":
            return True
        base = self.prefix.rstrip("/")
        return path == base or path.startswith(base + "/")

    def strip(self, path: str) -> str:
        """Remove the mount prefix from the front of a covered path."""
        if self.prefix == "/":
            return path
        return path[len(self.prefix.rstrip("/")):]

    def contains(self, full_path: str) -> bool:
        """
        True when a filesystem path stays inside this mount's directory
        once ".." segments and symlinks are resolved.
        """
        root = Path(self.directory).resolve()
        try:
            Path(full_path).resolve().relative_to(root)
        except ValueError:
            return False
        return True

    def owns(self, file_path: str) -> bool:
        """True when the directory is a leading path component of a file path."""
        base = self.directory.rstrip("/")
        return file_path == base or file_path.startswith(base + "/")

    def key_for(self, file_path: str) -> str:
        """URL key of a file found under this mount's directory."""
        remainder = file_path[len(self.directory.rstrip("/")):]
        return collapse_slashes(self.url_base() + "/" + remainder)


RootSpec = Union[str, Mapping[str, str]]


def normalize_roots(root_dir: RootSpec) -> tuple[Mount, ...]:
    """
    Lift either root form into an ordered tuple of mounts.

    A bare directory becomes a single mount under "/". A mapping keeps its
    insertion order.
    """
    if isinstance(root_dir, str):
        return (Mount("/", root_dir),)
    return tuple(Mount(str(prefix), str(directory)) for prefix, directory in root_dir.items())


def with_mount(mounts: Iterable[Mount], prefix: str, directory: str) -> tuple[Mount, ...]:
    """Insert or overwrite a mount, preserving the position of an existing prefix."""
    result = []
    replaced = False
    for mount in mounts:
        if mount.prefix == prefix:
            result.append(Mount(prefix, directory))
            replaced = True
        else:
            result.append(mount)
    if not replaced:
        result.append(Mount(prefix, directory))
    return tuple(result)


class RootMap:
    """
    Read-only view over the configured mounts plus the site base URL.

    Args:
        mounts:   Ordered mounts, as produced by ``normalize_roots``.
        base_url: Subdirectory URL the whole site is published under.
                  "/" means the site sits at the server root.
    """

    def __init__(self, mounts: Iterable[Mount], base_url: str = "/"):
        self.mounts = tuple(mounts)
        self.base_url = base_url or "/"

    def __iter__(self) -> Iterator[Mount]:
        return iter(self.mounts)

    def __len__(self) -> int:
        return len(self.mounts)

    def site_path(self, url: str) -> Optional[str]:
        """
        Request path relative to the base URL.

        Returns None when the path is outside the published subdirectory.

        Examples (base_url="/site"):
            "/site/a.txt" → "/a.txt"
            "/site"       → "/"
            "/other"      → None
        """
        if self.base_url == "/":
            return url
        base = self.base_url.rstrip("/")
        if url == base:
            return "/"
        if url.startswith(base + "/"):
            return url[len(base):]
        return None

    def public_url(self, site_path: str) -> str:
        """Inverse of ``site_path``: prepend the base URL."""
        if self.base_url == "/":
            return site_path
        return collapse_slashes(self.base_url.rstrip("/") + "/" + site_path)

    def candidate_paths(self, url: str) -> list[tuple[str, str]]:
        """
        Filesystem paths a request URL may map to, one per covering mount.

        For every mount (insertion order) the base URL and the mount prefix
        are stripped from the front of the request path, the remainder is
        joined onto the mount directory, and duplicate slashes collapsed.
        A path that resolves outside the mount directory ("/../etc/passwd")
        is dropped.

        Returns:
            Ordered list of (mount prefix, filesystem path).
        """
        relative = self.site_path(url)
        if relative is None:
            return []
        candidates = []
        for mount in self.mounts:
            if not mount.covers(relative):
                continue
            full_path = collapse_slashes(mount.directory + "/" + mount.strip(relative))
            if not mount.contains(full_path):
                logger.warning(f"Path traversal attempt: {url}")
                continue
            candidates.append((mount.prefix, full_path))
        return candidates

    def mount(self, prefix: str) -> Optional[Mount]:
        """Mount registered under a prefix, None when there is none."""
        for mount in self.mounts:
            if mount.prefix == prefix:
                return mount
        return None

    def url_for_file(self, file_path: str) -> Optional[str]:
        """
        URL key for a filesystem path found under one of the mounts.

        Every mount whose directory is a leading path component of the
        path is considered, and the last one in insertion order wins.
        Returns None when no mount directory holds the path.
        """
        key = None
        for mount in self.mounts:
            if mount.owns(file_path):
                key = mount.key_for(file_path)
        return key
