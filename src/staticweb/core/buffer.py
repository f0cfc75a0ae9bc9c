"""
=============================================================================
BUFFER STORE
=============================================================================

In-memory copy of the servable files, keyed by URL path.

=============================================================================
WHAT GETS BUFFERED?
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    REBUILD (depth-first scan)                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   htdocs/                         buffer key                        │
    │   ├── index.html       ────────►  "/index.html"                     │
    │   ├── css/                                                          │
    │   │   └── site.css     ────────►  "/css/site.css"                   │
    │   ├── video.mp4        ✗ no mime entry for "mp4"                    │
    │   ├── huge.zip         ✗ larger than bufferingMaxSize               │
    │   └── Makefile         ✗ no extension                               │
    │                                                                      │
    │   + reserved entries (never reachable by URL):                      │
    │     Reserved.NOT_FOUND       content of the notFound page           │
    │     Reserved.LIST_NAVIGATOR  the directory listing template         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A file exactly ``bufferingMaxSize`` bytes long is buffered; one byte more
and it is left on disk.

=============================================================================
FAILURE SEMANTICS
=============================================================================

A rebuild scans into a fresh mapping and swaps it in only when the scan
completes. Any filesystem error aborts the rebuild with ``ScanError`` and
the store keeps serving what it held before. Callers decide what to do
with that; nothing here swallows it.

=============================================================================
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Union

from .roots import Mount, RootMap

if TYPE_CHECKING:
    from ..config import WebConfig


logger = logging.getLogger(__name__)


class Reserved(Enum):
    """Buffer slots that do not correspond to any URL."""

    NOT_FOUND = "notfound"
    LIST_NAVIGATOR = "listnavigator"


class ScanError(OSError):
    """A file or directory could not be read while building the buffer."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot buffer {path}: {reason}")
        self.path = path


class BufferStore:
    """
    URL path → file bytes, plus the reserved entries.

    Usage:
        store = BufferStore()
        store.rebuild(config, list_template=TEMPLATE_PATH)

        store.get("/index.html")          # b"<html>..."
        store.reserved(Reserved.NOT_FOUND)
        store.children("/docs")           # ["/docs/a.txt", "/docs/b.txt"]
    """

    def __init__(self):
        self._entries: Dict[str, bytes] = {}
        self._reserved: Dict[Reserved, bytes] = {}
        self.rebuilds = 0

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, url: Optional[str]) -> Optional[bytes]:
        if url is None:
            return None
        return self._entries.get(url)

    def keys(self) -> list[str]:
        return list(self._entries)

    def reserved(self, slot: Reserved) -> Optional[bytes]:
        return self._reserved.get(slot)

    def children(self, directory: str) -> list[str]:
        """
        Buffered keys exactly one path segment below a directory.

        "/docs" has children "/docs/a.txt" but not "/docs/sub/b.txt" nor
        "/docsx/c.txt".
        """
        prefix = directory.rstrip("/") + "/"
        return [
            key for key in self._entries
            if key.startswith(prefix) and key != prefix and "/" not in key[len(prefix):]
        ]

    def stats(self) -> dict:
        """Entry count, byte total and reserved slots currently loaded."""
        return {
            "entries": len(self._entries),
            "bytes": sum(len(content) for content in self._entries.values()),
            "reserved": sorted(slot.value for slot in self._reserved),
            "rebuilds": self.rebuilds,
        }

    # =========================================================================
    # WRITE ACCESS
    # =========================================================================

    def clear(self):
        self._entries = {}
        self._reserved = {}

    def rebuild(
        self,
        config: "WebConfig",
        list_template: Union[str, Path, None] = None,
    ) -> "BufferStore":
        """
        Discard everything and re-scan every mount of the snapshot.

        Also loads the notFound page (when it is a page path) and the
        listing template (when listNavigator is on) into their reserved
        slots.

        Raises:
            ScanError: a directory or file could not be read. The previous
                       contents are kept.
        """
        roots = RootMap(config.roots, config.url)
        entries: Dict[str, bytes] = {}
        for mount in roots:
            self._scan(mount, config, entries)

        reserved: Dict[Reserved, bytes] = {}
        if config.not_found.page is not None:
            reserved[Reserved.NOT_FOUND] = _read(config.not_found.page)
        if config.list_navigator and list_template is not None:
            reserved[Reserved.LIST_NAVIGATOR] = _read(str(list_template))

        self._entries = entries
        self._reserved = reserved
        self.rebuilds += 1

        stats = self.stats()
        logger.info(
            f"Buffered {stats['entries']} files ({stats['bytes']} bytes) "
            f"from {len(roots)} root(s)"
        )
        return self

    def scan_mount(self, mount: Mount, config: "WebConfig") -> "BufferStore":
        """
        Scan one mount and merge its files into the current entries.

        Entries from other mounts are kept.
        """
        entries = dict(self._entries)
        self._scan(mount, config, entries)
        self._entries = entries
        return self

    def add_entry(self, file_path: str, content: bytes, roots: RootMap) -> Optional[str]:
        """
        Store file content under the URL derived from its filesystem path.

        The URL is the path with the directory of the last mount that
        holds it replaced by that mount's URL prefix. Nothing is stored
        when no mount directory holds the path.

        Returns:
            The URL key used, or None when nothing was stored.
        """
        key = roots.url_for_file(file_path)
        if key is None:
            logger.debug(f"No mount covers {file_path}, not buffered")
            return None
        self._entries[key] = content
        return key

    # =========================================================================
    # SCANNING
    # =========================================================================

    def _scan(
        self,
        mount: Mount,
        config: "WebConfig",
        into: Dict[str, bytes],
    ):
        """Buffer the servable files of one mount, keyed through that mount."""
        for file_path in _walk(mount.directory):
            name = os.path.basename(file_path)
            if not config.mimes.has_type(name):
                continue
            try:
                size = os.stat(file_path).st_size
            except OSError as e:
                raise ScanError(file_path, e.strerror or str(e)) from e
            if size > config.buffering_max_size:
                logger.debug(f"Skipping {file_path}: {size} bytes exceeds buffering limit")
                continue
            if not mount.contains(file_path):
                logger.warning(f"Skipping {file_path}: links outside {mount.directory}")
                continue
            into[mount.key_for(file_path)] = _read(file_path)


def _walk(directory: str) -> Iterator[str]:
    """Depth-first walk yielding regular file paths, entries in name order."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise ScanError(directory, e.strerror or str(e)) from e

    for entry in entries:
        path = directory.rstrip("/") + "/" + entry.name
        if entry.is_dir():
            yield from _walk(path)
        elif entry.is_file():
            yield path


def _read(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ScanError(path, e.strerror or str(e)) from e
