"""
=============================================================================
CONTENT LOADER
=============================================================================

Turns a resolved URL into bytes plus a content type.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    LOOKUP ORDER                                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. buffer (exact key)            no disk access at all            │
    │                                                                      │
    │   2. disk, mount-major:                                             │
    │        mount "/"       dir/path                                     │
    │                        dir/path/index.html                          │
    │                        dir/path/index.htm                           │
    │        mount "/docs"   docs/path                                    │
    │                        docs/path/index.html  ...                    │
    │                                                                      │
    │      the first regular file in that order is read                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A file that exists but whose extension is not in the mime table still
loads, with ``mime`` set to None. The request handler treats that as a
miss.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .buffer import BufferStore
from .roots import RootMap, collapse_slashes

if TYPE_CHECKING:
    from ..config import WebConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Content:
    """Loaded content and its content type (None when unsupported)."""

    body: bytes
    mime: Optional[str]
    source: str
    """Buffer key or filesystem path the content came from."""


class ContentLoader:

    def __init__(self, config: "WebConfig", roots: RootMap, buffer: BufferStore):
        self.config = config
        self.roots = roots
        self.buffer = buffer

    def load(self, url: str) -> Optional[Content]:
        """
        Load the content for a resolved URL.

        Returns:
            Content, or None when neither the buffer nor any mount has a
            regular file for the URL.

        Raises:
            OSError: the file was found but could not be read.
        """
        if self.config.buffering:
            key = self.roots.site_path(url)
            body = self.buffer.get(key)
            if body is not None:
                return Content(body, self.config.mimes.type_for(key), key)

        file_path = self.locate(url)
        if file_path is None:
            return None

        with open(file_path, "rb") as f:
            body = f.read()
        logger.debug(f"Read {url} from disk: {file_path}")
        return Content(body, self.config.mimes.type_for(file_path), file_path)

    def locate(self, url: str) -> Optional[str]:
        """
        First regular file for a URL across all mounts and index names.

        Mounts are visited in order; within a mount the direct path is
        tried before each directory index. Index paths that resolve outside
        their mount are skipped.
        """
        for prefix, full_path in self.roots.candidate_paths(url):
            if os.path.isfile(full_path):
                return full_path
            mount = self.roots.mount(prefix)
            for index in self.config.directory_indexes:
                index_path = collapse_slashes(f"{full_path}/{index}")
                if not mount.contains(index_path):
                    continue
                if os.path.isfile(index_path):
                    return index_path
        return None
