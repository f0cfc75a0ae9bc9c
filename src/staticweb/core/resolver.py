"""
URL resolution: map a request path onto the URL whose content is served.

Only directory-index substitution happens here. "/docs/" with indexes
["index.html", "index.htm"] tries "/docs/index.html" then "/docs/index.htm";
the first one present (in the buffer, or on disk when allowed) is the
decision. When none is present the request path itself is handed on and
the content loader gets the final say.
"""

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..http.request import strip_query
from .buffer import BufferStore
from .roots import RootMap, collapse_slashes

if TYPE_CHECKING:
    from ..config import WebConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one request path."""

    url: str
    """URL to load: an index candidate, or the request path unchanged."""

    matched: bool
    """True when a directory-index candidate was found."""


class UrlResolver:

    def __init__(self, config: "WebConfig", roots: RootMap, buffer: BufferStore):
        self.config = config
        self.roots = roots
        self.buffer = buffer

    def candidates(self, path: str) -> list[str]:
        """Directory-index URLs to try for a (query-free) path, in order."""
        stripped = strip_query(path)
        if stripped != "/" and stripped.endswith("/"):
            stripped = stripped[:-1]
        return [
            collapse_slashes(f"{stripped}/{index}")
            for index in self.config.directory_indexes
        ]

    def resolve(self, path: str) -> Resolution:
        """
        Pick the URL to load for a request path.

        For each index candidate, in configured order:

        1. With buffering on, a buffer hit decides immediately.
        2. The disk is probed across every mount when buffering is off,
           or when it is on and direct reading is allowed.

        Falls back to the query-free request path when nothing matches.
        """
        request_path = strip_query(path)
        buffering = self.config.buffering

        for candidate in self.candidates(request_path):
            if buffering:
                if self.buffer.get(self.roots.site_path(candidate)) is not None:
                    return Resolution(candidate, True)
                if not self.config.direct_reading:
                    continue

            if self._exists_on_disk(candidate):
                return Resolution(candidate, True)

        return Resolution(request_path, False)

    def _exists_on_disk(self, url: str) -> bool:
        for _, full_path in self.roots.candidate_paths(url):
            if os.path.exists(full_path):
                logger.debug(f"Index {url} found on disk at {full_path}")
                return True
        return False
