"""
=============================================================================
CORE MODULE
=============================================================================

The content core of the static server: where a URL's bytes come from.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CORE COMPONENTS                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   roots.py     RootMap        URL prefix → directory mounts         │
    │   buffer.py    BufferStore    URL → bytes, built by scanning roots  │
    │   resolver.py  UrlResolver    directory-index substitution          │
    │   loader.py    ContentLoader  buffer first, then disk               │
    │                                                                      │
    │   Request flow:                                                     │
    │                                                                      │
    │     path ──► UrlResolver ──► ContentLoader ──► (bytes, mime)        │
    │                  │                 │                                │
    │                  └──── BufferStore ┘                                │
    │                  └──── RootMap ────┘                                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .roots import Mount, RootMap, collapse_slashes, normalize_roots
from .buffer import BufferStore, Reserved, ScanError
from .resolver import UrlResolver, Resolution
from .loader import ContentLoader, Content

__all__ = [
    "Mount",
    "RootMap",
    "collapse_slashes",
    "normalize_roots",
    "BufferStore",
    "Reserved",
    "ScanError",
    "UrlResolver",
    "Resolution",
    "ContentLoader",
    "Content",
]
