"""
=============================================================================
MIME TYPE TABLE
=============================================================================

Maps file extensions to the Content-Type served for them.

The table doubles as an allow-list: a file whose extension is not in the
table is never buffered and never served, even if it exists on disk.

=============================================================================
KEY NORMALIZATION
=============================================================================

    ┌────────────────────────────────────────────────────────────────────┐
    │                    EXTENSION KEYS                                  │
    ├────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   File name          Extension key     Notes                       │
    │   ───────────────    ─────────────     ──────────────────────────  │
    │   index.html         "html"            no leading dot              │
    │   archive.tar.gz     "gz"              last suffix only            │
    │   LOGO.PNG           "PNG"             NOT case-folded             │
    │   Makefile           ""                no extension → never served │
    │   .htaccess          ""                dotfile → never served      │
    │                                                                     │
    └────────────────────────────────────────────────────────────────────┘

Comparison is case-sensitive against the table's keys. A table that wants
to serve "LOGO.PNG" must carry a "PNG" key.

=============================================================================
"""

import os
from typing import Dict, Iterator, Mapping, Optional


# =============================================================================
# DEFAULT TABLE
# =============================================================================
#
# Extension (no dot) → content type. Replaced wholesale by the "mimes"
# setting, never merged.
#
# =============================================================================

DEFAULT_MIMES: Dict[str, str] = {
    # Images
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "svg": "image/svg+xml",
    "ico": "image/vnd.microsoft.icon",
    # Audio
    "mp3": "audio/mpeg",
    "aac": "audio/aac",
    # Text
    "txt": "text/plain",
    "css": "text/css",
    "js": "text/javascript",
    "html": "text/html",
    "htm": "text/html",
    "xml": "text/xml",
    "csv": "text/csv",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    # Archives
    "zip": "application/zip",
    "bz": "application/x-bzip",
    "gz": "application/gzip",
    "7z": "application/x-7z-compressed",
}


def extension_of(filename: str) -> str:
    """
    Extension of a file name or path, without the dot.

    Dotfiles such as ".htaccess" have no extension.

    Examples:
        >>> extension_of("/srv/www/style.css")
        'css'
        >>> extension_of("README")
        ''
    """
    return os.path.splitext(filename)[1][1:]


class MimeTable(Mapping[str, str]):
    """
    Immutable extension → content type mapping.

    Usage:
        mimes = MimeTable()                       # default table
        mimes = MimeTable({"md": "text/markdown"})  # replaces the default

        mimes.lookup("css")          # 'text/css'
        mimes.has_type("app.js")     # True
        mimes.type_for("photo.PNG")  # None, keys are case-sensitive
    """

    def __init__(self, types: Optional[Mapping[str, str]] = None):
        source = DEFAULT_MIMES if types is None else types
        self._types: Dict[str, str] = {str(k): str(v) for k, v in source.items()}

    def __getitem__(self, extension: str) -> str:
        return self._types[extension]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"MimeTable({self._types!r})"

    def lookup(self, extension: str) -> Optional[str]:
        """Content type for an extension (no dot), or None."""
        return self._types.get(extension)

    def type_for(self, filename: str) -> Optional[str]:
        """Content type for a file name or path, or None."""
        return self.lookup(extension_of(filename))

    def has_type(self, filename: str) -> bool:
        """True iff the file has a non-empty extension present in the table."""
        extension = extension_of(filename)
        if not extension:
            return False
        return extension in self._types
