"""
=============================================================================
DIRECTORY NAVIGATOR
=============================================================================

Renders a file listing for directory-style URLs that have no index file.

=============================================================================
TEMPLATE
=============================================================================

The page is a plain HTML template with four literal placeholders:

    {url}      the requested directory, e.g. "/docs"
    {back}     its parent directory, e.g. "/"
    {lists}    one table row per file directly inside the directory
    {comment}  "staticweb | YYYY/MM/DD HH:MM:SS"

The template is read once, at buffer rebuild time, into the
``Reserved.LIST_NAVIGATOR`` buffer slot.

=============================================================================
LIMITATIONS
=============================================================================

Children are discovered from buffer keys, so listings only exist when
buffering is on. Only files appear; a subdirectory shows up only through
the files it contains, when those are listed from that subdirectory.

=============================================================================
"""

import posixpath
from datetime import datetime
from html import escape
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from ..core.buffer import BufferStore, Reserved
from ..core.roots import RootMap
from ..http.request import strip_query

if TYPE_CHECKING:
    from ..config import WebConfig


TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "listnavigator.html"

COMMENT_LABEL = "staticweb"

ROW = '<tr><td>-</td><td><a href="{href}">{name}</a></td></tr>'


class DirectoryNavigator:
    """
    Builds listing pages from buffered keys.

    Args:
        now: Clock used for the footer timestamp.
    """

    def __init__(
        self,
        config: "WebConfig",
        roots: RootMap,
        buffer: BufferStore,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.roots = roots
        self.buffer = buffer
        self.now = now

    def render(self, path: str) -> Optional[str]:
        """
        Listing page for a request path, or None when none can be produced.

        None is returned when buffering is off, the template is not loaded,
        the path is itself a buffered file, or nothing is buffered directly
        below it.
        """
        if not self.config.buffering:
            return None
        template = self.buffer.reserved(Reserved.LIST_NAVIGATOR)
        if template is None:
            return None

        directory = strip_query(path)
        if directory != "/" and directory.endswith("/"):
            directory = directory[:-1]

        site_directory = self.roots.site_path(directory)
        if site_directory is None or site_directory in self.buffer:
            return None

        children = self.buffer.children(site_directory)
        if not children:
            return None

        rows = "".join(
            ROW.format(
                href=escape(self.roots.public_url(child), quote=True),
                name=escape(posixpath.basename(child)),
            )
            for child in children
        )

        content = template.decode("utf-8")
        content = content.replace("{url}", escape(directory))
        content = content.replace("{back}", escape(posixpath.dirname(directory), quote=True))
        content = content.replace("{lists}", rows)
        content = content.replace("{comment}", f"{COMMENT_LABEL} | {self.timestamp()}")
        return content

    def timestamp(self) -> str:
        """Current time as YYYY/MM/DD HH:MM:SS."""
        return self.now().strftime("%Y/%m/%d %H:%M:%S")
