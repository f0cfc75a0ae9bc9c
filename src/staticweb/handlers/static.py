"""
=============================================================================
STATIC CONTENT HANDLER
=============================================================================

Serves files from one or more root directories, optionally from an
in-memory buffer built when the server is configured.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    listen(request, response)                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   RESOLVE   UrlResolver picks an index file or keeps the path       │
    │      │                                                              │
    │      ├── no index matched, listNavigator on, listing possible       │
    │      │        └──► RESPOND_DIRECTORY  (200, listing page)  → True   │
    │      ▼                                                              │
    │   LOAD      ContentLoader: buffer, then disk                        │
    │      │                                                              │
    │      ├── nothing found, or unsupported type                         │
    │      │        └──► RESPOND_NOTFOUND                                 │
    │      │               notFound=false  → write nothing      → False   │
    │      │               notFound=true   → 404, empty body    → True    │
    │      │               notFound=page   → 404, page content  → True    │
    │      ▼                                                              │
    │   RESPOND_OK  200, headers + content-type, body, access log → True  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
BUFFERED VS DIRECT
=============================================================================

With buffering on (the default), every servable file under the roots is
read into memory when the server is configured. Later changes on disk are
not seen until ``update_buffer()`` or ``setting()`` is called again. Files
over ``bufferingMaxSize`` are still served, from disk, on each request.

With buffering off, every request reads from disk.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from ..config import NotFoundMode, WebConfig
from ..core.buffer import BufferStore, Reserved
from ..core.loader import Content, ContentLoader
from ..core.resolver import Resolution, UrlResolver
from ..core.roots import Mount, RootMap
from ..http.request import RequestLike, strip_query
from ..http.response import ResponseLike
from ..http.status_codes import HTTPStatus
from ..log import AccessLogSink
from .listing import TEMPLATE_PATH, DirectoryNavigator


logger = logging.getLogger(__name__)


NOT_FOUND_ERROR_BODY = "ERROR"


class NotFoundPageError(LookupError):
    """The configured notFound page is not available in the buffer."""


@dataclass
class RequestContext:
    """Per-request state, owned by ``listen`` for one call."""

    path: str
    resolution: Optional[Resolution] = None
    content: Optional[Content] = None
    headers: dict = field(default_factory=dict)


class StaticWeb:
    """
    Static content server.

    Usage:
        web = StaticWeb({
            "rootDir": {"/": "htdocs", "/assets": "build/assets"},
            "directoryIndexs": ["index.html"],
            "notFound": "htdocs/404.html",
        })

        # From whatever transport delivers requests:
        handled = web.listen(request, response)

    Args:
        options:       Option dict, or a ready ``WebConfig`` snapshot.
                       When omitted the defaults apply ("htdocs" root).
        access_logger: Sink called after each 200 response when the
                       ``logAccess`` mode is set.

    Raises:
        ScanError: buffering is on and a root could not be scanned.
    """

    def __init__(
        self,
        options: Union[Mapping[str, Any], WebConfig, None] = None,
        access_logger: Optional[AccessLogSink] = None,
    ):
        self.config = WebConfig()
        self.buffer = BufferStore()
        self.access_logger = access_logger
        self._bind(self.config)

        if options is not None:
            self.setting(options)
        else:
            self.update_buffer()

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def setting(self, options: Union[Mapping[str, Any], WebConfig]) -> "StaticWeb":
        """
        Apply new settings and rebuild the buffer.

        Options that are missing keep their current value. The new snapshot
        only replaces the current one once the buffer has been rebuilt from
        it; a failing rebuild leaves the server as it was.

        Raises:
            ConfigError: the resulting settings are invalid.
            ScanError:   buffering is on and a root could not be scanned.
        """
        if isinstance(options, WebConfig):
            options.validate()
            config = options
        else:
            config = WebConfig.from_options(options, base=self.config)

        self._rebuild(config)
        self.config = config
        self._bind(config)
        logger.debug(f"Settings applied: {config}")
        return self

    def update_buffer(self) -> "StaticWeb":
        """
        Reload every servable file from the roots into the buffer.

        Does nothing but drop the buffer when buffering is off.
        """
        self._rebuild(self.config)
        return self

    def add_root(self, prefix: str, directory: str) -> "StaticWeb":
        """
        Mount another directory under a URL prefix.

        An existing mount with the same prefix is replaced. With buffering
        on, the directory is scanned immediately and merged into the buffer
        without touching entries of other mounts.
        """
        config = self.config.with_root(prefix, directory)
        if config.buffering:
            self.buffer.scan_mount(Mount(prefix, directory), config)
        self.config = config
        self._bind(config)
        return self

    def add_buffer(self, file_path: str, content: bytes) -> "StaticWeb":
        """
        Buffer content under the URL of a filesystem path.

        The URL is derived from the mount whose directory prefixes the path.
        Paths outside every mount are ignored.
        """
        self.buffer.add_entry(file_path, content, self.roots)
        return self

    def _rebuild(self, config: WebConfig):
        if config.buffering:
            self.buffer.rebuild(config, list_template=TEMPLATE_PATH)
        else:
            self.buffer.clear()

    def _bind(self, config: WebConfig):
        self.roots = RootMap(config.roots, config.url)
        self.resolver = UrlResolver(config, self.roots, self.buffer)
        self.loader = ContentLoader(config, self.roots, self.buffer)
        self.navigator = DirectoryNavigator(config, self.roots, self.buffer)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def listen(self, request: RequestLike, response: ResponseLike) -> bool:
        """
        Answer a request with static content.

        Args:
            request:  Anything with a ``url`` attribute.
            response: Anything with ``status_code``, ``set_header``,
                      ``write`` and ``end``.

        Returns:
            True when a response was written (404 pages included). False
            only when notFound is disabled and nothing was written.
        """
        ctx = RequestContext(path=strip_query(request.url))

        # ─────────────────────────────────────────────────────────────────
        # RESOLVE
        # ─────────────────────────────────────────────────────────────────
        ctx.resolution = self.resolver.resolve(ctx.path)

        if not ctx.resolution.matched and self.config.list_navigator:
            page = self.navigator.render(ctx.path)
            if page is not None:
                return self._respond_directory(response, page)

        # ─────────────────────────────────────────────────────────────────
        # LOAD
        # ─────────────────────────────────────────────────────────────────
        try:
            ctx.content = self.loader.load(ctx.resolution.url)
        except OSError as e:
            logger.warning(f"Error reading {ctx.resolution.url}: {e}")
            ctx.content = None

        if ctx.content is None or ctx.content.mime is None:
            return self._respond_not_found(response)

        # ─────────────────────────────────────────────────────────────────
        # RESPOND
        # ─────────────────────────────────────────────────────────────────
        ctx.headers = dict(self.config.headers)
        ctx.headers["content-type"] = ctx.content.mime

        response.status_code = HTTPStatus.OK
        for name, value in ctx.headers.items():
            response.set_header(name, value)
        response.write(ctx.content.body)
        response.end()

        self.log(self.config.log_access, request, response)
        return True

    def _respond_directory(self, response: ResponseLike, page: str) -> bool:
        response.status_code = HTTPStatus.OK
        response.set_header("content-type", "text/html")
        response.write(page)
        response.end()
        return True

    def _respond_not_found(self, response: ResponseLike) -> bool:
        policy = self.config.not_found

        if policy.mode is NotFoundMode.DISABLED:
            return False

        response.status_code = HTTPStatus.NOT_FOUND
        if policy.mode is NotFoundMode.STATUS:
            response.end()
            return True

        try:
            content = self._not_found_page()
        except (OSError, NotFoundPageError) as e:
            logger.warning(f"Cannot load notFound page {policy.page}: {e}")
            response.write(NOT_FOUND_ERROR_BODY)
        else:
            response.write(content)
        response.end()
        return True

    def _not_found_page(self) -> bytes:
        if self.config.buffering:
            content = self.buffer.reserved(Reserved.NOT_FOUND)
            if content is None:
                raise NotFoundPageError("notFound page is not buffered")
            return content

        with open(self.config.not_found.page, "rb") as f:
            return f.read()

    # =========================================================================
    # ACCESS LOG
    # =========================================================================

    def log(self, mode: Optional[str], request: Any, response: Any, message: Optional[str] = None):
        """Forward an entry to the access logger; a no-op without mode or logger."""
        if not mode or self.access_logger is None:
            return
        self.access_logger.write(mode, request, response, message)
