"""
=============================================================================
STATICWEB - Static Content Server Module
=============================================================================

Resolves request URLs to files under one or more root directories and
answers with their bytes, optionally from an in-memory buffer built when
the server is configured.

The HTTP transport is not part of this package: ``StaticWeb.listen`` takes
any request with a ``url`` and any response with ``status_code``,
``set_header``, ``write`` and ``end``. A small standard library bridge is
included for standalone use (``python -m staticweb``).

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    staticweb/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m staticweb)
    ├── config.py            # WebConfig snapshot, NotFoundPolicy
    ├── log.py               # AccessLogger, RequestLog, setup_logging
    ├── module.py            # WebModule, adapter for a module host
    ├── bridge.py            # http.server adapter
    ├── core/                # Where content comes from
    │   ├── roots.py         # RootMap, Mount
    │   ├── buffer.py        # BufferStore
    │   ├── resolver.py      # UrlResolver (directory indexes)
    │   └── loader.py        # ContentLoader (buffer, then disk)
    ├── http/                # Request/response surface
    │   ├── request.py
    │   ├── response.py
    │   ├── status_codes.py
    │   └── mime_types.py    # MimeTable, DEFAULT_MIMES
    └── handlers/
        ├── static.py        # StaticWeb.listen
        ├── listing.py       # DirectoryNavigator
        └── templates/       # listing page template

=============================================================================
QUICK START
=============================================================================

    from staticweb import StaticWeb
    from staticweb.http import HTTPRequest, HTTPResponse

    web = StaticWeb({
        "rootDir": "public",
        "directoryIndexs": ["index.html"],
        "notFound": True,
    })

    response = HTTPResponse()
    web.listen(HTTPRequest(url="/"), response)
    response.status_code        # 200
    response.headers            # {"content-type": "text/html"}

=============================================================================
"""

__version__ = "1.0.0"

from .config import ConfigError, NotFoundMode, NotFoundPolicy, WebConfig
from .core import BufferStore, Mount, Reserved, RootMap, ScanError
from .handlers import DirectoryNavigator, StaticWeb
from .http import DEFAULT_MIMES, HTTPRequest, HTTPResponse, MimeTable
from .log import AccessLogger, RequestLog
from .module import WebModule

__all__ = [
    "StaticWeb",
    "WebConfig",
    "ConfigError",
    "NotFoundMode",
    "NotFoundPolicy",
    "BufferStore",
    "Mount",
    "Reserved",
    "RootMap",
    "ScanError",
    "DirectoryNavigator",
    "DEFAULT_MIMES",
    "MimeTable",
    "HTTPRequest",
    "HTTPResponse",
    "AccessLogger",
    "RequestLog",
    "WebModule",
    "__version__",
]
