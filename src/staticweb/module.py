"""
Host module adapter.

Lets a hosting process that manages several request-handling modules run
the static server as one of them. The host calls ``on_begin`` once with the
module's section root and init options, then ``on_listen`` for every
request until one of its modules reports it handled the request.
"""

import logging
import os
from typing import Any, Mapping, Optional

from .config import DEFAULT_ROOT_DIR
from .handlers.static import StaticWeb


logger = logging.getLogger(__name__)


class WebModule:
    """
    Static server wrapped for a module host.

    Usage:
        module = WebModule()
        module.on_begin("/srv/site", {"directoryIndexs": ["index.html"]},
                        modules={"logger": access_logger})
        handled = module.on_listen(request, response)
    """

    name = "web"

    def __init__(self):
        self.web: Optional[StaticWeb] = None

    def on_begin(
        self,
        sector_root: str,
        init: Optional[Mapping[str, Any]] = None,
        modules: Optional[Mapping[str, Any]] = None,
    ) -> StaticWeb:
        """
        Build the static server for this section.

        Root directories are taken relative to ``sector_root`` (absolute
        ones are kept as is). A host module registered as "logger" becomes
        the access log sink.
        """
        options = dict(init or {})
        root_dir = options.get("rootDir") or DEFAULT_ROOT_DIR
        if isinstance(root_dir, str):
            options["rootDir"] = os.path.join(sector_root, root_dir)
        else:
            options["rootDir"] = {
                prefix: os.path.join(sector_root, directory)
                for prefix, directory in root_dir.items()
            }

        self.web = StaticWeb(options)

        access_logger = (modules or {}).get("logger")
        if access_logger is not None:
            self.web.access_logger = access_logger

        logger.info(f"Static module ready for {sector_root}")
        return self.web

    def on_listen(self, request: Any, response: Any) -> bool:
        """
        Hand a request to the static server.

        Unexpected failures are logged and reported as "not handled" so the
        host can try its other modules.
        """
        if self.web is None:
            logger.warning("Static module received a request before on_begin")
            return False
        try:
            return self.web.listen(request, response)
        except Exception:
            logger.exception(f"Static module failed on {getattr(request, 'url', '?')}")
            return False
