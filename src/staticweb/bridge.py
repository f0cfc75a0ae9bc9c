"""
=============================================================================
STANDALONE BRIDGE
=============================================================================

Runs a ``StaticWeb`` behind the standard library HTTP server, for local use
and for the ``python -m staticweb`` command.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    BRIDGE                                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ThreadingHTTPServer                                               │
    │        │  one thread per connection                                 │
    │        ▼                                                            │
    │   StaticRequestHandler.do_GET                                       │
    │        │  HTTPRequest(url, method, headers, client_address)         │
    │        ▼                                                            │
    │   web.listen(request, response) ──► HTTPResponse                    │
    │        │                                                            │
    │        ▼                                                            │
    │   send_response / send_header / wfile.write                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

``listen`` returning False (notFound disabled) becomes a plain 404, since a
standalone server has nobody else to hand the request to.

=============================================================================
"""

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Type

from .handlers.static import StaticWeb
from .http.request import HTTPRequest
from .http.response import HTTPResponse
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class StaticRequestHandler(BaseHTTPRequestHandler):
    """Translates ``http.server`` requests into ``StaticWeb.listen`` calls."""

    web: StaticWeb
    server_version = "staticweb"

    def do_GET(self):
        self._serve(send_body=True)

    def do_HEAD(self):
        self._serve(send_body=False)

    def _serve(self, send_body: bool):
        request = HTTPRequest(
            url=self.path,
            method=self.command,
            headers=dict(self.headers.items()),
            client_address=self.client_address,
        )
        response = HTTPResponse()

        try:
            handled = self.web.listen(request, response)
        except Exception:
            logger.exception(f"Unhandled error serving {self.path}")
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR)
            return

        if not handled:
            response = HTTPResponse()
            response.status_code = HTTPStatus.NOT_FOUND
            response.set_header("content-type", "text/plain; charset=utf-8")
            response.end("Not Found")

        body = response.body
        self.send_response(int(response.status_code))
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if send_body:
            self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug(f"{self.client_address[0]} - {format % args}")


def make_handler(web: StaticWeb) -> Type[StaticRequestHandler]:
    """Request handler class bound to one static server."""
    return type("BoundStaticRequestHandler", (StaticRequestHandler,), {"web": web})


def serve(web: StaticWeb, host: str = "127.0.0.1", port: int = 8080) -> None:
    """Serve until interrupted."""
    with ThreadingHTTPServer((host, port), make_handler(web)) as httpd:
        logger.info(f"Serving static content at http://{host}:{port}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")
