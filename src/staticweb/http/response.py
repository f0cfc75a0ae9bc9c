"""
=============================================================================
HTTP RESPONSE
=============================================================================

The outbound side of the request/response pair handed to ``StaticWeb.listen``.

Unlike a builder that returns a finished response object, the static server
drives the response imperatively, the way a transport's writer is driven:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     RESPONSE WRITE SEQUENCE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   response.status_code = 200         ← status first                 │
    │   response.set_header("content-type", "text/html")                  │
    │   response.write(b"<html>...")       ← zero or more body writes     │
    │   response.end()                     ← exactly once, freezes it     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Any object offering that surface (``ResponseLike``) works. ``HTTPResponse``
is the in-memory implementation: it accumulates the body and can serialize
itself to raw HTTP/1.1 bytes for a socket.

=============================================================================
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Protocol, Union

from .status_codes import phrase_for


class ResponseLike(Protocol):
    """Minimal response surface driven by the static server."""

    status_code: int

    def set_header(self, name: str, value: str) -> object: ...

    def write(self, data: Union[str, bytes]) -> object: ...

    def end(self, data: Union[str, bytes, None] = None) -> object: ...


class ResponseFinishedError(RuntimeError):
    """Raised when writing to a response that has already ended."""


class HTTPResponse:
    """
    In-memory response accumulated by the static server.

    Attributes:
        status_code: Integer status, 200 until told otherwise.
        headers:     Header name → value, in insertion order.
        body:        Bytes written so far.
        finished:    True once ``end()`` has been called.
    """

    def __init__(self, version: str = "HTTP/1.1"):
        self.version = version
        self.status_code: int = 200
        self.headers: Dict[str, str] = {}
        self._body = bytearray()
        self.finished = False

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {self.status_code} {phrase_for(self.status_code)}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self._check_open()
        self.headers[name] = value
        return self

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def write(self, data: Union[str, bytes]) -> "HTTPResponse":
        """
        Append to the response body.

        Strings are encoded as UTF-8.
        """
        self._check_open()
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._body.extend(data)
        return self

    def end(self, data: Union[str, bytes, None] = None) -> "HTTPResponse":
        """Write an optional final chunk and mark the response finished."""
        if data is not None:
            self.write(data)
        self.finished = True
        return self

    def _check_open(self):
        if self.finished:
            raise ResponseFinishedError("Response has already ended")

    def to_bytes(self, server_name: str = "staticweb") -> bytes:
        """
        Serialize the response to bytes for sending over a socket.

            HTTP/1.1 200 OK\\r\\n          ← Status line
            content-type: text/html\\r\\n
            Content-Length: 27\\r\\n       ← Auto-calculated
            Date: Wed, 01 Jan 2026 ...\\r\\n  ← Auto-added
            Server: staticweb\\r\\n         ← Auto-added
            \\r\\n                         ← Empty line (separator)
            <html>...                    ← Body bytes
        """
        response_headers = dict(self.headers)
        present = {name.lower() for name in response_headers}

        if "content-length" not in present:
            response_headers["Content-Length"] = str(len(self._body))
        if "date" not in present:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))
        if "server" not in present:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + bytes(self._body)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
