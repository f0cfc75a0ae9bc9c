"""
=============================================================================
HTTP REQUEST
=============================================================================

The inbound side of the request/response pair handed to ``StaticWeb.listen``.

The static server only needs the request target (the URL as it appeared on
the request line). Everything else here exists so access logs and the
standalone bridge have something meaningful to report.

    GET /docs/guide.html?lang=en HTTP/1.1
        ──────────────────────────
                  url
        ────────────────  ───────
              path      query_string

The transport that produced the request is not our concern: anything with
a ``url`` attribute (and optionally ``method``/``headers``) can be passed to
``listen``. ``HTTPRequest`` is the concrete dataclass used by the bridge and
by the tests.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Protocol


class RequestLike(Protocol):
    """Minimal request surface consumed by the static server."""

    url: str


@dataclass
class HTTPRequest:
    """
    A request as seen by the static server.

    Header names are stored lowercase, as they are case-insensitive
    per RFC 7230.
    """

    url: str = "/"                       # Raw request target, query included
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)

    def __post_init__(self):
        self.headers = {k.lower(): v for k, v in self.headers.items()}

    @property
    def path(self) -> str:
        """Request path without the query string."""
        return strip_query(self.url)

    @property
    def query_string(self) -> str:
        """Everything after the first "?", empty when absent."""
        _, _, query = self.url.partition("?")
        return query

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


def strip_query(url: str) -> str:
    """Drop the query string from a request target."""
    return url.split("?", 1)[0]
