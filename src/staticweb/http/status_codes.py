"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes a static content server actually emits.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    STATUS CODES USED BY STATICWEB                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   200 OK                     File content, directory listing        │
    │   404 Not Found              notFound = true, or custom 404 page    │
    │   405 Method Not Allowed     Standalone bridge, non GET/HEAD        │
    │   500 Internal Server Error  Standalone bridge, unexpected failure   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is a 4xx or 5xx status code."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def phrase_for(status_code: int) -> str:
    """Reason phrase for a raw integer status, "Unknown" when unmapped."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"
