"""
=============================================================================
HTTP MODULE
=============================================================================

The request/response surface the static server is driven through, plus
the mime table that decides what can be served.

    request.py       HTTPRequest, the ``url``-bearing inbound object
    response.py      HTTPResponse, status / set_header / write / end
    status_codes.py  HTTPStatus enum with reason phrases
    mime_types.py    MimeTable, DEFAULT_MIMES

=============================================================================
"""

from .request import HTTPRequest, RequestLike, strip_query
from .response import HTTPResponse, ResponseLike, ResponseFinishedError
from .status_codes import HTTPStatus
from .mime_types import DEFAULT_MIMES, MimeTable, extension_of

__all__ = [
    "HTTPRequest",
    "RequestLike",
    "strip_query",
    "HTTPResponse",
    "ResponseLike",
    "ResponseFinishedError",
    "HTTPStatus",
    "DEFAULT_MIMES",
    "MimeTable",
    "extension_of",
]
