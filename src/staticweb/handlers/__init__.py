"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handling for the static server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Handler             │ Role                                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ StaticWeb           │ Entry point: listen(request, response)        │
    │                     │ resolve → load → 200 / listing / 404          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ DirectoryNavigator  │ Listing page for index-less directories       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .static import StaticWeb, RequestContext
from .listing import DirectoryNavigator, TEMPLATE_PATH

__all__ = [
    "StaticWeb",
    "RequestContext",
    "DirectoryNavigator",
    "TEMPLATE_PATH",
]
