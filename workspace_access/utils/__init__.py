"""
Utility modules.
"""

from .context import (
    RequestContext,
    RequestContextMiddleware,
    add_request_context,
    get_request_context,
    get_request_id,
    set_context_user,
)

__all__ = [
    "RequestContext",
    "RequestContextMiddleware",
    "add_request_context",
    "get_request_context",
    "get_request_id",
    "set_context_user",
]
