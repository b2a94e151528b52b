"""
Request Context Utilities.

Provides request IDs and the authenticated request context
(user, workspace, brand) for log correlation.

Usage:
    # In middleware (automatic)
    app.add_middleware(RequestContextMiddleware)

    # After authentication
    set_context_user(str(user_id), workspace_id=str(workspace_id))

    # Every structlog event picks these up via add_request_context
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


# ============================================================
# CONTEXT VARIABLES
# ============================================================

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_request_context: ContextVar[Optional["RequestContext"]] = ContextVar("request_context", default=None)


@dataclass
class RequestContext:
    """Request-scoped metadata for logging."""
    request_id: str

    method: str = ""
    path: str = ""
    client_ip: str = ""

    # Populated by the auth dependency
    user_id: Optional[str] = None
    workspace_id: Optional[str] = None
    brand_id: Optional[str] = None

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "user_id": self.user_id,
            "workspace_id": self.workspace_id,
            "brand_id": self.brand_id,
        }


# ============================================================
# CONTEXT ACCESSORS
# ============================================================

def get_request_id() -> Optional[str]:
    """Get the current request ID."""
    return _request_id.get()


def get_request_context() -> Optional[RequestContext]:
    """Get the full request context (None outside a request)."""
    return _request_context.get()


def set_context_user(
    user_id: str,
    workspace_id: Optional[str] = None,
    brand_id: Optional[str] = None,
) -> None:
    """Record the authenticated principal on the current request context."""
    ctx = _request_context.get()
    if ctx:
        ctx.user_id = user_id
        ctx.workspace_id = workspace_id
        ctx.brand_id = brand_id


# ============================================================
# MIDDLEWARE
# ============================================================

class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Creates the request context for each request.

    Honors an incoming X-Request-ID header and echoes it back.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            client_ip = forwarded.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else "unknown"

        ctx = RequestContext(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
        )

        id_token = _request_id.set(request_id)
        ctx_token = _request_context.set(ctx)
        request.state.request_id = request_id
        request.state.context = ctx

        try:
            response = await call_next(request)
        finally:
            _request_id.reset(id_token)
            _request_context.reset(ctx_token)

        response.headers["X-Request-ID"] = request_id
        return response


# ============================================================
# STRUCTLOG PROCESSOR
# ============================================================

def add_request_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds request context to all logs."""
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    ctx = get_request_context()
    if ctx:
        if ctx.user_id:
            event_dict.setdefault("user_id", ctx.user_id)
        if ctx.workspace_id:
            event_dict.setdefault("workspace_id", ctx.workspace_id)

    return event_dict
