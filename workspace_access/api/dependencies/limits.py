"""
Subscription limit dependencies.

``create_limit_guard`` turns a limit key into a route dependency that
rejects the request before the handler runs:

```python
@router.post(
    "/{workspace_id}/brands",
    dependencies=[Depends(create_limit_guard(LimitKeys.BRAND_MAX_COUNT))],
)
async def create_brand(...):
    ...
```

Error mapping:
    LimitExceededError    -> 403 LIMIT_EXCEEDED (decision payload in details)
    UnsupportedLimitError -> 501 LIMIT_NOT_IMPLEMENTED
    BrandNotFoundError    -> 404 BRAND_NOT_FOUND
Anything else propagates to the global exception handler.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Union
from uuid import UUID

import structlog
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.limits import (
    DEFAULT_PLAN_CATALOG,
    BrandNotFoundError,
    LimitExceededError,
    LimitService,
    PlanCatalog,
    UnsupportedLimitError,
    is_limit_key,
)
from workspace_access.models.subscription import SubscriptionPlan
from .auth import RequestAuth, get_request_auth
from .database import get_db

logger = structlog.get_logger()


@dataclass
class LimitContext:
    """Scope of one limit check; unset ids fall back to the request's."""
    workspace_id: UUID | None = None
    brand_id: UUID | None = None
    user_id: UUID | None = None
    amount: int = 1
    current: int | None = None
    plan_override: SubscriptionPlan | None = None


LimitContextResolver = Callable[
    [Request],
    Union[LimitContext, Mapping[str, Any], Awaitable[Union[LimitContext, Mapping[str, Any]]]],
]

_CONTEXT_ALIASES = {
    "workspaceId": "workspace_id",
    "brandId": "brand_id",
    "userId": "user_id",
    "planOverride": "plan_override",
}


def as_limit_context(value: LimitContext | Mapping[str, Any]) -> LimitContext:
    """
    Normalize a resolver result.

    Mappings may use snake_case or camelCase keys
    (``{"current": 3, "planOverride": "PRO"}``); unknown keys raise TypeError.
    """
    if isinstance(value, LimitContext):
        return value

    fields = {_CONTEXT_ALIASES.get(key, key): item for key, item in value.items()}
    for name in ("workspace_id", "brand_id", "user_id"):
        if fields.get(name) is not None and not isinstance(fields[name], UUID):
            fields[name] = UUID(str(fields[name]))
    if fields.get("plan_override") is not None:
        fields["plan_override"] = SubscriptionPlan(fields["plan_override"])
    return LimitContext(**fields)


def get_plan_catalog() -> PlanCatalog:
    """Plan catalog dependency (override in tests)."""
    return DEFAULT_PLAN_CATALOG


async def get_limit_service(
    db: AsyncSession = Depends(get_db),
    catalog: PlanCatalog = Depends(get_plan_catalog),
) -> LimitService:
    """Get limit service instance."""
    return LimitService(db, catalog=catalog)


def limit_error_detail(exc: Exception) -> dict[str, Any]:
    """HTTP error body for a limit error."""
    if isinstance(exc, LimitExceededError):
        return {
            "code": exc.code,
            "message": str(exc),
            "details": exc.decision.to_payload(),
        }
    return {"code": getattr(exc, "code", "LIMIT_ERROR"), "message": str(exc)}


def create_limit_guard(
    limit_key: str,
    context_resolver: LimitContextResolver | None = None,
) -> Callable:
    """
    Dependency factory enforcing ``limit_key`` on a route.

    ``context_resolver`` receives the request and returns a LimitContext
    or a mapping accepted by ``as_limit_context`` (sync or async). Limit
    errors it raises are mapped like those of the check itself. Without one
    the workspace, brand and user of the authenticated request are used.
    """
    if not is_limit_key(limit_key):
        # Still rejected per request with 501
        logger.warning("limit_guard_unknown_key", limit_key=limit_key)

    async def limit_guard(
        request: Request,
        auth: RequestAuth = Depends(get_request_auth),
        limit_service: LimitService = Depends(get_limit_service),
    ) -> None:
        try:
            ctx = LimitContext()
            if context_resolver is not None:
                ctx = context_resolver(request)
                if inspect.isawaitable(ctx):
                    ctx = await ctx
                ctx = as_limit_context(ctx)

            await limit_service.check_limit(
                limit_key,
                workspace_id=ctx.workspace_id or auth.workspace_id,
                brand_id=ctx.brand_id or auth.brand_id,
                user_id=ctx.user_id or auth.user_id,
                amount=ctx.amount,
                current=ctx.current,
                plan_override=ctx.plan_override,
            )
        except LimitExceededError as e:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=limit_error_detail(e),
            )
        except UnsupportedLimitError as e:
            raise HTTPException(
                status_code=status.HTTP_501_NOT_IMPLEMENTED,
                detail=limit_error_detail(e),
            )
        except BrandNotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=limit_error_detail(e),
            )

    return limit_guard
