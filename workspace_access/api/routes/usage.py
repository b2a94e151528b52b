"""
Usage routes.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status

from workspace_access.api.dependencies.auth import RequestAuth
from workspace_access.api.dependencies.limits import get_limit_service
from workspace_access.api.dependencies.permissions import require_permission
from workspace_access.limits import LimitScope, LimitService, get_limit_definition
from workspace_access.rbac import Permissions
from workspace_access.schemas.usage import UsageResponse

router = APIRouter()


@router.get("/{workspace_id}/usage", response_model=UsageResponse)
async def get_usage(
    workspace_id: UUID,
    limit_key: str = Query(alias="limitKey"),
    brand_id: UUID | None = Query(None, alias="brandId"),
    limit_service: LimitService = Depends(get_limit_service),
    auth: RequestAuth = Depends(require_permission(Permissions.WORKSPACE_SETTINGS_MANAGE)),
):
    """Current usage of a limit key against the workspace plan."""
    definition = get_limit_definition(limit_key)
    if definition is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": "INVALID_LIMIT_KEY",
                "message": "limitKey is required and must be a known limit",
            },
        )

    if definition.scope == LimitScope.BRAND and brand_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": "BRAND_ID_REQUIRED",
                "message": f"brandId is required for {limit_key}",
            },
        )

    # amount=0 reports current usage without projecting a new unit
    decision = await limit_service.evaluate(
        limit_key,
        workspace_id=workspace_id,
        brand_id=brand_id,
        user_id=auth.user_id,
        amount=0,
    )

    scope_ids = {
        LimitScope.USER: auth.user_id,
        LimitScope.WORKSPACE: workspace_id,
        LimitScope.BRAND: brand_id,
    }
    return UsageResponse.from_decision(decision, definition.scope, scope_ids[definition.scope])
