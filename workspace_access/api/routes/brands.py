"""
Brand routes.

Every create endpoint is guarded by the matching subscription limit.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status

from workspace_access.api.dependencies.limits import create_limit_guard
from workspace_access.api.dependencies.permissions import require_permission
from workspace_access.api.dependencies.services import get_brand_service
from workspace_access.limits import LimitKeys
from workspace_access.models.brand import Brand
from workspace_access.rbac import Permissions
from workspace_access.schemas.brand import (
    BrandContentCreate,
    BrandContentResponse,
    BrandCreate,
    BrandResponse,
    SocialAccountCreate,
    SocialAccountResponse,
)
from workspace_access.services.brand import BrandService

router = APIRouter()


async def _get_brand(brand_service: BrandService, workspace_id: UUID, brand_id: UUID) -> Brand:
    brand = await brand_service.get_by_id(workspace_id, brand_id)
    if not brand:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "BRAND_NOT_FOUND", "message": f"Brand not found: {brand_id}"},
        )
    return brand


@router.post(
    "/{workspace_id}/brands",
    response_model=BrandResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_permission(Permissions.STUDIO_BRAND_CREATE)),
        Depends(create_limit_guard(LimitKeys.BRAND_MAX_COUNT)),
    ],
)
async def create_brand(
    workspace_id: UUID,
    data: BrandCreate,
    brand_service: BrandService = Depends(get_brand_service),
):
    """Create a brand."""
    brand = await brand_service.create(workspace_id, data)
    return BrandResponse.model_validate(brand)


@router.post(
    "/{workspace_id}/brands/{brand_id}/social-accounts",
    response_model=SocialAccountResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_permission(Permissions.STUDIO_BRAND_MANAGE_SOCIAL_ACCOUNTS)),
        Depends(create_limit_guard(LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT)),
    ],
)
async def connect_social_account(
    workspace_id: UUID,
    brand_id: UUID,
    data: SocialAccountCreate,
    brand_service: BrandService = Depends(get_brand_service),
):
    """Connect a social account to a brand."""
    brand = await _get_brand(brand_service, workspace_id, brand_id)
    account = await brand_service.add_social_account(brand, data)
    return SocialAccountResponse.model_validate(account)


@router.post(
    "/{workspace_id}/brands/{brand_id}/contents",
    response_model=BrandContentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_permission(Permissions.STUDIO_CONTENT_CREATE)),
        Depends(create_limit_guard(LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH)),
    ],
)
async def create_content(
    workspace_id: UUID,
    brand_id: UUID,
    data: BrandContentCreate,
    brand_service: BrandService = Depends(get_brand_service),
):
    """Create a content item for a brand."""
    brand = await _get_brand(brand_service, workspace_id, brand_id)
    content = await brand_service.add_content(brand, data)
    return BrandContentResponse.model_validate(content)
