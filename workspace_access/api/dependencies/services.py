"""
Service dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.rbac import PermissionRegistry
from workspace_access.services.brand import BrandService
from workspace_access.services.workspace import WorkspaceService
from .database import get_db
from .permissions import get_permission_registry


async def get_workspace_service(
    db: AsyncSession = Depends(get_db),
    registry: PermissionRegistry = Depends(get_permission_registry),
) -> WorkspaceService:
    """Get workspace service instance."""
    return WorkspaceService(db, registry)


async def get_brand_service(db: AsyncSession = Depends(get_db)) -> BrandService:
    """Get brand service instance."""
    return BrandService(db)
