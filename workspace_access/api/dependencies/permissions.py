"""
Permission checking dependencies.
"""

from typing import Callable

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.models.workspace import WorkspaceMember
from workspace_access.rbac import DEFAULT_PERMISSION_REGISTRY, PermissionRegistry, RoleResolver
from .auth import RequestAuth, get_request_auth
from .database import get_db


def get_permission_registry() -> PermissionRegistry:
    """Permission registry dependency (override in tests)."""
    return DEFAULT_PERMISSION_REGISTRY


async def get_role_resolver(
    db: AsyncSession = Depends(get_db),
    registry: PermissionRegistry = Depends(get_permission_registry),
) -> RoleResolver:
    """Get role resolver instance."""
    return RoleResolver(db, registry)


def _require_workspace(auth: RequestAuth) -> None:
    if auth.workspace_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "WORKSPACE_REQUIRED", "message": "No workspace in request"},
        )


async def require_workspace_member(
    auth: RequestAuth = Depends(get_request_auth),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> WorkspaceMember:
    """Membership of the caller in the target workspace; 404 when absent."""
    _require_workspace(auth)
    member = await resolver.get_membership(auth.user_id, auth.workspace_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "WORKSPACE_NOT_FOUND", "message": "Workspace not found"},
        )
    return member


def require_permission(permission: str) -> Callable:
    """
    Dependency factory for checking workspace permissions.

    Usage:
    ```python
    @router.get("/{workspace_id}/usage")
    async def get_usage(
        workspace_id: UUID,
        auth: RequestAuth = Depends(require_permission(Permissions.WORKSPACE_SETTINGS_MANAGE)),
    ):
        ...
    ```
    """

    async def check_permission(
        auth: RequestAuth = Depends(get_request_auth),
        resolver: RoleResolver = Depends(get_role_resolver),
    ) -> RequestAuth:
        _require_workspace(auth)
        if not await resolver.has_permission(auth.user_id, auth.workspace_id, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "FORBIDDEN",
                    "message": f"Permission denied: {permission}",
                },
            )
        return auth

    return check_permission
