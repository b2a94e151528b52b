"""
Workspace routes.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status

from workspace_access.api.dependencies.auth import RequestAuth, get_request_auth
from workspace_access.api.dependencies.limits import create_limit_guard
from workspace_access.api.dependencies.permissions import (
    get_permission_registry,
    get_role_resolver,
    require_permission,
    require_workspace_member,
)
from workspace_access.api.dependencies.services import get_workspace_service
from workspace_access.limits import LimitKeys
from workspace_access.models.workspace import WorkspaceMember
from workspace_access.rbac import PermissionRegistry, Permissions, RoleResolver
from workspace_access.schemas.workspace import (
    AddMemberRequest,
    PermissionsResponse,
    RoleResponse,
    SubscriptionResponse,
    UpdateMemberRequest,
    WorkspaceCreate,
    WorkspaceMemberResponse,
    WorkspaceResponse,
)
from workspace_access.services.workspace import WorkspaceService

router = APIRouter()


def _not_found(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": "NOT_FOUND", "message": message},
    )


@router.post(
    "",
    response_model=WorkspaceResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(create_limit_guard(LimitKeys.WORKSPACE_MAX_COUNT))],
)
async def create_workspace(
    data: WorkspaceCreate,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    auth: RequestAuth = Depends(get_request_auth),
):
    """Create a workspace owned by the caller."""
    try:
        workspace = await workspace_service.create(data, owner_id=auth.user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "SLUG_TAKEN", "message": str(e)},
        )
    return WorkspaceResponse.model_validate(workspace)


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
async def get_workspace(
    workspace_id: UUID,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    _: WorkspaceMember = Depends(require_workspace_member),
):
    """Get workspace by ID."""
    workspace = await workspace_service.get_by_id(workspace_id)
    if not workspace:
        raise _not_found("Workspace not found")
    return WorkspaceResponse.model_validate(workspace)


@router.get("/{workspace_id}/permissions/me", response_model=PermissionsResponse)
async def get_my_permissions(
    workspace_id: UUID,
    member: WorkspaceMember = Depends(require_workspace_member),
    resolver: RoleResolver = Depends(get_role_resolver),
):
    """Effective permissions of the caller in the workspace."""
    granted = await resolver.resolve_permissions(member.user_id, workspace_id)
    ordered = [key for key in resolver.registry.get_all_permission_keys() if key in granted]
    return PermissionsResponse(workspace_id=workspace_id, role=member.role, permissions=ordered)


@router.get("/{workspace_id}/roles", response_model=list[RoleResponse])
async def list_roles(
    workspace_id: UUID,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    registry: PermissionRegistry = Depends(get_permission_registry),
    _: RequestAuth = Depends(require_permission(Permissions.WORKSPACE_MEMBERS_MANAGE)),
):
    """List workspace roles with their permissions."""
    roles = await workspace_service.list_roles(workspace_id)
    order = {key: index for index, key in enumerate(registry.get_all_permission_keys())}
    return [
        RoleResponse(
            id=role.id,
            key=role.key,
            name=role.name,
            description=role.description,
            built_in=role.built_in,
            order=role.order,
            permissions=sorted(role.permission_keys, key=lambda k: (order.get(k, len(order)), k)),
        )
        for role in roles
    ]


@router.get("/{workspace_id}/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    workspace_id: UUID,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    _: RequestAuth = Depends(require_permission(Permissions.WORKSPACE_SETTINGS_MANAGE)),
):
    """Get the workspace subscription."""
    subscription = await workspace_service.get_subscription(workspace_id)
    if not subscription:
        raise _not_found("Subscription not found")
    return SubscriptionResponse.model_validate(subscription)


# Members
@router.get("/{workspace_id}/members", response_model=list[WorkspaceMemberResponse])
async def list_members(
    workspace_id: UUID,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    _: WorkspaceMember = Depends(require_workspace_member),
):
    """List workspace members."""
    members = await workspace_service.list_members(workspace_id)
    return [WorkspaceMemberResponse.model_validate(m) for m in members]


@router.post(
    "/{workspace_id}/members",
    response_model=WorkspaceMemberResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_permission(Permissions.WORKSPACE_MEMBERS_MANAGE)),
        Depends(create_limit_guard(LimitKeys.WORKSPACE_MEMBER_MAX_COUNT)),
    ],
)
async def add_member(
    workspace_id: UUID,
    data: AddMemberRequest,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
):
    """Add a member to the workspace."""
    try:
        member = await workspace_service.add_member(
            workspace_id=workspace_id,
            user_id=data.user_id,
            role=data.role,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "ALREADY_MEMBER", "message": str(e)},
        )
    return WorkspaceMemberResponse.model_validate(member)


@router.patch("/{workspace_id}/members/{user_id}", response_model=WorkspaceMemberResponse)
async def update_member(
    workspace_id: UUID,
    user_id: UUID,
    data: UpdateMemberRequest,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    _: RequestAuth = Depends(require_permission(Permissions.WORKSPACE_MEMBERS_MANAGE)),
):
    """Update member role."""
    member = await workspace_service.update_member(
        workspace_id=workspace_id,
        user_id=user_id,
        role=data.role,
    )
    if not member:
        raise _not_found("Member not found")
    return WorkspaceMemberResponse.model_validate(member)


@router.delete("/{workspace_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    workspace_id: UUID,
    user_id: UUID,
    workspace_service: WorkspaceService = Depends(get_workspace_service),
    _: RequestAuth = Depends(require_permission(Permissions.WORKSPACE_MEMBERS_MANAGE)),
):
    """Remove member from workspace."""
    removed = await workspace_service.remove_member(workspace_id, user_id)
    if not removed:
        raise _not_found("Member not found")
