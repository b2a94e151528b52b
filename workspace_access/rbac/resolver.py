"""
Effective permission resolution.

A member's permissions in a workspace are the permission keys granted to
their role. The role is picked by ``WorkspaceMember.role_id`` when it is
set and belongs to the same workspace, otherwise by the naming
convention ``workspace-<lowercase enum>``. Nothing is cached: every call
reads the current rows.
"""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.models.rbac import Role
from workspace_access.models.workspace import WorkspaceMember
from .registry import DEFAULT_PERMISSION_REGISTRY, PermissionRegistry

logger = structlog.get_logger()


class RoleResolver:
    """Computes a user's effective permission set in a workspace."""

    def __init__(
        self,
        db: AsyncSession,
        registry: PermissionRegistry = DEFAULT_PERMISSION_REGISTRY,
    ):
        self.db = db
        self.registry = registry

    async def get_membership(self, user_id: UUID, workspace_id: UUID) -> WorkspaceMember | None:
        stmt = select(WorkspaceMember).where(
            WorkspaceMember.user_id == user_id,
            WorkspaceMember.workspace_id == workspace_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_member_role(self, member: WorkspaceMember) -> Role | None:
        """Role row backing ``member``, or None when it was never provisioned."""
        stmt = (
            select(Role)
            .where(Role.workspace_id == member.workspace_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        roles = result.scalars().all()

        if member.role_id is not None:
            for role in roles:
                if role.id == member.role_id:
                    if role.built_in and role.key != member.role.role_key:
                        logger.warning(
                            "member_role_id_enum_mismatch",
                            user_id=str(member.user_id),
                            workspace_id=str(member.workspace_id),
                            role=member.role.value,
                            role_key=role.key,
                        )
                    return role
            logger.warning(
                "member_role_id_not_in_workspace",
                user_id=str(member.user_id),
                workspace_id=str(member.workspace_id),
                role_id=str(member.role_id),
            )

        role_key = member.role.role_key
        for role in roles:
            if role.key == role_key:
                return role
        return None

    async def resolve_permissions(self, user_id: UUID, workspace_id: UUID) -> frozenset[str]:
        """Permission keys held by ``user_id`` in ``workspace_id``."""
        member = await self.get_membership(user_id, workspace_id)
        if member is None:
            return frozenset()

        role = await self.get_member_role(member)
        if role is None:
            logger.warning(
                "workspace_role_missing",
                user_id=str(user_id),
                workspace_id=str(workspace_id),
                role=member.role.value,
            )
            return frozenset()

        granted = set()
        for key in role.permission_keys:
            if self.registry.is_permission_key(key):
                granted.add(key)
            else:
                logger.warning(
                    "unknown_permission_key",
                    key=key,
                    role=role.key,
                    workspace_id=str(workspace_id),
                )
        return frozenset(granted)

    async def has_permission(self, user_id: UUID, workspace_id: UUID, permission: str) -> bool:
        """Check if user holds ``permission`` in the workspace."""
        return permission in await self.resolve_permissions(user_id, workspace_id)
