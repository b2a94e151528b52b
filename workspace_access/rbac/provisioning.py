"""
Built-in workspace role provisioning.

Every workspace carries three built-in roles:

    workspace-owner   every registry permission
    workspace-admin   settings, brand view, content create/publish
    workspace-member  brand view, social account view

``ensure_default_workspace_roles`` materializes them idempotently. It is
additive-only: grants are upserted, never revoked, so narrowing a role
is always an explicit administrative action. It never commits; call it
inside the transaction that creates (or backfills) the workspace so a
failure rolls the whole unit back.

Usage:
    async with session.begin():
        session.add(workspace)
        await session.flush()
        await ensure_default_workspace_roles(session, workspace.id)
"""

from dataclasses import dataclass
from typing import Sequence
from uuid import UUID, uuid4

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.models.rbac import Permission, Role, role_permissions
from workspace_access.models.upsert import upsert_rows
from workspace_access.models.workspace import Workspace
from .registry import DEFAULT_PERMISSION_REGISTRY, PermissionRegistry, Permissions

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuiltInRole:
    """
    Definition of a built-in role.

    ``permission_keys`` of None means "every key in the registry".
    """
    key: str
    name: str
    description: str
    order: int
    permission_keys: tuple[str, ...] | None

    def grants(self, registry: PermissionRegistry) -> tuple[str, ...]:
        if self.permission_keys is None:
            return registry.get_all_permission_keys()
        return tuple(key for key in self.permission_keys if key in registry)


OWNER_ROLE_KEY = "workspace-owner"
ADMIN_ROLE_KEY = "workspace-admin"
MEMBER_ROLE_KEY = "workspace-member"

BUILT_IN_ROLES: tuple[BuiltInRole, ...] = (
    BuiltInRole(
        key=OWNER_ROLE_KEY,
        name="Workspace Owner",
        description="Full access to all workspace features",
        order=0,
        permission_keys=None,
    ),
    BuiltInRole(
        key=ADMIN_ROLE_KEY,
        name="Workspace Admin",
        description="Manage content and brands",
        order=10,
        permission_keys=(
            Permissions.WORKSPACE_SETTINGS_MANAGE,
            Permissions.STUDIO_BRAND_VIEW,
            Permissions.STUDIO_CONTENT_CREATE,
            Permissions.STUDIO_CONTENT_PUBLISH,
        ),
    ),
    BuiltInRole(
        key=MEMBER_ROLE_KEY,
        name="Workspace Member",
        description="Basic access to workspace content",
        order=20,
        permission_keys=(
            Permissions.STUDIO_BRAND_VIEW,
            Permissions.STUDIO_SOCIAL_ACCOUNT_VIEW,
        ),
    ),
)


class RoleProvisioner:
    """
    Materializes built-in roles and their grants for a workspace.

    Concurrent runs for the same workspace are safe: every write is an
    upsert against a unique constraint, so racing inserts collapse in
    the store instead of failing.
    """

    def __init__(
        self,
        registry: PermissionRegistry = DEFAULT_PERMISSION_REGISTRY,
        roles: Sequence[BuiltInRole] = BUILT_IN_ROLES,
    ):
        self.registry = registry
        self.roles = tuple(roles)

    async def ensure_default_workspace_roles(self, tx: AsyncSession, workspace_id: UUID) -> None:
        permission_ids = await self._ensure_permissions(tx)
        role_ids = await self._ensure_roles(tx, workspace_id)

        edges = [
            {"role_id": role_ids[role.key], "permission_id": permission_ids[key]}
            for role in self.roles
            for key in role.grants(self.registry)
        ]
        await upsert_rows(
            tx,
            role_permissions,
            edges,
            conflict_columns=("role_id", "permission_id"),
        )

        logger.info(
            "workspace_roles_provisioned",
            workspace_id=str(workspace_id),
            roles=len(role_ids),
            grants=len(edges),
        )

    async def _ensure_permissions(self, tx: AsyncSession) -> dict[str, UUID]:
        # Descriptions are only written on create.
        keys = self.registry.get_all_permission_keys()
        await upsert_rows(
            tx,
            Permission,
            [
                {"id": uuid4(), "key": key, "description": self.registry.describe(key)}
                for key in keys
            ],
            conflict_columns=("key",),
        )
        result = await tx.execute(
            select(Permission.key, Permission.id).where(Permission.key.in_(keys))
        )
        return {key: permission_id for key, permission_id in result.all()}

    async def _ensure_roles(self, tx: AsyncSession, workspace_id: UUID) -> dict[str, UUID]:
        await upsert_rows(
            tx,
            Role,
            [
                {
                    "id": uuid4(),
                    "workspace_id": workspace_id,
                    "key": role.key,
                    "name": role.name,
                    "description": role.description,
                    "built_in": True,
                    "order": role.order,
                }
                for role in self.roles
            ],
            conflict_columns=("workspace_id", "key"),
            update_columns=("name", "description", "built_in", "order"),
        )
        result = await tx.execute(
            select(Role.key, Role.id).where(
                Role.workspace_id == workspace_id,
                Role.key.in_([role.key for role in self.roles]),
            )
        )
        return {key: role_id for key, role_id in result.all()}


async def ensure_default_workspace_roles(
    tx: AsyncSession,
    workspace_id: UUID,
    registry: PermissionRegistry | None = None,
) -> None:
    """Idempotently provision the built-in roles of ``workspace_id``."""
    provisioner = RoleProvisioner(registry or DEFAULT_PERMISSION_REGISTRY)
    await provisioner.ensure_default_workspace_roles(tx, workspace_id)


async def ensure_roles_for_all_workspaces(
    tx: AsyncSession,
    registry: PermissionRegistry | None = None,
) -> int:
    """Backfill built-in roles for every workspace. Returns the count."""
    provisioner = RoleProvisioner(registry or DEFAULT_PERMISSION_REGISTRY)
    result = await tx.execute(select(Workspace.id).order_by(Workspace.created_at))
    workspace_ids = list(result.scalars().all())
    for workspace_id in workspace_ids:
        await provisioner.ensure_default_workspace_roles(tx, workspace_id)
    return len(workspace_ids)
