"""
Workspace service.

Workspace creation is one unit of work: the workspace, the owner's
membership, a FREE subscription and the built-in roles are all flushed
in the caller's transaction, so a failure anywhere leaves nothing
behind.
"""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from workspace_access.models.rbac import Role
from workspace_access.models.subscription import Subscription, SubscriptionPlan, SubscriptionStatus
from workspace_access.models.workspace import Workspace, WorkspaceMember, WorkspaceRole
from workspace_access.rbac import DEFAULT_PERMISSION_REGISTRY, PermissionRegistry, RoleProvisioner
from workspace_access.schemas.workspace import WorkspaceCreate

logger = structlog.get_logger()


class WorkspaceService:
    """Workspace management service."""

    def __init__(
        self,
        db: AsyncSession,
        registry: PermissionRegistry = DEFAULT_PERMISSION_REGISTRY,
    ):
        self.db = db
        self.provisioner = RoleProvisioner(registry)

    async def get_by_id(self, workspace_id: UUID) -> Workspace | None:
        """Get workspace by ID."""
        stmt = select(Workspace).where(Workspace.id == workspace_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Workspace | None:
        """Get workspace by slug."""
        stmt = select(Workspace).where(Workspace.slug == slug)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, data: WorkspaceCreate, owner_id: UUID) -> Workspace:
        """Create workspace with owner, subscription and built-in roles."""
        if await self.get_by_slug(data.slug):
            raise ValueError("Workspace slug already exists")

        workspace = Workspace(**data.model_dump())
        self.db.add(workspace)
        await self.db.flush()

        self.db.add(Subscription(
            workspace_id=workspace.id,
            plan=SubscriptionPlan.FREE,
            status=SubscriptionStatus.ACTIVE,
        ))
        await self.provisioner.ensure_default_workspace_roles(self.db, workspace.id)

        self.db.add(WorkspaceMember(
            workspace_id=workspace.id,
            user_id=owner_id,
            role=WorkspaceRole.OWNER,
            role_id=await self._built_in_role_id(workspace.id, WorkspaceRole.OWNER),
        ))
        await self.db.flush()
        await self.db.refresh(workspace)

        logger.info(
            "workspace_created",
            workspace_id=str(workspace.id),
            slug=workspace.slug,
            owner_id=str(owner_id),
        )
        return workspace

    async def _built_in_role_id(self, workspace_id: UUID, role: WorkspaceRole) -> UUID | None:
        stmt = select(Role.id).where(
            Role.workspace_id == workspace_id,
            Role.key == role.role_key,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    # Members
    async def get_member(self, workspace_id: UUID, user_id: UUID) -> WorkspaceMember | None:
        stmt = (
            select(WorkspaceMember)
            .where(
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.user_id == user_id,
            )
            .options(selectinload(WorkspaceMember.user))
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_members(self, workspace_id: UUID) -> list[WorkspaceMember]:
        """List workspace members with user info."""
        stmt = (
            select(WorkspaceMember)
            .where(WorkspaceMember.workspace_id == workspace_id)
            .options(selectinload(WorkspaceMember.user))
            .order_by(WorkspaceMember.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def add_member(
        self,
        workspace_id: UUID,
        user_id: UUID,
        role: WorkspaceRole = WorkspaceRole.MEMBER,
    ) -> WorkspaceMember:
        """Add member to workspace."""
        if await self.get_member(workspace_id, user_id):
            raise ValueError("User is already a member of this workspace")

        member = WorkspaceMember(
            workspace_id=workspace_id,
            user_id=user_id,
            role=role,
            role_id=await self._built_in_role_id(workspace_id, role),
        )
        self.db.add(member)
        await self.db.flush()

        logger.info(
            "workspace_member_added",
            workspace_id=str(workspace_id),
            user_id=str(user_id),
            role=role.value,
        )
        return await self.get_member(workspace_id, user_id)

    async def update_member(
        self,
        workspace_id: UUID,
        user_id: UUID,
        role: WorkspaceRole,
    ) -> WorkspaceMember | None:
        """Update member role; ``role_id`` follows the built-in role."""
        member = await self.get_member(workspace_id, user_id)
        if not member:
            return None

        member.role = role
        member.role_id = await self._built_in_role_id(workspace_id, role)
        await self.db.flush()
        return member

    async def remove_member(self, workspace_id: UUID, user_id: UUID) -> bool:
        """Remove member from workspace."""
        member = await self.get_member(workspace_id, user_id)
        if not member:
            return False

        await self.db.delete(member)
        await self.db.flush()
        return True

    # Roles
    async def list_roles(self, workspace_id: UUID) -> list[Role]:
        """Roles of the workspace, backfilling built-in roles first."""
        await self.provisioner.ensure_default_workspace_roles(self.db, workspace_id)

        stmt = (
            select(Role)
            .where(Role.workspace_id == workspace_id)
            .order_by(Role.order, Role.created_at)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # Subscription
    async def get_subscription(self, workspace_id: UUID) -> Subscription | None:
        stmt = select(Subscription).where(Subscription.workspace_id == workspace_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
