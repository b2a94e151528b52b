"""
RBAC Models - Permissions, workspace Roles and their grants.

- Permission: global catalog row, one per registry key
- Role: per-workspace role, unique on (workspace_id, key)
- role_permissions: grant edges, unique on (role_id, permission_id)

Built-in roles (``workspace-owner``, ``workspace-admin``,
``workspace-member``) are materialized by the role provisioner; custom
roles live in the same table with ``built_in = False``.
"""

from uuid import UUID
from sqlalchemy import String, Integer, Boolean, ForeignKey, UniqueConstraint, Table, Column
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID as PGUUID

from .base import Base, StandardMixin


# Many-to-many relationship between Role and Permission.
# The composite primary key is the unique pair upserts conflict on.
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", PGUUID(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", PGUUID(as_uuid=True), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(Base, StandardMixin):
    """
    Permission catalog entry.

    Keys follow ``<scope>:<resource>.<action>``, e.g.
    ``studio:brand.create``.
    """

    __tablename__ = "permissions"

    key: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    roles: Mapped[list["Role"]] = relationship(
        "Role",
        secondary=role_permissions,
        back_populates="permissions",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Permission {self.key}>"


class Role(Base, StandardMixin):
    """
    Workspace role.

    ``order`` drives listing order (owner first).
    """

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("workspace_id", "key", name="uq_role_workspace_key"),
    )

    workspace_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    built_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    permissions: Mapped[list["Permission"]] = relationship(
        "Permission",
        secondary=role_permissions,
        back_populates="roles",
        lazy="selectin",
    )

    @property
    def permission_keys(self) -> set[str]:
        """Keys granted to this role."""
        return {permission.key for permission in self.permissions}

    def __repr__(self) -> str:
        return f"<Role {self.key} workspace={self.workspace_id}>"
