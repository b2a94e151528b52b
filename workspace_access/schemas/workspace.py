"""
Workspace schemas.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict

from workspace_access.models.subscription import SubscriptionPlan, SubscriptionStatus
from workspace_access.models.workspace import WorkspaceRole


class WorkspaceCreate(BaseModel):
    """Workspace creation schema."""
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")


class WorkspaceResponse(BaseModel):
    """Workspace response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    is_active: bool
    created_at: datetime


class MemberUserInfo(BaseModel):
    """User info embedded in member response."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str | None = None


class WorkspaceMemberResponse(BaseModel):
    """Workspace member response."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    role: WorkspaceRole
    role_id: UUID | None = None
    user: MemberUserInfo
    created_at: datetime


class AddMemberRequest(BaseModel):
    """Add member request."""
    user_id: UUID
    role: WorkspaceRole = WorkspaceRole.MEMBER


class UpdateMemberRequest(BaseModel):
    """Update member role request."""
    role: WorkspaceRole


class RoleResponse(BaseModel):
    """Workspace role with its granted permission keys."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    key: str
    name: str
    description: str | None = None
    built_in: bool
    order: int
    permissions: list[str]


class PermissionsResponse(BaseModel):
    """Effective permissions of the caller."""
    workspace_id: UUID
    role: WorkspaceRole
    permissions: list[str]


class SubscriptionResponse(BaseModel):
    """Workspace subscription."""
    model_config = ConfigDict(from_attributes=True)

    workspace_id: UUID
    plan: SubscriptionPlan
    status: SubscriptionStatus
    period_start: datetime | None = None
    period_end: datetime | None = None
    cancel_at: datetime | None = None
