"""
Database models.
"""

from .base import (
    Base,
    TimestampMixin,
    UUIDMixin,
    StandardMixin,
)
from .user import User
from .workspace import Workspace, WorkspaceMember, WorkspaceRole
from .rbac import Permission, Role, role_permissions
from .subscription import Subscription, SubscriptionPlan, SubscriptionStatus
from .brand import Brand, SocialAccount, BrandContent

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "StandardMixin",
    # Models
    "User",
    "Workspace",
    "WorkspaceMember",
    "WorkspaceRole",
    "Permission",
    "Role",
    "role_permissions",
    "Subscription",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "Brand",
    "SocialAccount",
    "BrandContent",
]
