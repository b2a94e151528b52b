"""
Workspace RBAC.

Permission registry, built-in role provisioning and effective
permission resolution.
"""

from .registry import (
    DEFAULT_PERMISSION_REGISTRY,
    PermissionDefinition,
    PermissionRegistry,
    Permissions,
    get_all_permission_keys,
)
from .provisioning import (
    ADMIN_ROLE_KEY,
    BUILT_IN_ROLES,
    MEMBER_ROLE_KEY,
    OWNER_ROLE_KEY,
    BuiltInRole,
    RoleProvisioner,
    ensure_default_workspace_roles,
    ensure_roles_for_all_workspaces,
)
from .resolver import RoleResolver

__all__ = [
    "DEFAULT_PERMISSION_REGISTRY",
    "PermissionDefinition",
    "PermissionRegistry",
    "Permissions",
    "get_all_permission_keys",
    "ADMIN_ROLE_KEY",
    "BUILT_IN_ROLES",
    "MEMBER_ROLE_KEY",
    "OWNER_ROLE_KEY",
    "BuiltInRole",
    "RoleProvisioner",
    "ensure_default_workspace_roles",
    "ensure_roles_for_all_workspaces",
    "RoleResolver",
]
