"""
Permission Registry.

Central, immutable catalog of every permission key the service
recognizes. Keys follow ``<scope>:<resource>.<action>``:

    workspace:settings.manage
    studio:brand.create
    studio:content.publish

The registry is the source of truth for the ``permissions`` table: the
role provisioner creates a row for every key on its next run, so adding
a key needs no migration.

Usage:
    from workspace_access.rbac.registry import Permissions, DEFAULT_PERMISSION_REGISTRY

    DEFAULT_PERMISSION_REGISTRY.get_all_permission_keys()

    # Tests can build their own without touching the default
    registry = DEFAULT_PERMISSION_REGISTRY.extend(
        PermissionDefinition("studio:report.view", "View reports"),
    )
"""

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class PermissionDefinition:
    """One registry entry."""
    key: str
    description: str


class Permissions:
    """Permission key constants."""

    # Workspace
    WORKSPACE_SETTINGS_MANAGE = "workspace:settings.manage"
    WORKSPACE_MEMBERS_MANAGE = "workspace:members.manage"

    # Studio - brands
    STUDIO_BRAND_VIEW = "studio:brand.view"
    STUDIO_BRAND_CREATE = "studio:brand.create"
    STUDIO_BRAND_UPDATE = "studio:brand.update"
    STUDIO_BRAND_DELETE = "studio:brand.delete"
    STUDIO_BRAND_MANAGE_SOCIAL_ACCOUNTS = "studio:brand.manage_social_accounts"
    STUDIO_BRAND_MANAGE_PUBLISHING_DEFAULTS = "studio:brand.manage_publishing_defaults"

    # Studio - content
    STUDIO_CONTENT_VIEW = "studio:content.view"
    STUDIO_CONTENT_CREATE = "studio:content.create"
    STUDIO_CONTENT_UPDATE = "studio:content.update"
    STUDIO_CONTENT_DELETE = "studio:content.delete"
    STUDIO_CONTENT_PUBLISH = "studio:content.publish"
    STUDIO_CONTENT_MANAGE_PUBLICATIONS = "studio:content.manage_publications"

    # Studio - social accounts
    STUDIO_SOCIAL_ACCOUNT_VIEW = "studio:social_account.view"
    STUDIO_SOCIAL_ACCOUNT_CONNECT = "studio:social_account.connect"
    STUDIO_SOCIAL_ACCOUNT_DISCONNECT = "studio:social_account.disconnect"
    STUDIO_SOCIAL_ACCOUNT_DELETE = "studio:social_account.delete"


class PermissionRegistry:
    """
    Ordered, read-only set of permission definitions.

    Iteration order is declaration order and is stable across calls.
    """

    def __init__(self, definitions: Iterable[PermissionDefinition]):
        ordered: dict[str, PermissionDefinition] = {}
        for definition in definitions:
            if definition.key in ordered:
                raise ValueError(f"Duplicate permission key: {definition.key}")
            ordered[definition.key] = definition
        self._definitions = tuple(ordered.values())
        self._by_key = ordered

    def __iter__(self) -> Iterator[PermissionDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def get_all_permission_keys(self) -> tuple[str, ...]:
        """All keys in registry order."""
        return tuple(definition.key for definition in self._definitions)

    def is_permission_key(self, value: str) -> bool:
        return value in self._by_key

    def describe(self, key: str) -> str:
        definition = self._by_key.get(key)
        return definition.description if definition else f"Permission: {key}"

    def extend(self, *definitions: PermissionDefinition) -> "PermissionRegistry":
        """Return a new registry with ``definitions`` appended."""
        return PermissionRegistry((*self._definitions, *definitions))


DEFAULT_PERMISSION_REGISTRY = PermissionRegistry([
    PermissionDefinition(Permissions.WORKSPACE_SETTINGS_MANAGE, "Manage workspace settings"),
    PermissionDefinition(Permissions.WORKSPACE_MEMBERS_MANAGE, "Manage workspace members"),
    PermissionDefinition(Permissions.STUDIO_BRAND_VIEW, "View brands in studio"),
    PermissionDefinition(Permissions.STUDIO_BRAND_CREATE, "Create new brands"),
    PermissionDefinition(Permissions.STUDIO_BRAND_UPDATE, "Update brands"),
    PermissionDefinition(Permissions.STUDIO_BRAND_DELETE, "Delete brands"),
    PermissionDefinition(Permissions.STUDIO_BRAND_MANAGE_SOCIAL_ACCOUNTS, "Manage brand social accounts"),
    PermissionDefinition(Permissions.STUDIO_BRAND_MANAGE_PUBLISHING_DEFAULTS, "Manage brand publishing defaults"),
    PermissionDefinition(Permissions.STUDIO_CONTENT_VIEW, "View content"),
    PermissionDefinition(Permissions.STUDIO_CONTENT_CREATE, "Create content"),
    PermissionDefinition(Permissions.STUDIO_CONTENT_UPDATE, "Update content"),
    PermissionDefinition(Permissions.STUDIO_CONTENT_DELETE, "Delete content"),
    PermissionDefinition(Permissions.STUDIO_CONTENT_PUBLISH, "Publish content"),
    PermissionDefinition(Permissions.STUDIO_CONTENT_MANAGE_PUBLICATIONS, "Manage content publications"),
    PermissionDefinition(Permissions.STUDIO_SOCIAL_ACCOUNT_VIEW, "View social accounts"),
    PermissionDefinition(Permissions.STUDIO_SOCIAL_ACCOUNT_CONNECT, "Connect social accounts"),
    PermissionDefinition(Permissions.STUDIO_SOCIAL_ACCOUNT_DISCONNECT, "Disconnect social accounts"),
    PermissionDefinition(Permissions.STUDIO_SOCIAL_ACCOUNT_DELETE, "Delete social accounts"),
])


def get_all_permission_keys() -> tuple[str, ...]:
    """Keys of the default registry."""
    return DEFAULT_PERMISSION_REGISTRY.get_all_permission_keys()
