"""
Limit keys.

Each key names one quota dimension and the scope its usage is counted
in. Only keys registered here can be enforced; the plan catalog holds
their ceilings.
"""

from dataclasses import dataclass
from enum import Enum


class LimitScope(str, Enum):
    """Entity a usage count is taken over."""
    USER = "user"
    WORKSPACE = "workspace"
    BRAND = "brand"


class LimitWindow(str, Enum):
    """Counting window for periodic quotas."""
    MONTH = "month"


@dataclass(frozen=True)
class LimitKeyDefinition:
    key: str
    scope: LimitScope
    description: str
    window: LimitWindow | None = None


class LimitKeys:
    """Limit key constants."""

    WORKSPACE_MAX_COUNT = "workspace.maxCount"
    WORKSPACE_MEMBER_MAX_COUNT = "workspace.member.maxCount"
    BRAND_MAX_COUNT = "brand.maxCount"
    BRAND_SOCIAL_ACCOUNT_MAX_COUNT = "brand.socialAccount.maxCount"
    BRAND_CONTENT_MAX_COUNT_PER_MONTH = "brand.content.maxCountPerMonth"


LIMIT_KEYS: dict[str, LimitKeyDefinition] = {
    definition.key: definition
    for definition in (
        LimitKeyDefinition(
            LimitKeys.WORKSPACE_MAX_COUNT,
            LimitScope.USER,
            "Workspaces a user may own",
        ),
        LimitKeyDefinition(
            LimitKeys.WORKSPACE_MEMBER_MAX_COUNT,
            LimitScope.WORKSPACE,
            "Members per workspace",
        ),
        LimitKeyDefinition(
            LimitKeys.BRAND_MAX_COUNT,
            LimitScope.WORKSPACE,
            "Active brands per workspace",
        ),
        LimitKeyDefinition(
            LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT,
            LimitScope.BRAND,
            "Connected social accounts per brand",
        ),
        LimitKeyDefinition(
            LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH,
            LimitScope.BRAND,
            "Content items per brand per calendar month",
            window=LimitWindow.MONTH,
        ),
    )
}


def is_limit_key(value: str) -> bool:
    return value in LIMIT_KEYS


def get_limit_definition(key: str) -> LimitKeyDefinition | None:
    return LIMIT_KEYS.get(key)
