"""
Subscription limits.

Limit keys, plan ceilings, usage counting and the decision logic that
turns them into an allow/deny answer. The FastAPI guard lives in
``workspace_access.api.dependencies.limits``.
"""

from .errors import (
    BrandNotFoundError,
    LimitError,
    LimitExceededError,
    UnsupportedLimitError,
)
from .keys import (
    LIMIT_KEYS,
    LimitKeyDefinition,
    LimitKeys,
    LimitScope,
    LimitWindow,
    get_limit_definition,
    is_limit_key,
)
from .plans import DEFAULT_PLAN_CATALOG, UNLIMITED, PlanCatalog
from .enforcer import LimitDecision, LimitEnforcer
from .usage import SQLUsageCounter, UsageCounter
from .service import LimitService

__all__ = [
    "BrandNotFoundError",
    "LimitError",
    "LimitExceededError",
    "UnsupportedLimitError",
    "LIMIT_KEYS",
    "LimitKeyDefinition",
    "LimitKeys",
    "LimitScope",
    "LimitWindow",
    "get_limit_definition",
    "is_limit_key",
    "DEFAULT_PLAN_CATALOG",
    "UNLIMITED",
    "PlanCatalog",
    "LimitDecision",
    "LimitEnforcer",
    "SQLUsageCounter",
    "UsageCounter",
    "LimitService",
]
