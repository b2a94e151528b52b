"""
Limit decisions.

``LimitEnforcer`` is a pure function of the plan catalog, the current
usage and the requested amount. It does no I/O and holds no mutable
state, so one instance can serve every request.

    enforcer = LimitEnforcer()
    decision = enforcer.check("brand.maxCount", SubscriptionPlan.FREE, current=1)
    decision.allowed      # False
    decision.to_payload() # {"limitKey": "brand.maxCount", "limit": 1, ...}
"""

import math
from dataclasses import dataclass
from typing import Any

from workspace_access.models.subscription import SubscriptionPlan
from .errors import LimitExceededError
from .plans import DEFAULT_PLAN_CATALOG, PlanCatalog


@dataclass(frozen=True)
class LimitDecision:
    """Outcome of one limit check."""
    allowed: bool
    limit_key: str
    plan: SubscriptionPlan
    limit: int | float
    current: int
    requested_amount: int
    remaining: int | float
    is_unlimited: bool

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe rendering; ``limit`` and ``remaining`` are null when unlimited."""
        return {
            "limitKey": self.limit_key,
            "plan": self.plan.value,
            "limit": None if self.is_unlimited else self.limit,
            "current": self.current,
            "requestedAmount": self.requested_amount,
            "remaining": None if self.is_unlimited else self.remaining,
            "isUnlimited": self.is_unlimited,
        }


class LimitEnforcer:
    """Decides whether ``amount`` more units fit under a plan ceiling."""

    def __init__(self, catalog: PlanCatalog = DEFAULT_PLAN_CATALOG):
        self.catalog = catalog

    def check(
        self,
        limit_key: str,
        plan: SubscriptionPlan,
        current: int,
        amount: int = 1,
    ) -> LimitDecision:
        if current < 0:
            raise ValueError(f"current usage must be non-negative, got {current}")
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")

        if self.catalog.is_unlimited(plan, limit_key):
            return LimitDecision(
                allowed=True,
                limit_key=limit_key,
                plan=plan,
                limit=math.inf,
                current=current,
                requested_amount=amount,
                remaining=math.inf,
                is_unlimited=True,
            )

        limit = self.catalog.get_numeric_limit(plan, limit_key)
        return LimitDecision(
            allowed=current + amount <= limit,
            limit_key=limit_key,
            plan=plan,
            limit=limit,
            current=current,
            requested_amount=amount,
            remaining=max(0, limit - current),
            is_unlimited=False,
        )

    def enforce(
        self,
        limit_key: str,
        plan: SubscriptionPlan,
        current: int,
        amount: int = 1,
    ) -> LimitDecision:
        """Like ``check`` but raises LimitExceededError on a denial."""
        decision = self.check(limit_key, plan, current, amount)
        if not decision.allowed:
            raise LimitExceededError(decision)
        return decision
