"""
Plan catalog.

Maps each subscription plan to the ceilings of its limit keys. A value
is either a positive integer or ``UNLIMITED``. ``UNLIMITED`` is a
sentinel, never a number: callers must ask ``is_unlimited`` before
touching a numeric limit, and ``get_numeric_limit`` returns
``math.inf`` for it so arithmetic never sees the sentinel itself.

A key the catalog does not list for a plan is treated as unlimited.
Whether a key is enforceable at all is decided by the limit key
registry, not here.
"""

import math
from types import MappingProxyType
from typing import Mapping, Union

from workspace_access.models.subscription import SubscriptionPlan
from .keys import LimitKeys


class _Unlimited:
    """Singleton marking an uncapped limit."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNLIMITED"

    def __reduce__(self):
        return (_Unlimited, ())


UNLIMITED = _Unlimited()

LimitValue = Union[int, _Unlimited]


def _validate(plan: SubscriptionPlan, key: str, value: object) -> LimitValue:
    if value is UNLIMITED:
        return UNLIMITED
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(
            f"Limit {key!r} of plan {plan.value} must be a positive int or UNLIMITED, got {value!r}"
        )
    return value


class PlanCatalog:
    """Read-only plan to limit table."""

    def __init__(self, table: Mapping[SubscriptionPlan, Mapping[str, object]]):
        frozen = {}
        for plan, limits in table.items():
            plan = SubscriptionPlan(plan)
            frozen[plan] = MappingProxyType(
                {key: _validate(plan, key, value) for key, value in limits.items()}
            )
        self._table = MappingProxyType(frozen)

    def plans(self) -> tuple[SubscriptionPlan, ...]:
        return tuple(self._table)

    def limits_for(self, plan: SubscriptionPlan) -> Mapping[str, LimitValue]:
        return self._table.get(plan, MappingProxyType({}))

    def get_limit(self, plan: SubscriptionPlan, key: str) -> LimitValue:
        """Ceiling of ``key`` on ``plan``; unlisted keys are UNLIMITED."""
        return self.limits_for(plan).get(key, UNLIMITED)

    def is_unlimited(self, plan: SubscriptionPlan, key: str) -> bool:
        return self.get_limit(plan, key) is UNLIMITED

    def get_numeric_limit(self, plan: SubscriptionPlan, key: str) -> int | float:
        limit = self.get_limit(plan, key)
        return math.inf if limit is UNLIMITED else limit


DEFAULT_PLAN_CATALOG = PlanCatalog({
    SubscriptionPlan.FREE: {
        LimitKeys.WORKSPACE_MAX_COUNT: 1,
        LimitKeys.WORKSPACE_MEMBER_MAX_COUNT: 2,
        LimitKeys.BRAND_MAX_COUNT: 1,
        LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT: 1,
        LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH: 30,
    },
    SubscriptionPlan.PRO: {
        LimitKeys.WORKSPACE_MAX_COUNT: 5,
        LimitKeys.WORKSPACE_MEMBER_MAX_COUNT: 20,
        LimitKeys.BRAND_MAX_COUNT: 20,
        LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT: 10,
        LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH: 1000,
    },
    SubscriptionPlan.ENTERPRISE: {
        LimitKeys.WORKSPACE_MAX_COUNT: UNLIMITED,
        LimitKeys.WORKSPACE_MEMBER_MAX_COUNT: UNLIMITED,
        LimitKeys.BRAND_MAX_COUNT: UNLIMITED,
        LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT: UNLIMITED,
        LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH: UNLIMITED,
    },
})
