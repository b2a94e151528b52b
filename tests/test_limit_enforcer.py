"""
Tests for limit decisions.
"""

import pytest

from workspace_access.limits import LimitEnforcer, LimitExceededError, LimitKeys, PlanCatalog
from workspace_access.models.subscription import SubscriptionPlan


@pytest.fixture
def enforcer() -> LimitEnforcer:
    return LimitEnforcer(PlanCatalog({
        SubscriptionPlan.FREE: {"test.key": 1},
    }))


def test_allows_up_to_the_limit(enforcer):
    decision = enforcer.check("test.key", SubscriptionPlan.FREE, current=0, amount=1)

    assert decision.allowed
    assert decision.limit == 1
    assert decision.remaining == 1
    assert not decision.is_unlimited


def test_denies_past_the_limit(enforcer):
    decision = enforcer.check("test.key", SubscriptionPlan.FREE, current=1, amount=1)

    assert not decision.allowed
    assert decision.current == 1
    assert decision.requested_amount == 1
    assert decision.remaining == 0


def test_amount_counts_towards_limit():
    enforcer = LimitEnforcer()
    plan = SubscriptionPlan.FREE
    key = LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH

    assert enforcer.check(key, plan, current=25, amount=5).allowed
    assert not enforcer.check(key, plan, current=25, amount=6).allowed


def test_zero_amount_reports_usage(enforcer):
    decision = enforcer.check("test.key", SubscriptionPlan.FREE, current=1, amount=0)

    assert decision.allowed
    assert decision.remaining == 0


def test_unlimited_always_allows():
    enforcer = LimitEnforcer()
    decision = enforcer.check(
        LimitKeys.BRAND_MAX_COUNT,
        SubscriptionPlan.ENTERPRISE,
        current=10**9,
        amount=10**6,
    )

    assert decision.allowed
    assert decision.is_unlimited
    payload = decision.to_payload()
    assert payload["limit"] is None
    assert payload["remaining"] is None
    assert payload["isUnlimited"] is True


def test_key_missing_from_plan_is_unlimited(enforcer):
    decision = enforcer.check("other.key", SubscriptionPlan.FREE, current=50)

    assert decision.allowed
    assert decision.is_unlimited


@pytest.mark.parametrize("current,amount", [(-1, 1), (0, -1)])
def test_negative_inputs_rejected(enforcer, current, amount):
    with pytest.raises(ValueError):
        enforcer.check("test.key", SubscriptionPlan.FREE, current=current, amount=amount)


def test_enforce_raises_with_decision(enforcer):
    with pytest.raises(LimitExceededError) as exc_info:
        enforcer.enforce("test.key", SubscriptionPlan.FREE, current=1)

    assert exc_info.value.decision.to_payload() == {
        "limitKey": "test.key",
        "plan": "FREE",
        "limit": 1,
        "current": 1,
        "requestedAmount": 1,
        "remaining": 0,
        "isUnlimited": False,
    }


def test_enforce_returns_allowed_decision(enforcer):
    assert enforcer.enforce("test.key", SubscriptionPlan.FREE, current=0).allowed
