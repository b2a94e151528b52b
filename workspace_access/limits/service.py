"""
Limit service.

Wires plan resolution and usage counting to the pure enforcer:

    service = LimitService(db)
    await service.check_limit("brand.maxCount", workspace_id=workspace.id)

``check_limit`` raises LimitExceededError on a denial; ``evaluate``
returns the decision either way (used for usage reporting).
"""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.core.config import settings
from workspace_access.models.brand import Brand
from workspace_access.models.subscription import Subscription, SubscriptionPlan
from .enforcer import LimitDecision, LimitEnforcer
from .errors import BrandNotFoundError, LimitExceededError, UnsupportedLimitError
from .keys import is_limit_key
from .plans import DEFAULT_PLAN_CATALOG, PlanCatalog
from .usage import SQLUsageCounter, UsageCounter

logger = structlog.get_logger()


class LimitService:
    """Resolves workspace, plan and usage, then decides."""

    def __init__(
        self,
        db: AsyncSession,
        catalog: PlanCatalog = DEFAULT_PLAN_CATALOG,
        usage_counter: UsageCounter | None = None,
        default_plan: SubscriptionPlan | None = None,
    ):
        self.db = db
        self.enforcer = LimitEnforcer(catalog)
        self.usage_counter = usage_counter or SQLUsageCounter(db)
        self.default_plan = default_plan or settings.limits.default_plan

    async def get_plan_for_workspace(self, workspace_id: UUID | None) -> SubscriptionPlan:
        """Subscribed plan, or the default plan when there is no subscription."""
        if workspace_id is None:
            return self.default_plan
        result = await self.db.execute(
            select(Subscription.plan).where(Subscription.workspace_id == workspace_id)
        )
        plan = result.scalar_one_or_none()
        return plan or self.default_plan

    async def _resolve_workspace_id(
        self,
        workspace_id: UUID | None,
        brand_id: UUID | None,
    ) -> UUID | None:
        if workspace_id is not None or brand_id is None:
            return workspace_id
        result = await self.db.execute(select(Brand.workspace_id).where(Brand.id == brand_id))
        brand_workspace_id = result.scalar_one_or_none()
        if brand_workspace_id is None:
            raise BrandNotFoundError(brand_id)
        return brand_workspace_id

    async def evaluate(
        self,
        limit_key: str,
        workspace_id: UUID | None = None,
        brand_id: UUID | None = None,
        user_id: UUID | None = None,
        amount: int = 1,
        current: int | None = None,
        plan_override: SubscriptionPlan | None = None,
    ) -> LimitDecision:
        """Decide without raising on a denial."""
        if not is_limit_key(limit_key):
            raise UnsupportedLimitError(limit_key)

        workspace_id = await self._resolve_workspace_id(workspace_id, brand_id)
        plan = plan_override or await self.get_plan_for_workspace(workspace_id)

        if current is None:
            current = await self.usage_counter.count_current_usage(
                limit_key,
                workspace_id=workspace_id,
                brand_id=brand_id,
                user_id=user_id,
            )

        decision = self.enforcer.check(limit_key, plan, current, amount)

        log = logger.info if decision.allowed else logger.warning
        log(
            "limit_checked",
            limit_key=limit_key,
            plan=plan.value,
            allowed=decision.allowed,
            current=decision.current,
            amount=amount,
            limit=None if decision.is_unlimited else decision.limit,
            workspace_id=str(workspace_id) if workspace_id else None,
            brand_id=str(brand_id) if brand_id else None,
        )
        return decision

    async def check_limit(
        self,
        limit_key: str,
        workspace_id: UUID | None = None,
        brand_id: UUID | None = None,
        user_id: UUID | None = None,
        amount: int = 1,
        current: int | None = None,
        plan_override: SubscriptionPlan | None = None,
    ) -> LimitDecision:
        """Decide and raise LimitExceededError when denied."""
        decision = await self.evaluate(
            limit_key,
            workspace_id=workspace_id,
            brand_id=brand_id,
            user_id=user_id,
            amount=amount,
            current=current,
            plan_override=plan_override,
        )
        if not decision.allowed:
            raise LimitExceededError(decision)
        return decision
