"""
Usage counters.

A usage counter reports how many units of a limit key are currently
consumed. Counts are read through the caller's session so they see the
rows of the current transaction.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workspace_access.models.brand import Brand, BrandContent, SocialAccount
from workspace_access.models.workspace import WorkspaceMember, WorkspaceRole
from .errors import BrandNotFoundError, UnsupportedLimitError
from .keys import LimitKeys


class UsageCounter(ABC):
    """Counts current consumption of a limit key."""

    @abstractmethod
    async def count_current_usage(
        self,
        resource_key: str,
        workspace_id: UUID | None = None,
        brand_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> int:
        """Non-negative usage of ``resource_key`` in the given scope."""
        ...


def current_month_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of the UTC calendar month."""
    now = now or datetime.now(timezone.utc)
    start = now.astimezone(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


class SQLUsageCounter(UsageCounter):
    """Usage counter over the workspace, brand and content tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_current_usage(
        self,
        resource_key: str,
        workspace_id: UUID | None = None,
        brand_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> int:
        if resource_key == LimitKeys.WORKSPACE_MAX_COUNT:
            if user_id is None:
                raise ValueError(f"user_id is required for {resource_key} usage")
            # Owned workspaces stand in for "created by"
            return await self._count(
                select(func.count(WorkspaceMember.id)).where(
                    WorkspaceMember.user_id == user_id,
                    WorkspaceMember.role == WorkspaceRole.OWNER,
                )
            )

        if resource_key == LimitKeys.WORKSPACE_MEMBER_MAX_COUNT:
            if workspace_id is None:
                raise ValueError(f"workspace_id is required for {resource_key} usage")
            return await self._count(
                select(func.count(WorkspaceMember.id)).where(
                    WorkspaceMember.workspace_id == workspace_id,
                )
            )

        if resource_key == LimitKeys.BRAND_MAX_COUNT:
            if workspace_id is None:
                raise ValueError(f"workspace_id is required for {resource_key} usage")
            return await self._count(
                select(func.count(Brand.id)).where(
                    Brand.workspace_id == workspace_id,
                    Brand.is_active.is_(True),
                )
            )

        if resource_key == LimitKeys.BRAND_SOCIAL_ACCOUNT_MAX_COUNT:
            brand = await self._require_brand(brand_id, workspace_id, resource_key)
            return await self._count(
                select(func.count(SocialAccount.id)).where(
                    SocialAccount.brand_id == brand.id,
                    SocialAccount.workspace_id == brand.workspace_id,
                )
            )

        if resource_key == LimitKeys.BRAND_CONTENT_MAX_COUNT_PER_MONTH:
            brand = await self._require_brand(brand_id, workspace_id, resource_key)
            period_start, period_end = current_month_bounds()
            return await self._count(
                select(func.count(BrandContent.id)).where(
                    BrandContent.brand_id == brand.id,
                    BrandContent.workspace_id == brand.workspace_id,
                    BrandContent.created_at >= period_start,
                    BrandContent.created_at < period_end,
                )
            )

        raise UnsupportedLimitError(resource_key)

    async def _count(self, stmt) -> int:
        result = await self.db.execute(stmt)
        return result.scalar_one() or 0

    async def _require_brand(
        self,
        brand_id: UUID | None,
        workspace_id: UUID | None,
        resource_key: str,
    ) -> Brand:
        if brand_id is None:
            raise ValueError(f"brand_id is required for {resource_key} usage")
        brand = await self.db.get(Brand, brand_id)
        if brand is None or (workspace_id is not None and brand.workspace_id != workspace_id):
            raise BrandNotFoundError(brand_id)
        return brand
