"""
Brand service.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from workspace_access.models.brand import Brand, BrandContent, SocialAccount
from workspace_access.schemas.brand import BrandContentCreate, BrandCreate, SocialAccountCreate


class BrandService:
    """Brand management service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, workspace_id: UUID, brand_id: UUID) -> Brand | None:
        """Get a brand of the workspace."""
        stmt = select(Brand).where(
            Brand.id == brand_id,
            Brand.workspace_id == workspace_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, workspace_id: UUID, data: BrandCreate) -> Brand:
        brand = Brand(workspace_id=workspace_id, **data.model_dump())
        self.db.add(brand)
        await self.db.flush()
        await self.db.refresh(brand)
        return brand

    async def add_social_account(self, brand: Brand, data: SocialAccountCreate) -> SocialAccount:
        account = SocialAccount(
            workspace_id=brand.workspace_id,
            brand_id=brand.id,
            **data.model_dump(),
        )
        self.db.add(account)
        await self.db.flush()
        await self.db.refresh(account)
        return account

    async def add_content(self, brand: Brand, data: BrandContentCreate) -> BrandContent:
        content = BrandContent(
            workspace_id=brand.workspace_id,
            brand_id=brand.id,
            **data.model_dump(),
        )
        self.db.add(content)
        await self.db.flush()
        await self.db.refresh(content)
        return content
