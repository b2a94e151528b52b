"""
Pytest fixtures for testing.

Provides:
- Async database session on in-memory SQLite
- Test client with the session override
- Factory fixtures for users, workspaces and brands
- Bearer token helpers
"""

from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from workspace_access.main import app
from workspace_access.core.config import settings
from workspace_access.models.base import Base
from workspace_access.models.brand import Brand
from workspace_access.models.subscription import Subscription, SubscriptionPlan
from workspace_access.models.user import User
from workspace_access.models.workspace import Workspace, WorkspaceMember, WorkspaceRole
from workspace_access.api.dependencies.database import get_db
from workspace_access.schemas.workspace import WorkspaceCreate
from workspace_access.services.workspace import WorkspaceService


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session; uncommitted work is rolled back after the test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client with database session override."""

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, email: str | None = None, name: str = "Test User") -> User:
        user = User(email=email or f"test-{uuid4().hex[:8]}@example.com", name=name)
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user


class WorkspaceFactory:
    """Factory for workspaces created through the service (roles provisioned)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        owner: User,
        plan: SubscriptionPlan = SubscriptionPlan.FREE,
        slug: str | None = None,
    ) -> Workspace:
        slug = slug or f"ws-{uuid4().hex[:8]}"
        workspace = await WorkspaceService(self.db).create(
            WorkspaceCreate(name=slug.title(), slug=slug),
            owner_id=owner.id,
        )
        if plan != SubscriptionPlan.FREE:
            subscription = await WorkspaceService(self.db).get_subscription(workspace.id)
            subscription.plan = plan
        await self.db.commit()
        return workspace

    async def create_bare(self, slug: str | None = None) -> Workspace:
        """Workspace row only: no roles, members or subscription."""
        slug = slug or f"bare-{uuid4().hex[:8]}"
        workspace = Workspace(name=slug.title(), slug=slug)
        self.db.add(workspace)
        await self.db.commit()
        await self.db.refresh(workspace)
        return workspace

    async def add_member(
        self,
        workspace: Workspace,
        user: User,
        role: WorkspaceRole = WorkspaceRole.MEMBER,
    ) -> WorkspaceMember:
        member = await WorkspaceService(self.db).add_member(workspace.id, user.id, role)
        await self.db.commit()
        return member

    async def add_brand(self, workspace: Workspace, name: str = "Brand") -> Brand:
        brand = Brand(workspace_id=workspace.id, name=name)
        self.db.add(brand)
        await self.db.commit()
        await self.db.refresh(brand)
        return brand

    async def set_plan(self, workspace: Workspace, plan: SubscriptionPlan) -> Subscription:
        subscription = await WorkspaceService(self.db).get_subscription(workspace.id)
        subscription.plan = plan
        await self.db.commit()
        return subscription


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession) -> UserFactory:
    """Fixture that provides UserFactory."""
    return UserFactory(db)


@pytest_asyncio.fixture
async def workspace_factory(db: AsyncSession) -> WorkspaceFactory:
    """Fixture that provides WorkspaceFactory."""
    return WorkspaceFactory(db)


@pytest_asyncio.fixture
async def test_user(user_factory: UserFactory) -> User:
    """Create a standard test user."""
    return await user_factory.create()


@pytest_asyncio.fixture
async def test_workspace(workspace_factory: WorkspaceFactory, test_user: User) -> Workspace:
    """FREE workspace owned by ``test_user``."""
    return await workspace_factory.create(owner=test_user)


# ============ Auth Helpers ============


def get_auth_headers(user: User) -> dict[str, str]:
    """Bearer headers for any user."""
    token = jwt.encode(
        {"sub": str(user.id)},
        settings.auth.secret_key,
        algorithm=settings.auth.algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    """Get auth headers for test user."""
    return get_auth_headers(test_user)


@pytest.fixture
def make_auth_headers():
    """Helper fixture returning ``get_auth_headers``."""
    return get_auth_headers
