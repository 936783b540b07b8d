import os
from typing import AsyncGenerator

# Test settings must be in place before any libs module reads them
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.session import get_async_db
from services.petstore_service import models as _models  # noqa: F401
from tests.factories import (
    AddressFactory,
    AdminFactory,
    CategoryFactory,
    PetFactory,
    UserFactory,
    bearer,
    persist,
)

get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test.
    StaticPool keeps every session on the same connection.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app and overridden DB dependency.
    """
    from services.petstore_service.app.main import app

    async def _override_db():
        yield db_session

    app.dependency_overrides[get_async_db] = _override_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users & auth
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def customer(db_session):
    return await persist(db_session, UserFactory.create())


@pytest_asyncio.fixture
async def other_customer(db_session):
    return await persist(db_session, UserFactory.create(first_name="Other"))


@pytest_asyncio.fixture
async def admin(db_session):
    return await persist(db_session, AdminFactory.create())


@pytest.fixture
def customer_headers(customer) -> dict:
    return bearer(customer)


@pytest.fixture
def admin_headers(admin) -> dict:
    return bearer(admin)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def category(db_session):
    return await persist(db_session, CategoryFactory.create(name="Dogs"))


@pytest_asyncio.fixture
async def pet(db_session, category, admin):
    return await persist(
        db_session,
        PetFactory.create(category_id=category.id, created_by=admin.id),
    )


@pytest_asyncio.fixture
async def address(db_session, customer):
    return await persist(db_session, AddressFactory.create(user_id=customer.id))
