import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Optional local overrides for test runs
from dotenv import load_dotenv

env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

# Tests always run in demo mode against an in-memory database, with no
# rate limits and no calls to a hosted model.
os.environ["BACKENDLESS_APP_ID"] = ""
os.environ["BACKENDLESS_API_KEY"] = ""
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AI_ENABLED"] = "false"

from libs.common.config import get_settings

# Clear cached settings to reload with new env vars
get_settings.cache_clear()

from libs.auth.models import Account
from libs.baas.store import MemoryRecordStore
from libs.db.base import Base
from services.merchant_service import models as _merchant_models  # noqa: F401
from services.merchant_service.app.main import app
from services.merchant_service.services.console import Console
from tests.helpers import TEST_ACCOUNT_ID


@pytest_asyncio.fixture
async def test_engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        future=True,
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
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def record_store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def console(record_store) -> Console:
    return Console.build(record_store)


@pytest.fixture
def account() -> Account:
    return Account(id=TEST_ACCOUNT_ID, email="owner@example.com", name="Store Owner")


@pytest_asyncio.fixture
async def client(db_session, record_store) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient for the merchant app in demo mode.

    The local database and the in-memory record store are the test's own.
    """
    from libs.db.session import get_async_db
    from services.merchant_service.dependencies import get_demo_store

    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_demo_store] = lambda: record_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_headers(client) -> dict:
    """Register and sign in a demo merchant; returns the session headers."""
    response = await client.post(
        "/auth/register",
        json={"email": "owner@example.com", "password": "secret123", "name": "Store Owner"},
    )
    assert response.status_code == 201, response.text
    return {"user-token": response.json()["userToken"]}
