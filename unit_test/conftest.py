"""Shared test fixtures for unit tests."""
import sys
import os
from contextlib import asynccontextmanager
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from backend.app.database import Base, get_db
from backend.app.main import app
from backend.app.services.auth_service import create_user
from backend.app.services.thread_store import ThreadStore

TEST_DB_URL = "sqlite+aiosqlite:////tmp/thread_share_test.db"
TEST_DB_PATH = "/tmp/thread_share_test.db"
TEST_PASSWORD = "TestPass123!"
test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=NullPool)
TestSession = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


async def override_get_db():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@asynccontextmanager
async def _test_lifespan(_app):
    yield


# Disable production startup hooks (init_db against real db) in tests.
app.router.lifespan_context = _test_lifespan


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create and tear down test database for each test."""
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)
    sync_engine = create_engine(TEST_DB_URL.replace("sqlite+aiosqlite", "sqlite"), echo=False)
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    yield
    sync_engine = create_engine(TEST_DB_URL.replace("sqlite+aiosqlite", "sqlite"), echo=False)
    Base.metadata.drop_all(sync_engine)
    sync_engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@asynccontextmanager
async def _client_for(email: str | None):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        if email:
            res = await c.post("/api/auth/register", json={"email": email, "password": TEST_PASSWORD})
            assert res.status_code == 200
        yield c


@pytest_asyncio.fixture
async def client():
    """Logged-in client for the thread owner."""
    async with _client_for("owner@example.com") as c:
        yield c


@pytest_asyncio.fixture
async def other_client():
    """Logged-in client for a second, unrelated user."""
    async with _client_for("other@example.com") as c:
        yield c


@pytest_asyncio.fixture
async def anon_client():
    async with _client_for(None) as c:
        yield c


@pytest_asyncio.fixture
async def db_session():
    async with TestSession() as session:
        yield session


@pytest_asyncio.fixture
async def store(db_session):
    return ThreadStore(db_session)


@pytest_asyncio.fixture
async def owner_id(db_session):
    return (await create_user(db_session, "owner@example.com", TEST_PASSWORD)).id


@pytest_asyncio.fixture
async def other_id(db_session):
    return (await create_user(db_session, "other@example.com", TEST_PASSWORD)).id


@pytest.fixture
def session_factory():
    return TestSession
