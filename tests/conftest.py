from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from nutrisync.db.base import Base
from nutrisync.db.session import get_session
from nutrisync.local.relay_client import RelayClient
from nutrisync.local.store import LocalStore
from nutrisync.main import app

from helpers import OWNER_ID


@pytest.fixture
async def db_engine():
    """릴레이 서버용 인메모리 SQLite"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def relay_app(session_factory):
    """get_session을 테스트 DB로 교체한 FastAPI 앱"""

    async def _get_test_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _get_test_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(relay_app) -> AsyncGenerator[AsyncClient, None]:
    """Yield an HTTPX async test client."""
    async with AsyncClient(transport=ASGITransport(app=relay_app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
async def relay_client(relay_app) -> AsyncGenerator[RelayClient, None]:
    """ASGI로 테스트 앱에 직접 연결된 릴레이 클라이언트"""
    client = RelayClient(
        "http://testserver/api/v1",
        OWNER_ID,
        transport=ASGITransport(app=relay_app),
    )
    yield client
    await client.aclose()


@pytest.fixture
async def local_store() -> AsyncGenerator[LocalStore, None]:
    store = LocalStore("sqlite+aiosqlite://")
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def breakfast_time() -> datetime:
    return datetime(2024, 3, 1, 8, 0, 0)
