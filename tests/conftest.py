"""Shared fixtures: in-memory SQLite, a fresh demo store and an ASGI client."""

from collections.abc import AsyncGenerator
from typing import Any

from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from saas_factory.backends import LiveBackend
from saas_factory.clients.progress_stream import ProgressStreamClient
from saas_factory.config import Settings, get_settings
from saas_factory.database import create_tables
from saas_factory.dependencies import get_db_session_maker
from saas_factory.identity import CurrentUser
from saas_factory.repositories import get_demo_store

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class StubGenerator:
    """Code generator returning a fixed artifact, or raising a given error."""

    def __init__(self, result: dict[str, Any] | None = None, error: Exception | None = None):
        self.result = result or {
            "project_structure": {"files": [{"path": "README.md", "content": "# Stub"}]},
            "database_schema": {},
            "api_endpoints": [],
            "features": [],
            "version": "1.0.0",
        }
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(self, project_data: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(project_data)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        demo_mode=False,
        database_url=TEST_DATABASE_URL,
        redis_url=None,
        open_router_key="",
        openai_api_key="",
        generation_timeout_seconds=5,
        progress_tick_seconds=0,
    )


@pytest.fixture(autouse=True)
def demo_store():
    """Every test starts from the seeded demo data."""
    store = get_demo_store()
    store.reset()
    yield store
    store.reset()


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def fake_redis():
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def progress_stream(fake_redis) -> ProgressStreamClient:
    return ProgressStreamClient(client=fake_redis)


@pytest.fixture
def make_generator():
    return StubGenerator


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def live_backend(db_session, settings, generator, progress_stream) -> LiveBackend:
    return LiveBackend(db_session, settings, progress_stream=progress_stream, generator=generator)


@pytest.fixture
def user() -> CurrentUser:
    return CurrentUser(id="user-1", email="owner@example.com")


@pytest.fixture
def other_user() -> CurrentUser:
    return CurrentUser(id="user-2", email="other@example.com")


@pytest.fixture
def app(settings, session_maker):
    from saas_factory.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_settings] = lambda: settings
    fastapi_app.dependency_overrides[get_db_session_maker] = lambda: session_maker
    fastapi_app.state.progress_stream = None
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
