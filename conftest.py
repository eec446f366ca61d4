import os
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Optional overrides for local runs; tests never need a real Postgres.
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret")

from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402
from libs.db.config import build_engine  # noqa: E402
from libs.db.session import get_async_db  # noqa: E402
from services.catalog_service.app.main import app  # noqa: E402
from services.catalog_service import models as _catalog_models  # noqa: E402,F401

# Clear cached settings to reload with the env vars above
get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh file-backed SQLite database per test. File-backed (not :memory:)
    so separate connections can race each other in concurrency tests.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session for direct service-level tests.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient bound to the app, with one DB session per request
    as in production.
    """

    async def _override_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _override_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Sign a bearer token the way the identity service would."""

    def _make(role: str = "coach", sub: str = "test-user", **claims) -> str:
        payload = {"sub": sub, "role": role, "email": "caller@catalog.io", **claims}
        return jwt.encode(
            payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM
        )

    return _make


@pytest.fixture
def coach_headers(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token('coach')}"}


@pytest.fixture
def admin_headers(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token('admin')}"}


@pytest.fixture
def service_headers(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token('service_role')}"}


@pytest.fixture
def member_headers(make_token) -> dict:
    return {"Authorization": f"Bearer {make_token('authenticated')}"}
