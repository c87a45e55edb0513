"""
Species Catalog Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── db_engine / session_factory / db_session: throwaway SQLite schema
    ├── author_id / other_user_id: users with profile rows
    ├── make_token: signs session tokens the backend accepts
    └── test_client: HTTPX AsyncClient wired to the app and the SQLite schema
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["AUTH_JWT_SECRET"] = "test-secret-with-enough-bytes-for-hs256-signing"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.config import settings
from app.database import Base
from app.models.comment import Comment  # noqa: F401
from app.models.profile import Profile
from app.models.species import Species  # noqa: F401


AUTHOR_NAME = "Ada Author"
OTHER_NAME = "Otto Other"


# ══════════════════════════════════════════════════════════════════════════
# Mocks
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_species(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
            result = await species_service.get_species(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real schema (SQLite, one file per test)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine, author_id, other_user_id):
    """Session factory on the fresh schema, with a profile row for both users."""
    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all([
            Profile(id=author_id, display_name=AUTHOR_NAME),
            Profile(id=other_user_id, display_name=OTHER_NAME),
        ])
        await session.commit()
    return factory


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def author_id():
    return uuid.UUID("11111111-1111-4111-8111-111111111111")


@pytest.fixture
def other_user_id():
    return uuid.UUID("22222222-2222-4222-8222-222222222222")


# ══════════════════════════════════════════════════════════════════════════
# Sessions
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_token():
    """
    Signs a session token the way the auth service does.

    Usage:
        token = make_token(user_id)
        token = make_token(user_id, expires_in=-60)       # already expired
        token = make_token(user_id, audience="anon")      # wrong audience
    """
    def _make(
        user_id,
        *,
        expires_in: int = 3600,
        audience: str = "authenticated",
        secret: str = None,
        **claims,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "aud": audience,
            "role": "authenticated",
            "iat": now,
            "exp": now + timedelta(seconds=expires_in),
        }
        payload.update(claims)
        return jwt.encode(payload, secret or settings.auth_jwt_secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    Requests go straight to the ASGI app; get_db_session is overridden so
    every request gets its own session on the per-test SQLite schema.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.database import get_db_session
    from app.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
