"""
Species Catalog Backend — Database Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow come from settings (defaults 10 + 10).
    pool_pre_ping validates connections before use.
    pool_recycle=3600 recycles connections every hour.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,
    # SQL echo only when debugging
    echo=settings.log_level == "DEBUG",
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit without
# triggering a lazy refresh outside the session context
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and the test suite uses to create a throwaway schema.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/species")
        async def list_species(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            # Roll back on ANY failure so no partial mutation is persisted
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Closes all pooled connections. Called from the shutdown half of the lifespan."""
    await engine.dispose()
