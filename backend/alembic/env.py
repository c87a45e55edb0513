"""
Alembic Migration Environment
=============================

What:  Runs the species catalog migrations with the async engine.
How:   The database URL comes from app.config (DATABASE_URL), not from
       alembic.ini; migrations run inside connection.run_sync().
Who:   `alembic upgrade head` during deployment.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from app.config import settings
from app.database import Base

# Alembic only sees models that are imported and registered with Base
from app.models.comment import Comment  # noqa: F401
from app.models.profile import Profile  # noqa: F401
from app.models.species import Species  # noqa: F401

# Values from alembic.ini
config = context.config

# Setup logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Model metadata for --autogenerate
target_metadata = Base.metadata

# Database URL comes from settings, not from alembic.ini
config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting (review before applying)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Runs the migration steps on a sync connection in one transaction."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an async engine and apply pending migrations."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """alembic upgrade/downgrade entry point."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
