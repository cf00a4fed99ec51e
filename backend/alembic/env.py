"""
Alembic Migration Environment
===============================

What:  Runs LocalLibrary migrations with the async SQLAlchemy engine.
How:   The database URL comes from locallibrary.config (DATABASE_URL) unless
       the caller already set one (the migration tests point it at a
       temporary SQLite file). The async engine runs the migration steps
       through connection.run_sync().
Who:   `alembic upgrade head` / `alembic revision --autogenerate` and the
       migration tests.

SQLite has no ALTER COLUMN, so migrations run in batch mode there.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from locallibrary.config import settings
from locallibrary.database import Base

# Registers every table with Base.metadata for --autogenerate
import locallibrary.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or settings.database_url


def _configure_catalog(**options) -> None:
    context.configure(
        target_metadata=Base.metadata,
        # String → Text and similar changes count as schema changes
        compare_type=True,
        **options,
    )


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    _configure_catalog(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def apply_catalog_migrations(connection: Connection) -> None:
    _configure_catalog(
        connection=connection,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an unpooled async engine and apply pending migrations."""
    engine = async_engine_from_config(
        {"sqlalchemy.url": _database_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(apply_catalog_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
