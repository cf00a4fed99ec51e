"""
LocalLibrary — Database Handle
===============================

What:  Async SQLAlchemy engine + session factory wrapped in one explicit handle.
How:   `Database` is constructed once (in the app lifespan, or by tests),
       stored on `app.state` and handed to repositories. Every repository call
       opens its own short-lived session from it, so concurrent reads inside a
       request never share a session.
Who:   Created by `locallibrary.main`; consumed by `locallibrary.repositories`.
When:  Opened at startup, disposed at shutdown.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings for server
    databases. SQLite URLs skip them and use SQLAlchemy's default pool.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from locallibrary.config import Settings, settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all catalog ORM models.

    All models share this metadata, which Alembic reads for migrations and
    `Database.create_all()` uses for development/test schemas.
    """
    pass


def _engine_options(url: str, config: Settings) -> dict:
    """Engine keyword arguments for the given URL."""
    options = {"echo": config.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Long-lived database handle shared by every request.

    Attributes:
        engine:           AsyncEngine owning the connection pool
        session_factory:  async_sessionmaker producing per-operation sessions

    expire_on_commit=False keeps loaded attributes readable after the
    session closes; templates render detached objects.
    """

    def __init__(self, url: Optional[str] = None, config: Settings = settings):
        self.url = url or config.database_url
        self.engine: AsyncEngine = create_async_engine(
            self.url, **_engine_options(self.url, config)
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on error.

        Used by repository write paths; read paths use it too and simply
        have nothing to commit.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create every table known to `Base.metadata` (development/test)."""
        # Model modules must be imported so their tables are registered.
        import locallibrary.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created")

    async def ping(self) -> bool:
        """Run SELECT 1; True when the database answers."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# ── Request Dependency ────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the handle opened by the lifespan.

    Example usage in a route:
        @router.get("/books")
        async def book_list(db: Database = Depends(get_database)):
            ...
    """
    return request.app.state.database
