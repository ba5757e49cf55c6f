"""Async database engine and session management."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all reviewpool models."""


class Database:
    """Owns the async engine and hands out sessions.

    Each session is one unit of work: callers commit explicitly, and any
    exception escaping the ``session()`` block rolls the open transaction back.
    """

    def __init__(self, database_url: str, echo: bool = False):
        """Create the engine for ``database_url``.

        Args:
            database_url: SQLAlchemy async URL (sqlite+aiosqlite or postgresql+asyncpg)
            echo: Log emitted SQL
        """
        self.database_url = database_url

        engine_kwargs: dict = {"echo": echo}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # A single shared connection keeps the in-memory database alive
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        elif not database_url.startswith("sqlite"):
            engine_kwargs.update(pool_size=10, max_overflow=20, pool_pre_ping=True)

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        # Import models so they register on Base.metadata
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        """Drop every table known to the metadata."""
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back if the block raises."""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        await self.engine.dispose()


# Global database instance
_db: Optional[Database] = None


def init_db(database_url: str, echo: bool = False) -> Database:
    """Initialize the global database.

    Args:
        database_url: SQLAlchemy async database URL
        echo: Log emitted SQL

    Returns:
        Database instance
    """
    global _db
    _db = Database(database_url, echo=echo)
    logger.debug("Database initialized for %s", database_url)
    return _db


def get_db() -> Database:
    """Get the global database instance.

    Raises:
        RuntimeError: If the database has not been initialized
    """
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db
