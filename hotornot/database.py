"""
HotOrNot Backend — Database Handle and Session Management
===========================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependencies.
How:   A `Database` object owns the engine and session factory. The
       application factory creates one, stores it on `app.state`, the lifespan
       handler initialises the schema on startup and disposes the engine on
       shutdown. Request handlers receive sessions through `get_db_session`,
       which commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system, and
       directly by tests and the Alembic environment.

Engine Configuration:
    SQLite (default):  aiosqlite driver, busy timeout so concurrent writers
                       wait for the lock instead of failing immediately.
    PostgreSQL:        asyncpg driver with a bounded connection pool.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from hotornot.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with a shared metadata
    object, which Alembic and `Database.create_schema()` both read.
    """
    pass


class Database:
    """
    Explicit storage handle shared by every request.

    Lifecycle:
        1. Created by `create_app()` (no connection is opened yet)
        2. `create_schema()` during lifespan startup when auto-create is on
        3. `session()` per request / per unit of work
        4. `dispose()` during lifespan shutdown
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        busy_timeout: float = 15.0,
    ):
        self.url = url

        engine_kwargs = {"echo": echo, "pool_pre_ping": pool_pre_ping}
        if url.startswith("sqlite"):
            # sqlite3.connect(timeout=...) installs the busy handler
            engine_kwargs["connect_args"] = {"timeout": busy_timeout}
        else:
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["max_overflow"] = max_overflow
            engine_kwargs["pool_recycle"] = 3600

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)

        # expire_on_commit=False: rows stay readable after the request commits
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            busy_timeout=settings.sqlite_busy_timeout,
        )

    async def create_schema(self) -> None:
        """Create any missing tables. Existing tables are left untouched."""
        # Registers Image and Vote on Base.metadata
        from hotornot.models import image, vote  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def drop_schema(self) -> None:
        from hotornot.models import image, vote  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        One session == one transaction.

        Commits when the block exits normally, rolls back on any exception
        and re-raises it, and always closes the session.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> bool:
        """Runs SELECT 1; used by the health check."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Closes every pooled connection."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


# ── FastAPI Dependencies ──────────────────────────────────────────────────

def get_database(request: Request) -> Database:
    """Returns the Database handle attached to the running application."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database handle is not configured on app.state")
    return database


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a database session per request.

    The whole request runs in one transaction: committed after the handler
    returns, rolled back if it raises. Exceptions propagate to the global
    handlers in main.py.

    Example usage in a route:
        @router.get("/images")
        async def list_images(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with database.session() as session:
        yield session
