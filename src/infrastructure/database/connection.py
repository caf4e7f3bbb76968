# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

Uses SQLAlchemy 2.0 async API with asyncpg driver.

The API process holds one module-level Database created at startup.
Dramatiq worker threads each run their own event loop, and asyncpg
connections are bound to the loop that created them, so every worker
thread gets its own Database via get_worker_database().

Example:
    from src.infrastructure.database.connection import init_database, get_session

    # Initialize at application startup
    await init_database(settings)

    # Use in request handlers
    async with get_session() as session:
        result = await session.execute(select(QuizModel))
"""

import logging
import threading
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class Database:
    """An async engine and its sessionmaker.

    Attributes:
        engine: SQLAlchemy async engine.
        sessionmaker: Factory for AsyncSession objects.
    """

    def __init__(self, url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False) -> None:
        try:
            self.engine: AsyncEngine = create_async_engine(
                url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
                echo=echo,
            )
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to initialize database connection", e) from e

        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """Build a Database from application settings."""
        return cls(
            settings.database.url,
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.max_overflow,
            echo=settings.debug and settings.log_level == "DEBUG",
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that commits on success and rolls back on error.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If a database operation fails.
        """
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Check if the database is reachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# Module-level state for the API process
_database: Optional[Database] = None


async def init_database(settings: "Settings") -> None:
    """Initialize the database connection pool.

    This should be called once at application startup.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _database
    _database = Database.from_settings(settings)


async def close_database() -> None:
    """Close the database connection pool at application shutdown."""
    global _database

    if _database is not None:
        await _database.dispose()
        _database = None


def get_database() -> Database:
    """Get the API process database.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _database is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _database


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Get an async session for the API process database.

    Yields:
        AsyncSession for database operations.

    Raises:
        DatabaseError: If the database has not been initialized or
            if a database operation fails.
    """
    async with get_database().session() as session:
        yield session


async def check_database_connection() -> bool:
    """Check if the API process database is reachable."""
    if _database is None:
        return False
    return await _database.ping()


# Worker threads: one Database per thread, bound to that thread's event loop
_thread_local = threading.local()


def get_worker_database() -> Database:
    """Get the Database for the current Dramatiq worker thread."""
    database = getattr(_thread_local, "database", None)

    if database is None:
        from src.core.config import get_settings

        database = Database.from_settings(get_settings())
        _thread_local.database = database
        logger.debug(
            "Created worker database for thread %s",
            threading.current_thread().name,
        )

    return database


def _clear_thread_db_connections() -> None:
    """Forget the current thread's Database.

    Called by run_async() when a new event loop is created for a thread.
    The old engine's connections belong to the closed loop and are dropped.
    """
    _thread_local.database = None
