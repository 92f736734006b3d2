from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base
from .config import Settings, get_settings, to_async_url

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Process-wide handle on the relational store.

    Owns the AsyncEngine (and therefore the connection pool) and the session
    factory. Build one at startup and pass it to whatever opens sessions;
    repositories receive sessions, never the engine.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = to_async_url(url)
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if self.url.startswith("sqlite"):
            if ":memory:" in self.url or self.url.rstrip("/").endswith("sqlite+aiosqlite:"):
                # A single shared connection keeps an in-memory database alive across sessions.
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        if self.url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine, expire_on_commit=False, autoflush=False
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        """Build a handle from DATABASE_URL / POSTGRES_* environment settings."""
        settings = settings or get_settings()
        return cls(settings.async_database_url, echo=settings.SQL_ECHO)

    # PUBLIC_INTERFACE
    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open one session for a unit of work.

        Anything left uncommitted when the block exits (normally or through an
        exception) is rolled back when the session closes.
        """
        async with self.session_maker() as session:
            yield session

    async def create_all(self) -> None:
        """Create every mapped table. Intended for tests and throwaway databases."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


# PUBLIC_INTERFACE
async def get_async_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Yield an AsyncSession from the given store handle."""
    async with database.session() as session:
        yield session
