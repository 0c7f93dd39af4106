"""
one_to_many_example.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Create the async sessionmaker with safe defaults.
- Bundle both into a `Database` handle that opens unit-of-work contexts.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from one_to_many_example.db.context import OneToManyContext, open_context
from one_to_many_example.observability.logging import get_logger
from one_to_many_example.settings import Settings

log = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(
        settings.sqlalchemy_url,
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        # SQLite ignores REFERENCES clauses unless enabled per connection.
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps reloaded graphs readable after the context closes.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


class Database:
    """
    Engine + session factory for one database.

    Each call to `context()` opens a fresh, short-lived unit of work.
    """

    def __init__(self, settings: Settings) -> None:
        self.engine = create_engine(settings)
        self.sessionmaker = create_sessionmaker(self.engine)
        log.info("database_configured", dialect=self.engine.dialect.name, env=settings.env)

    def context(self) -> AbstractAsyncContextManager[OneToManyContext]:
        return open_context(self.sessionmaker)

    async def dispose(self) -> None:
        # Dispose the engine to close pools/FDs gracefully.
        await self.engine.dispose()
        log.info("database_disposed")


# --- Module Notes -----------------------------------------------------------
# Scenario drivers take the sessionmaker directly so they can be pointed at any
# engine (tests use a temporary SQLite file).
