"""
one_to_many_example.db.init_db

Schema lifecycle helpers.

Responsibilities:
- Drop and create the schema from model metadata (no hand-authored SQL).
- Give each scenario a freshly rebuilt database.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from one_to_many_example.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from one_to_many_example.db.base import Base
from one_to_many_example.observability.logging import get_logger

log = get_logger(__name__)


async def ensure_deleted(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def ensure_created(engine: AsyncEngine) -> None:
    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def reset_db(engine: AsyncEngine) -> None:
    """
    Full drop-and-recreate. Scenarios share one database, so this runs before
    each of them instead of relying on locks or cleanup.
    """

    await ensure_deleted(engine)
    await ensure_created(engine)
    log.info("schema_reset", tables=sorted(Base.metadata.tables))


# --- Module Notes -----------------------------------------------------------
# Drop order follows foreign-key dependencies from metadata, so children tables are
# removed before their parents on every backend.
