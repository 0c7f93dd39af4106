"""
tests.conftest

Shared fixtures for the scenario tests.

Responsibilities:
- Configure structured logging once per session.
- Provide a database that is dropped and recreated before every test.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from one_to_many_example.db.init_db import reset_db
from one_to_many_example.db.session import Database
from one_to_many_example.observability.logging import configure_logging
from one_to_many_example.services.scenarios import OneToManyScenarios
from one_to_many_example.settings import Settings


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    # Configure structured logging once, from the same settings model the suite runs with.
    settings = Settings(env="test")
    configure_logging(service_name=settings.service_name, level=settings.log_level)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    # Point ONETOMANY_TEST_DATABASE_URL at PostgreSQL to run against the orchestrated instance.
    url = os.environ.get("ONETOMANY_TEST_DATABASE_URL") or (
        f"sqlite+aiosqlite:///{tmp_path / 'one_to_many.db'}"
    )
    return Settings(env="test", database_url=url)


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    db = Database(settings)
    await reset_db(db.engine)
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def scenarios(database: Database) -> OneToManyScenarios:
    return OneToManyScenarios(session_factory=database.sessionmaker)


# --- Module Notes -----------------------------------------------------------
# Set ONETOMANY_LOG_LEVEL=DEBUG to see per-flush `key_reconciled` events in test output.
