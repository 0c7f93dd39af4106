"""
one_to_many_example.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven connection settings for the scenario database.
- Hide the database password from repr/logging.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """
    Connection descriptor for the scenario database.

    The individual `db_*` fields describe the PostgreSQL instance the suite runs
    against when orchestrated; `database_url` overrides all of them (tests point
    it at a throwaway SQLite file).
    """

    model_config = SettingsConfigDict(env_prefix="ONETOMANY_", case_sensitive=False)

    env: Literal["dev", "test", "ci"] = "dev"
    service_name: str = "one-to-many-example"
    log_level: str = "INFO"

    # Persistence
    db_driver: str = "postgresql+asyncpg"
    db_host: str = "postgres"
    db_port: int | None = None
    db_name: str = "OneToManyExample"
    db_user: str = "postgres"
    db_password: str = Field(default="postgres", repr=False)

    database_url: str | None = Field(default=None, repr=False)

    @property
    def sqlalchemy_url(self) -> URL:
        if self.database_url:
            return make_url(self.database_url)
        # URL.create escapes credentials, unlike string formatting.
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


# --- Module Notes -----------------------------------------------------------
# `service_name` and `log_level` feed `observability.logging.configure_logging`;
# the test suite builds its own `Settings(env="test")` rather than reading a cache.
