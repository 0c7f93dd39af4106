"""
tests.test_settings

Connection settings resolution.
"""

from __future__ import annotations

import pytest

from one_to_many_example.settings import Settings


def test_default_url_targets_orchestrated_postgres(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ONETOMANY_DATABASE_URL", raising=False)

    url = Settings().sqlalchemy_url

    assert url.drivername == "postgresql+asyncpg"
    assert (url.host, url.database, url.username, url.password) == (
        "postgres",
        "OneToManyExample",
        "postgres",
        "postgres",
    )


def test_env_overrides_connection_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ONETOMANY_DATABASE_URL", raising=False)
    monkeypatch.setenv("ONETOMANY_DB_HOST", "db.internal")
    monkeypatch.setenv("ONETOMANY_DB_PASSWORD", "p@ss/word")

    url = Settings().sqlalchemy_url

    assert url.host == "db.internal"
    assert url.password == "p@ss/word"


def test_database_url_wins_over_fields() -> None:
    settings = Settings(database_url="sqlite+aiosqlite:///./scenario.db", db_host="ignored")

    assert settings.sqlalchemy_url.drivername == "sqlite+aiosqlite"
    assert settings.sqlalchemy_url.database == "./scenario.db"


def test_password_hidden_from_repr() -> None:
    assert "hunter2" not in repr(Settings(db_password="hunter2"))


def test_logging_fields_read_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ONETOMANY_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ONETOMANY_SERVICE_NAME", "one-to-many-ci")

    settings = Settings(env="test")

    assert (settings.service_name, settings.log_level) == ("one-to-many-ci", "DEBUG")


def test_logging_field_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ONETOMANY_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ONETOMANY_SERVICE_NAME", raising=False)

    settings = Settings()

    assert (settings.service_name, settings.log_level) == ("one-to-many-example", "INFO")


# --- Module Notes -----------------------------------------------------------
# Connection fields are never validated against a live server here; see conftest for
# pointing the suite at PostgreSQL.
