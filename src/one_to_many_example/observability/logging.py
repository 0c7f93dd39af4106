"""
one_to_many_example.observability.logging

Structured logging configuration.

Responsibilities:
- Configure `structlog` for JSON logs on top of stdlib logging.
- Route SQLAlchemy's engine logger through the same pipeline so the emitted
  INSERT/UPDATE statements show up next to unit-of-work events at DEBUG.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, service_name: str, level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    # INFO on "sqlalchemy.engine" logs every statement; only wanted when debugging a flush.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if numeric_level <= logging.DEBUG else logging.WARNING
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Events emitted across the package:
#   db.session        database_configured, database_disposed
#   db.init_db        schema_reset
#   db.context        key_reconciled (a new entity flushed as UPDATE), save_changes, save_failed
#   services.scenarios parent_added, child_added
# A `key_reconciled` line followed by `save_failed` is the signature of the
# generated-key conflict scenario.
