"""
one_to_many_example.db.errors

Exceptions raised by the persistence context.

Responsibilities:
- Translate SQLAlchemy failures at `save_changes` into a small, stable hierarchy.
- Carry structured detail (row counts, offending entity) for assertions and logs.
"""

from __future__ import annotations

import re

from sqlalchemy.orm.exc import StaleDataError

# Matches SQLAlchemy's "... expected to update 1 row(s); 0 were matched." wording.
_ROWCOUNT = re.compile(r"expected to (?:update|delete) (\d+) row\(s\); (\d+) were matched")


class PersistenceError(Exception):
    """Base class for failures surfaced by `OneToManyContext.save_changes`."""


class StorageError(PersistenceError):
    """The database rejected the unit of work (integrity, connectivity, ...)."""


class ConcurrencyConflictError(PersistenceError):
    """
    An UPDATE or DELETE affected a different number of rows than the change tracker
    expected, i.e. the tracked state no longer matches the stored row.
    """

    def __init__(self, *, expected: int | None = None, actual: int | None = None) -> None:
        self.expected = expected
        self.actual = actual
        if expected is None or actual is None:
            message = (
                "The database operation affected an unexpected number of rows; data may "
                "have been modified or deleted since entities were loaded."
            )
        else:
            message = (
                f"The database operation was expected to affect {expected} row(s), but "
                f"actually affected {actual} row(s); data may have been modified or "
                "deleted since entities were loaded."
            )
        super().__init__(message)

    @classmethod
    def from_stale_data(cls, exc: StaleDataError) -> ConcurrencyConflictError:
        match = _ROWCOUNT.search(str(exc))
        if match is None:
            return cls()
        return cls(expected=int(match.group(1)), actual=int(match.group(2)))


class MissingKeyError(PersistenceError):
    """A caller-assigned key was left unset on a new entity."""

    def __init__(self, entity: str, attribute: str) -> None:
        self.entity = entity
        self.attribute = attribute
        super().__init__(f"{entity}.{attribute} must be assigned by the caller before saving.")


# --- Module Notes -----------------------------------------------------------
# `ConcurrencyConflictError` text mirrors the row-count wording callers assert on;
# changing it breaks the conflict scenario tests.
