"""
one_to_many_example.db.context

Unit-of-work context over an async SQLAlchemy session.

Responsibilities:
- Track explicitly added entities and persist pending changes on `save_changes`.
- Reconcile new entities against their key generation policy before each flush.
- Offer `find` and an eager-loading `query(...).include(...).first(...)` helper.
- Translate SQLAlchemy failures into `PersistenceError` subclasses.
"""

from __future__ import annotations

import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, event, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import (
    InstanceState,
    QueryableAttribute,
    Session,
    make_transient_to_detached,
    selectinload,
)
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from one_to_many_example.db.errors import (
    ConcurrencyConflictError,
    MissingKeyError,
    PersistenceError,
    StorageError,
)
from one_to_many_example.db.keys import KeyGeneration, key_attributes, key_generation
from one_to_many_example.observability.logging import get_logger

log = get_logger(__name__)

_T = TypeVar("_T")

_EXPLICIT_KEY = "explicitly_added"


class Query(Generic[_T]):
    """Immutable query builder; each `include` returns a new instance."""

    def __init__(self, session: AsyncSession, model: type[_T], options: tuple[Any, ...] = ()) -> None:
        self._session = session
        self._model = model
        self._options = options

    def include(self, *relations: QueryableAttribute[Any]) -> Query[_T]:
        loaders = tuple(selectinload(relation) for relation in relations)
        return Query(self._session, self._model, self._options + loaders)

    async def first(self, *criteria: ColumnElement[bool]) -> _T | None:
        stmt = select(self._model).options(*self._options).where(*criteria).limit(1)
        return (await self._session.execute(stmt)).scalars().first()

    async def all(self, *criteria: ColumnElement[bool]) -> list[_T]:
        stmt = select(self._model).options(*self._options).where(*criteria)
        return list((await self._session.execute(stmt)).scalars().all())


class OneToManyContext:
    """
    Short-lived unit of work: add/find/query entities, then `save_changes` once.

    Entities passed to `add` are always inserted, together with the new objects
    cascaded in with them. Entities that join the session only through a stored
    row (e.g. appended to a loaded parent's collection) are classified by their
    key policy: a populated generated key marks the entity as already stored, so
    it is flushed as an UPDATE.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._explicit: weakref.WeakSet[Any] = weakref.WeakSet()
        session.info[_EXPLICIT_KEY] = self._explicit
        event.listen(session.sync_session, "before_flush", _reconcile_keys)

    def add(self, entity: Any) -> None:
        self._session.add(entity)
        self._explicit.add(entity)

    async def find(self, model: type[_T], key: Any) -> _T | None:
        return await self._session.get(model, key)

    def query(self, model: type[_T]) -> Query[_T]:
        return Query(self._session, model)

    async def save_changes(self) -> None:
        pending = len(self._session.new) + len(self._session.dirty)
        try:
            await self._session.commit()
        except PersistenceError as exc:
            await self._session.rollback()
            log.warning("save_failed", error=type(exc).__name__, detail=str(exc))
            raise
        except StaleDataError as exc:
            await self._session.rollback()
            conflict = ConcurrencyConflictError.from_stale_data(exc)
            log.warning(
                "save_failed",
                error=type(conflict).__name__,
                expected=conflict.expected,
                actual=conflict.actual,
            )
            raise conflict from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            log.warning("save_failed", error=type(exc).__name__, detail=str(exc))
            raise StorageError(str(exc)) from exc
        finally:
            self._explicit.clear()
        log.debug("save_changes", pending=pending)


@asynccontextmanager
async def open_context(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[OneToManyContext]:
    async with session_factory() as session:
        yield OneToManyContext(session)


def _reconcile_keys(session: Session, flush_context: Any, instances: Any) -> None:
    added = _added_graph(session.info.get(_EXPLICIT_KEY, ()))
    for entity in list(session.new):
        mapper = inspect(entity).mapper
        attributes = key_attributes(mapper)
        has_key = all(getattr(entity, name) is not None for name in attributes)

        if key_generation(mapper) is KeyGeneration.never:
            if not has_key:
                missing = next(name for name in attributes if getattr(entity, name) is None)
                raise MissingKeyError(mapper.class_.__name__, missing)
            continue

        if not has_key or id(entity) in added:
            continue

        _track_as_existing(session, entity)
        log.info(
            "key_reconciled",
            entity=mapper.class_.__name__,
            key=[str(getattr(entity, name)) for name in attributes],
            state="modified",
        )


def _added_graph(explicit: Any) -> set[int]:
    # Objects cascaded in with an added entity are new as well, up to the first stored row.
    added: set[int] = set()
    for entity in list(explicit):
        state = inspect(entity)
        added.add(id(entity))
        for obj, _, _, _ in state.mapper.cascade_iterator(
            "save-update", state, halt_on=_is_stored
        ):
            added.add(id(obj))
    return added


def _is_stored(state: InstanceState[Any]) -> bool:
    return state.key is not None


def _track_as_existing(session: Session, entity: Any) -> None:
    # Pending -> transient -> detached -> persistent, with every loaded column marked
    # dirty so the flush emits an UPDATE against the populated key.
    session.expunge(entity)
    make_transient_to_detached(entity)
    session.add(entity)

    state = inspect(entity)
    for prop in state.mapper.column_attrs:
        if prop.key in state.dict and not any(col.primary_key for col in prop.columns):
            flag_modified(entity, prop.key)


# --- Module Notes -----------------------------------------------------------
# The before_flush hook is registered per session, so contexts never leak policy
# into sessions created elsewhere from the same factory.
