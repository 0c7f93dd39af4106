"""
one_to_many_example.services.scenarios

Scenario driver for the one-to-many key reconciliation regressions.

Responsibilities:
- Seed parents and children, one unit of work (and one save) per step.
- Reload a parent with its children eagerly joined.
- Reduce a loaded graph to a structural snapshot for deep equality checks.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from one_to_many_example.db.context import open_context
from one_to_many_example.db.models import BrokenChild, BrokenParent, Child, Parent
from one_to_many_example.observability.logging import get_logger

log = get_logger(__name__)


class ParentNotFoundError(LookupError):
    def __init__(self, parent_id: uuid.UUID) -> None:
        self.parent_id = parent_id
        super().__init__("Parent does not exist.")


@dataclass(frozen=True, slots=True)
class ChildSnapshot:
    id: uuid.UUID
    name: str
    parent_id: uuid.UUID


@dataclass(frozen=True, slots=True)
class ParentSnapshot:
    id: uuid.UUID
    name: str
    children: tuple[ChildSnapshot, ...]


def snapshot(parent: Parent | BrokenParent) -> ParentSnapshot:
    # Requires `children` to be loaded already (see `load_parent`).
    return ParentSnapshot(
        id=parent.id,
        name=parent.name,
        children=tuple(
            ChildSnapshot(id=child.id, name=child.name, parent_id=child.parent_key)
            for child in parent.children
        ),
    )


class OneToManyScenarios:
    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_parent(self, parent_id: uuid.UUID, *, name: str = "Parent") -> None:
        await self._add_parent(Parent, parent_id, name)

    async def add_child(self, parent_id: uuid.UUID, child_id: uuid.UUID, name: str) -> None:
        await self._append_child(Parent, Child, parent_id, child_id, name)

    async def add_broken_parent(self, parent_id: uuid.UUID, *, name: str = "Parent") -> None:
        await self._add_parent(BrokenParent, parent_id, name)

    async def add_broken_child(
        self, parent_id: uuid.UUID, child_id: uuid.UUID | None, name: str
    ) -> None:
        """
        Append a child to an already-loaded BrokenParent and save.

        With `child_id` populated this raises `ConcurrencyConflictError`: the
        generated-key policy makes the new child look like an existing row.
        """

        await self._append_child(BrokenParent, BrokenChild, parent_id, child_id, name)

    async def load_parent(self, parent_id: uuid.UUID) -> Parent | None:
        async with open_context(self._session_factory) as ctx:
            return await ctx.query(Parent).include(Parent.children).first(Parent.id == parent_id)

    async def load_broken_parent(self, parent_id: uuid.UUID) -> BrokenParent | None:
        async with open_context(self._session_factory) as ctx:
            return (
                await ctx.query(BrokenParent)
                .include(BrokenParent.children)
                .first(BrokenParent.id == parent_id)
            )

    async def _add_parent(
        self, model: type[Parent] | type[BrokenParent], parent_id: uuid.UUID, name: str
    ) -> None:
        async with open_context(self._session_factory) as ctx:
            ctx.add(model(id=parent_id, name=name))
            await ctx.save_changes()
        log.info("parent_added", model=model.__name__, parent_id=str(parent_id))

    async def _append_child(
        self,
        parent_model: type[Parent] | type[BrokenParent],
        child_model: type[Child] | type[BrokenChild],
        parent_id: uuid.UUID,
        child_id: uuid.UUID | None,
        name: str,
    ) -> None:
        async with open_context(self._session_factory) as ctx:
            parent = await ctx.find(parent_model, parent_id)
            if parent is None:
                raise ParentNotFoundError(parent_id)

            # The child reaches the session only through the parent's collection.
            children = await parent.awaitable_attrs.children
            children.append(child_model(id=child_id, name=name))
            await ctx.save_changes()
        log.info(
            "child_added",
            model=child_model.__name__,
            parent_id=str(parent_id),
            child_id=str(child_id),
        )


# --- Module Notes -----------------------------------------------------------
# Steps never retry; a persistence error propagates to the caller unchanged.
