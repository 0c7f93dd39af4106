"""
one_to_many_example.db.models

Entity models for the two one-to-many scenarios.

Responsibilities:
- Parent/Child: child key declared caller-assigned (never generated).
- BrokenParent/BrokenChild: child key left at the default generated-on-add policy,
  which makes a new child with a populated key look like an existing row.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Uuid as SAUuid
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from one_to_many_example.db.base import Base
from one_to_many_example.db.keys import KeyGeneration, uuid_key


class Parent(Base):
    __tablename__ = "parents"

    id: Mapped[uuid.UUID] = uuid_key()
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    # `position` records insertion order so reloads return children as appended.
    children: Mapped[list[Child]] = relationship(
        back_populates="parent",
        order_by="Child.position",
        collection_class=ordering_list("position"),
    )


class Child(Base):
    __tablename__ = "children"

    id: Mapped[uuid.UUID] = uuid_key(generation=KeyGeneration.never)
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    parent_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("parents.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    parent: Mapped[Parent] = relationship(back_populates="children")

    @property
    def parent_key(self) -> uuid.UUID:
        return self.parent_id


class BrokenParent(Base):
    __tablename__ = "broken_parents"

    id: Mapped[uuid.UUID] = uuid_key()
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    children: Mapped[list[BrokenChild]] = relationship(
        back_populates="parent",
        order_by="BrokenChild.position",
        collection_class=ordering_list("position"),
    )


class BrokenChild(Base):
    __tablename__ = "broken_children"

    # Default policy on purpose: see module docstring.
    id: Mapped[uuid.UUID] = uuid_key()
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    broken_parent_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("broken_parents.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    parent: Mapped[BrokenParent] = relationship(back_populates="children")

    @property
    def parent_key(self) -> uuid.UUID:
        return self.broken_parent_id


# --- Module Notes -----------------------------------------------------------
# The two pairs are deliberately parallel; only the child key policy and the FK
# column name differ.
