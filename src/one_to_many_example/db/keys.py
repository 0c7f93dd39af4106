"""
one_to_many_example.db.keys

Primary key generation policies.

Responsibilities:
- Declare whether a primary key is supplied by the caller or generated on add.
- Resolve the effective policy for a mapped class at flush time.
"""

from __future__ import annotations

import enum
import uuid
from typing import Any

from sqlalchemy import Uuid as SAUuid
from sqlalchemy.orm import Mapper, MappedColumn, mapped_column

_INFO_KEY = "key_generation"


class KeyGeneration(enum.StrEnum):
    # NEVER: the caller always supplies the key and nothing regenerates it.
    never = "NEVER"
    # ON_ADD: the persistence layer owns the key; a populated value means "already stored".
    on_add = "ON_ADD"


def uuid_key(*, generation: KeyGeneration = KeyGeneration.on_add) -> MappedColumn[Any]:
    """
    UUID primary key column tagged with its generation policy.

    Generated keys fall back to a client-side `uuid4` when left unset at insert time.
    """

    kwargs: dict[str, Any] = {}
    if generation is KeyGeneration.on_add:
        kwargs["default"] = uuid.uuid4
    return mapped_column(
        SAUuid(as_uuid=True),
        primary_key=True,
        autoincrement=False,
        info={_INFO_KEY: generation},
        **kwargs,
    )


def key_generation(mapper: Mapper[Any]) -> KeyGeneration:
    # Untagged keys follow the framework default: generated on add.
    column = mapper.primary_key[0]
    return KeyGeneration(column.info.get(_INFO_KEY, KeyGeneration.on_add))


def key_attributes(mapper: Mapper[Any]) -> list[str]:
    return [mapper.get_property_by_column(column).key for column in mapper.primary_key]


# --- Module Notes -----------------------------------------------------------
# Policies live on `Column.info` of the mapped key column; `key_generation` reads
# them back from the mapper at flush time.
