"""
one_to_many_example.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, key generation policies, engine/session setup and the
  unit-of-work context used by the scenarios.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Import `db.models` (or `db.init_db`) before building the schema so every table is
# registered on `Base.metadata`.
