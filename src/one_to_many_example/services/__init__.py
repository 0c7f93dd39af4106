"""
one_to_many_example.services

Service layer package.

Responsibilities:
- Scenario drivers that seed and reload the one-to-many models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Scenario drivers open their own contexts; callers pass only a sessionmaker.
