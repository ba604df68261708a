"""ORM Models — SQLAlchemy declarative models for the four remote tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Column names are the storage shape used by core/entity_mapper.py

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all
      or Alembic autogenerate runs
"""

from worksync.models.workspace import Workspace  # noqa: F401
from worksync.models.project import Project  # noqa: F401
from worksync.models.task import Task  # noqa: F401
from worksync.models.activity import Activity  # noqa: F401
