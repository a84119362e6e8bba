"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Task.created_by / Task.assigned_to are weak references: plain UUID columns,
      no foreign keys, no cascades

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/alembic
"""

from taskhub.models.user import User  # noqa: F401
from taskhub.models.task import Task  # noqa: F401
