"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums, no raw string matching
    - Sort allow-lists are the only way a client value reaches ORDER BY

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles — admin sees and mutates everything, user is scoped."""
    ADMIN = "admin"
    USER = "user"


class TaskStatus(str, Enum):
    """Task lifecycle states — maps to DB `status` column."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority — maps to DB `priority` column."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Sort Allow-Lists ────────────────────────────────────────────
# Client-facing name -> column attribute name on the ORM model.

TASK_SORT_COLUMNS: dict[str, str] = {
    "createdAt": "created_at",
    "dueDate": "due_date",
    "priority": "priority",
    "status": "status",
}

USER_SORT_COLUMNS: dict[str, str] = {
    "createdAt": "created_at",
    "name": "name",
    "email": "email",
}

DEFAULT_SORT_FIELD = "createdAt"
