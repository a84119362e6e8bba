"""List Queries — normalization of filter, sort and pagination input.

Invariants:
    - page >= 1 and 1 <= limit <= 100; absent or invalid values fall back to (1, 10)
    - Sort column always comes from an allow-list; unknown names fall back to created_at
    - Unknown order falls back to descending
    - total_pages == ceil(total / limit)

Design Decisions:
    - Frozen dataclasses over dicts: the repository receives a fully validated
      query object, never raw client input
    - Enum filters coerced here so a bad value surfaces as BadRequestError
      even when the caller bypassed the HTTP schema
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar
from uuid import UUID

from taskhub.core.domain_types import (
    DEFAULT_SORT_FIELD,
    TASK_SORT_COLUMNS,
    USER_SORT_COLUMNS,
    Role,
    SortOrder,
    TaskPriority,
    TaskStatus,
)
from taskhub.core.errors import BadRequestError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

E = TypeVar("E", bound=Enum)

_INT_RE = re.compile(r"-?[0-9]+")


# ─── Scalar Normalizers ──────────────────────────────────────────

def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        return int(value.strip())
    return None


def normalize_page(value: object) -> int:
    page = _as_int(value)
    return page if page is not None and page >= 1 else DEFAULT_PAGE


def normalize_limit(value: object) -> int:
    limit = _as_int(value)
    if limit is None or limit < 1 or limit > MAX_LIMIT:
        return DEFAULT_LIMIT
    return limit


def normalize_order(value: object) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    if isinstance(value, str) and value.lower() in ("asc", "desc"):
        return SortOrder(value.lower())
    return SortOrder.DESC


def normalize_sort(value: object, allowed: dict[str, str]) -> str:
    """Map a client sort name to a column name via the allow-list."""
    if isinstance(value, str) and value in allowed:
        return allowed[value]
    return allowed[DEFAULT_SORT_FIELD]


def coerce_enum(enum_cls: type[E], value: object, field: str) -> E | None:
    """None passes through; anything else must be a valid member."""
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise BadRequestError(f"Invalid {field}: {value!r}", field=field)


# ─── Query Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_raw(cls, page: object = None, limit: object = None) -> "PageRequest":
        return cls(page=normalize_page(page), limit=normalize_limit(limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class TaskListQuery:
    """Validated task listing request.

    visible_to restricts results to tasks created by or assigned to that user;
    it is set only by authorization scoping, never from client input.
    """
    page: PageRequest
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: UUID | None = None
    sort_column: str = TASK_SORT_COLUMNS[DEFAULT_SORT_FIELD]
    order: SortOrder = SortOrder.DESC
    visible_to: UUID | None = None


@dataclass(frozen=True)
class UserListQuery:
    page: PageRequest
    role: Role | None = None
    sort_column: str = USER_SORT_COLUMNS[DEFAULT_SORT_FIELD]
    order: SortOrder = SortOrder.DESC


def build_task_list_query(
    *,
    page: object = None,
    limit: object = None,
    status: object = None,
    priority: object = None,
    assigned_to: UUID | None = None,
    sort_by: object = None,
    order: object = None,
) -> TaskListQuery:
    return TaskListQuery(
        page=PageRequest.from_raw(page, limit),
        status=coerce_enum(TaskStatus, status, "status"),
        priority=coerce_enum(TaskPriority, priority, "priority"),
        assigned_to=assigned_to,
        sort_column=normalize_sort(sort_by, TASK_SORT_COLUMNS),
        order=normalize_order(order),
    )


def build_user_list_query(
    *,
    page: object = None,
    limit: object = None,
    role: object = None,
    sort_by: object = None,
    order: object = None,
) -> UserListQuery:
    return UserListQuery(
        page=PageRequest.from_raw(page, limit),
        role=coerce_enum(Role, role, "role"),
        sort_column=normalize_sort(sort_by, USER_SORT_COLUMNS),
        order=normalize_order(order),
    )


def build_page_info(page: PageRequest, total: int) -> PageInfo:
    return PageInfo(
        page=page.page,
        limit=page.limit,
        total=total,
        total_pages=math.ceil(total / page.limit),
    )
