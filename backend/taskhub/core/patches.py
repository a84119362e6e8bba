"""Typed Patches — explicit partial-update structures for tasks and users.

Invariants:
    - UNSET means "field not supplied"; None means "clear the column"
    - Every field maps to its storage column by hand, with no key iteration or reflection
    - narrowed() only ever removes fields, never adds or rewrites them

Design Decisions:
    - Frozen dataclasses: a patch is built once at the boundary and passed down
    - Address stays a nested value here and is flattened only in to_columns()
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from taskhub.core.domain_types import Role, TaskPriority, TaskStatus


class _Unset:
    """Sentinel type for fields absent from a patch."""
    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: object) -> bool:
    return value is not UNSET


def _keep(value: object, name: str, fields: frozenset[str]) -> object:
    return value if name in fields else UNSET


def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


# ─── Task ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TaskPatch:
    title: str = UNSET
    description: str | None = UNSET
    status: TaskStatus = UNSET
    priority: TaskPriority = UNSET
    due_date: datetime | None = UNSET
    assigned_to: UUID | None = UNSET

    def narrowed(self, fields: frozenset[str] | None) -> "TaskPatch":
        """Drop every field not in `fields` (None keeps everything)."""
        if fields is None:
            return self
        return TaskPatch(
            title=_keep(self.title, "title", fields),
            description=_keep(self.description, "description", fields),
            status=_keep(self.status, "status", fields),
            priority=_keep(self.priority, "priority", fields),
            due_date=_keep(self.due_date, "due_date", fields),
            assigned_to=_keep(self.assigned_to, "assigned_to", fields),
        )

    def present_fields(self) -> list[str]:
        names = []
        if is_set(self.title):
            names.append("title")
        if is_set(self.description):
            names.append("description")
        if is_set(self.status):
            names.append("status")
        if is_set(self.priority):
            names.append("priority")
        if is_set(self.due_date):
            names.append("due_date")
        if is_set(self.assigned_to):
            names.append("assigned_to")
        return names

    def to_columns(self) -> dict[str, object]:
        columns: dict[str, object] = {}
        if is_set(self.title):
            columns["title"] = self.title
        if is_set(self.description):
            columns["description"] = _blank_to_none(self.description)
        if is_set(self.status):
            columns["status"] = TaskStatus(self.status).value
        if is_set(self.priority):
            columns["priority"] = TaskPriority(self.priority).value
        if is_set(self.due_date):
            columns["due_date"] = self.due_date
        if is_set(self.assigned_to):
            columns["assigned_to"] = self.assigned_to
        return columns


# ─── User ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Address:
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state_or_province: str | None = None
    postal_code: str | None = None
    country: str | None = None

    def to_columns(self) -> dict[str, str | None]:
        """Flatten into the discrete user columns; blanks are stored as NULL."""
        return {
            "address_line1": _blank_to_none(self.address_line1),
            "address_line2": _blank_to_none(self.address_line2),
            "city": _blank_to_none(self.city),
            "state_or_province": _blank_to_none(self.state_or_province),
            "postal_code": _blank_to_none(self.postal_code),
            "country": _blank_to_none(self.country),
        }


@dataclass(frozen=True)
class UserPatch:
    name: str = UNSET
    email: str = UNSET
    phone_number: str | None = UNSET
    address: Address = UNSET
    role: Role = UNSET

    def narrowed(self, fields: frozenset[str] | None) -> "UserPatch":
        if fields is None:
            return self
        return UserPatch(
            name=_keep(self.name, "name", fields),
            email=_keep(self.email, "email", fields),
            phone_number=_keep(self.phone_number, "phone_number", fields),
            address=_keep(self.address, "address", fields),
            role=_keep(self.role, "role", fields),
        )

    def present_fields(self) -> list[str]:
        names = []
        if is_set(self.name):
            names.append("name")
        if is_set(self.email):
            names.append("email")
        if is_set(self.phone_number):
            names.append("phone_number")
        if is_set(self.address):
            names.append("address")
        if is_set(self.role):
            names.append("role")
        return names

    def to_columns(self) -> dict[str, object]:
        columns: dict[str, object] = {}
        if is_set(self.name):
            columns["name"] = self.name
        if is_set(self.email):
            columns["email"] = self.email
        if is_set(self.phone_number):
            columns["phone_number"] = _blank_to_none(self.phone_number)
        if is_set(self.address):
            columns.update(self.address.to_columns())
        if is_set(self.role):
            columns["role"] = Role(self.role).value
        return columns
