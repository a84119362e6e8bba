"""Task Schemas — task payloads with field-level validation.

Invariants:
    - title: 1-255 chars, stripped, non-empty; description <= 2000 chars
    - status/priority restricted to their enums
    - Due-date-in-future is NOT checked here (it depends on write time, see core/task_rules.py)
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from taskhub.core.domain_types import TaskPriority, TaskStatus
from taskhub.core.patches import UNSET, TaskPatch
from taskhub.repositories.task_repository import TaskView
from taskhub.schemas.common import CamelModel, PaginationMeta


def _strip_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


class TaskCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assigned_to: UUID | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)


class TaskUpdateRequest(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assigned_to: UUID | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_title(v) if v is not None else v

    @model_validator(mode="after")
    def reject_null_enums(self):
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_patch(self) -> TaskPatch:
        """Only fields present in the request body end up in the patch."""
        fields = self.model_fields_set
        return TaskPatch(
            title=self.title if "title" in fields else UNSET,
            description=self.description if "description" in fields else UNSET,
            status=self.status if "status" in fields else UNSET,
            priority=self.priority if "priority" in fields else UNSET,
            due_date=self.due_date if "due_date" in fields else UNSET,
            assigned_to=self.assigned_to if "assigned_to" in fields else UNSET,
        )


class TaskAssignRequest(CamelModel):
    user_id: UUID


class TaskResponse(CamelModel):
    id: UUID
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    assigned_to: UUID | None = None
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    assigned_to_name: str | None = None
    created_by_name: str | None = None

    @classmethod
    def from_view(cls, view: TaskView) -> "TaskResponse":
        task = view.task
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=TaskStatus(task.status),
            priority=TaskPriority(task.priority),
            due_date=task.due_date,
            assigned_to=task.assigned_to,
            created_by=task.created_by,
            created_at=task.created_at,
            updated_at=task.updated_at,
            assigned_to_name=view.assigned_to_name,
            created_by_name=view.created_by_name,
        )


class TaskListResult(CamelModel):
    tasks: list[TaskResponse]
    pagination: PaginationMeta
