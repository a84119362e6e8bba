"""Task Store — persistence of task records and their read views.

Invariants:
    - Read views outer-join users twice to expose assignee and creator names
    - visible_to restricts rows to created_by == id OR assigned_to == id
    - Ordering uses an allow-listed column with id as tie-breaker, so pages
      at a fixed limit never overlap or skip rows
    - update() always stamps updated_at
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, NamedTuple
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from taskhub.core.domain_types import SortOrder
from taskhub.core.errors import DatabaseError
from taskhub.core.listing import PageRequest, TaskListQuery
from taskhub.models.task import Task
from taskhub.models.user import User

_SORT_COLUMNS = {
    "created_at": Task.created_at,
    "due_date": Task.due_date,
    "priority": Task.priority,
    "status": Task.status,
}


class TaskView(NamedTuple):
    """A task row plus the display names of its assignee and creator."""
    task: Task
    assigned_to_name: str | None
    created_by_name: str | None


def _view_select() -> Select:
    assignee = aliased(User)
    creator = aliased(User)
    return (
        select(Task, assignee.name, creator.name)
        .outerjoin(assignee, Task.assigned_to == assignee.id)
        .outerjoin(creator, Task.created_by == creator.id)
        .execution_options(populate_existing=True)
    )


def _apply_filters(stmt: Select, query: TaskListQuery) -> Select:
    if query.status is not None:
        stmt = stmt.where(Task.status == query.status.value)
    if query.priority is not None:
        stmt = stmt.where(Task.priority == query.priority.value)
    if query.assigned_to is not None:
        stmt = stmt.where(Task.assigned_to == query.assigned_to)
    if query.visible_to is not None:
        stmt = stmt.where(or_(
            Task.created_by == query.visible_to,
            Task.assigned_to == query.visible_to,
        ))
    return stmt


def _ordering(column_name: str, order: SortOrder) -> tuple:
    column = _SORT_COLUMNS[column_name]
    if order == SortOrder.ASC:
        return (column.asc(), Task.id.asc())
    return (column.desc(), Task.id.desc())


class TaskRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, task_id: UUID) -> TaskView | None:
        result = await self.db.execute(
            _view_select().where(Task.id == task_id),
        )
        row = result.one_or_none()
        return TaskView(*row) if row else None

    async def list(self, query: TaskListQuery) -> list[TaskView]:
        stmt = (
            _apply_filters(_view_select(), query)
            .order_by(*_ordering(query.sort_column, query.order))
            .limit(query.page.limit)
            .offset(query.page.offset)
        )
        result = await self.db.execute(stmt)
        return [TaskView(*row) for row in result.all()]

    async def count(self, query: TaskListQuery) -> int:
        stmt = _apply_filters(select(func.count()).select_from(Task), query)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def insert(self, task: Task) -> TaskView:
        self.db.add(task)
        await self.db.commit()
        view = await self.find_by_id(task.id)
        if view is None:
            raise DatabaseError("Inserted task not readable", "insert")
        return view

    async def update(self, task_id: UUID, columns: dict[str, Any]) -> TaskView | None:
        values = {**columns, "updated_at": datetime.now(timezone.utc)}
        result = await self.db.execute(
            update(Task).where(Task.id == task_id).values(**values),
        )
        await self.db.commit()
        if result.rowcount == 0:
            return None
        return await self.find_by_id(task_id)

    async def delete(self, task_id: UUID) -> bool:
        result = await self.db.execute(delete(Task).where(Task.id == task_id))
        await self.db.commit()
        return result.rowcount > 0

    async def find_by_assignee(
        self, user_id: UUID, page: PageRequest,
    ) -> list[TaskView]:
        stmt = (
            _view_select()
            .where(Task.assigned_to == user_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(page.limit)
            .offset(page.offset)
        )
        result = await self.db.execute(stmt)
        return [TaskView(*row) for row in result.all()]

    async def count_by_assignee(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Task)
            .where(Task.assigned_to == user_id),
        )
        return int(result.scalar_one())

    async def find_newest(self, limit: int) -> list[Task]:
        result = await self.db.execute(
            select(Task)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(limit),
        )
        return list(result.scalars().all())
