"""Task Query Engine — filtered, sorted, paginated and role-scoped task views.

Invariants:
    - Non-admin listings only ever contain tasks the requester created or is
      assigned to; a supplied assigned_to filter is dropped for them
    - total and the page come from the same scoped query object
    - get_task_by_id: NotFound before Forbidden
"""

import logging
from uuid import UUID

from taskhub.core.authorization import (
    Requester, enforce, scope_task_listing, task_view_policy,
)
from taskhub.core.errors import ResourceNotFoundError
from taskhub.core.listing import TaskListQuery, build_page_info
from taskhub.core.ports import TaskStore
from taskhub.schemas.common import PaginationMeta
from taskhub.schemas.task import TaskListResult, TaskResponse

logger = logging.getLogger(__name__)


class TaskQueryService:
    def __init__(self, tasks: TaskStore):
        self.tasks = tasks

    async def list_tasks(
        self, query: TaskListQuery, requester: Requester,
    ) -> TaskListResult:
        scoped = scope_task_listing(requester, query)
        views = await self.tasks.list(scoped)
        total = await self.tasks.count(scoped)
        info = build_page_info(scoped.page, total)

        logger.info(
            "Tasks retrieved",
            extra={
                "event": "TASKS_RETRIEVED",
                "requester_id": str(requester.id),
                "count": len(views),
                "total": total,
                "page": info.page,
            },
        )
        return TaskListResult(
            tasks=[TaskResponse.from_view(v) for v in views],
            pagination=PaginationMeta.from_page_info(info),
        )

    async def get_task_by_id(
        self, task_id: UUID, requester: Requester,
    ) -> TaskResponse:
        view = await self.tasks.find_by_id(task_id)
        if view is None:
            raise ResourceNotFoundError("Task", str(task_id))

        decision = task_view_policy(
            requester, view.task.created_by, view.task.assigned_to,
        )
        if not decision.allowed:
            logger.warning(
                "Task access denied",
                extra={
                    "event": "TASK_ACCESS_DENIED",
                    "task_id": str(task_id),
                    "requester_id": str(requester.id),
                },
            )
        enforce(decision, requester, task_id)
        return TaskResponse.from_view(view)
