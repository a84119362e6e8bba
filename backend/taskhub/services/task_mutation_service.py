"""Task Mutation Service — create, update, delete and assign with business rules.

Invariants:
    - due_date, when written, is strictly after the write time (BadRequest otherwise)
    - A referenced assignee must exist (NotFound otherwise); null clears it
    - Non-admin updates are narrowed to {status, description}; other fields are
      dropped silently, never rejected
    - Delete and assign are creator-only for non-admins; update also allows the assignee
    - Every update stamps updated_at (done by the store)

Design Decisions:
    - Clock injected (now) so due-date checks are deterministic in tests
    - Check order mirrors the HTTP contract: NotFound, then Forbidden, then
      business-rule validation
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import UUID

from taskhub.core.authorization import (
    Decision,
    Requester,
    enforce,
    task_assign_policy,
    task_delete_policy,
    task_update_policy,
)
from taskhub.core.domain_types import TaskPriority, TaskStatus
from taskhub.core.errors import ResourceNotFoundError
from taskhub.core.patches import TaskPatch, is_set
from taskhub.core.ports import IdentityStore, TaskStore
from taskhub.core.task_rules import check_due_date_in_future
from taskhub.models.task import Task
from taskhub.repositories.task_repository import TaskView
from taskhub.schemas.task import TaskCreateRequest, TaskResponse

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskMutationService:
    def __init__(
        self,
        tasks: TaskStore,
        users: IdentityStore,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.tasks = tasks
        self.users = users
        self.now = now

    async def create_task(
        self, request: TaskCreateRequest, requester: Requester,
    ) -> TaskResponse:
        check_due_date_in_future(request.due_date, self.now())
        if request.assigned_to is not None:
            await self._require_assignee(request.assigned_to)

        task = Task(
            title=request.title,
            description=request.description or None,
            status=(request.status or TaskStatus.PENDING).value,
            priority=(request.priority or TaskPriority.MEDIUM).value,
            due_date=request.due_date,
            assigned_to=request.assigned_to,
            created_by=requester.id,
        )
        view = await self.tasks.insert(task)
        logger.info(
            "Task created",
            extra={
                "event": "TASK_CREATED",
                "task_id": str(view.task.id),
                "requester_id": str(requester.id),
            },
        )
        return TaskResponse.from_view(view)

    async def update_task(
        self, task_id: UUID, patch: TaskPatch, requester: Requester,
    ) -> TaskResponse:
        view = await self._require_task(task_id)
        decision = self._enforce(
            task_update_policy(
                requester, view.task.created_by, view.task.assigned_to,
            ),
            requester, task_id, "TASK_UPDATE_DENIED",
        )
        patch = self._narrow(patch, decision, task_id)

        if is_set(patch.assigned_to) and patch.assigned_to is not None:
            await self._require_assignee(patch.assigned_to)
        if is_set(patch.due_date):
            check_due_date_in_future(patch.due_date, self.now())

        updated = await self.tasks.update(task_id, patch.to_columns())
        if updated is None:
            raise ResourceNotFoundError("Task", str(task_id))
        logger.info(
            "Task updated",
            extra={
                "event": "TASK_UPDATED",
                "task_id": str(task_id),
                "requester_id": str(requester.id),
                "updated_fields": patch.present_fields(),
            },
        )
        return TaskResponse.from_view(updated)

    async def delete_task(self, task_id: UUID, requester: Requester) -> None:
        view = await self._require_task(task_id)
        self._enforce(
            task_delete_policy(requester, view.task.created_by),
            requester, task_id, "TASK_DELETE_DENIED",
        )
        if not await self.tasks.delete(task_id):
            raise ResourceNotFoundError("Task", str(task_id))
        logger.info(
            "Task deleted",
            extra={
                "event": "TASK_DELETED",
                "task_id": str(task_id),
                "requester_id": str(requester.id),
            },
        )

    async def assign_task(
        self, task_id: UUID, assignee_id: UUID, requester: Requester,
    ) -> TaskResponse:
        view = await self._require_task(task_id)
        await self._require_assignee(assignee_id, resource_type="User")
        self._enforce(
            task_assign_policy(requester, view.task.created_by),
            requester, task_id, "TASK_ASSIGN_DENIED",
        )

        updated = await self.tasks.update(task_id, {"assigned_to": assignee_id})
        if updated is None:
            raise ResourceNotFoundError("Task", str(task_id))
        logger.info(
            "Task assigned",
            extra={
                "event": "TASK_ASSIGNED",
                "task_id": str(task_id),
                "user_id": str(assignee_id),
                "requester_id": str(requester.id),
            },
        )
        return TaskResponse.from_view(updated)

    # ─── Helpers ─────────────────────────────────────────────────

    async def _require_task(self, task_id: UUID) -> TaskView:
        view = await self.tasks.find_by_id(task_id)
        if view is None:
            raise ResourceNotFoundError("Task", str(task_id))
        return view

    async def _require_assignee(
        self, user_id: UUID, resource_type: str = "Assigned user",
    ) -> None:
        if await self.users.find_by_id(user_id) is None:
            raise ResourceNotFoundError(resource_type, str(user_id))

    def _enforce(
        self, decision: Decision, requester: Requester, task_id: UUID, event: str,
    ) -> Decision:
        if not decision.allowed:
            logger.warning(
                "Task mutation denied",
                extra={
                    "event": event,
                    "task_id": str(task_id),
                    "requester_id": str(requester.id),
                },
            )
        return enforce(decision, requester, task_id)

    def _narrow(
        self, patch: TaskPatch, decision: Decision, task_id: UUID,
    ) -> TaskPatch:
        narrowed = patch.narrowed(decision.fields)
        dropped = sorted(set(patch.present_fields()) - set(narrowed.present_fields()))
        if dropped:
            logger.info(
                "Task patch narrowed",
                extra={
                    "event": "TASK_UPDATE_NARROWED",
                    "task_id": str(task_id),
                    "updated_fields": dropped,
                },
            )
        return narrowed
