"""Task Mutation Service — create, update (with narrowing), delete and assign.

Invariants:
    - Past due dates rejected on create and update
    - Unknown assignee -> NotFound
    - A non-admin assignee's title/priority changes are dropped, status applied
    - Only the creator deletes; assignees get ForbiddenError
    - Assign checks task, then user, then permission
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from taskhub.core.domain_types import Role, TaskPriority, TaskStatus
from taskhub.core.errors import BadRequestError, ForbiddenError, ResourceNotFoundError
from taskhub.core.patches import TaskPatch
from taskhub.schemas.task import TaskCreateRequest
from taskhub.services.task_mutation_service import TaskMutationService

NOW = datetime(2026, 6, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(task_store, user_store):
    return TaskMutationService(task_store, user_store, now=lambda: NOW)


async def test_create_applies_defaults(service, make_user):
    me, req = await make_user(name="Creator")

    task = await service.create_task(TaskCreateRequest(title="  Write docs  "), req)

    assert task.title == "Write docs"
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.MEDIUM
    assert task.created_by == me.id
    assert task.created_by_name == "Creator"
    assert task.assigned_to is None


async def test_create_rejects_past_due_date(service, make_user):
    _, req = await make_user()
    request = TaskCreateRequest(title="late", due_date=NOW - timedelta(days=1))

    with pytest.raises(BadRequestError) as exc_info:
        await service.create_task(request, req)
    assert exc_info.value.message == "Due date must be in the future"


async def test_create_rejects_unknown_assignee(service, make_user):
    _, req = await make_user()
    with pytest.raises(ResourceNotFoundError):
        await service.create_task(
            TaskCreateRequest(title="t", assigned_to=uuid4()), req,
        )


async def test_create_blank_description_stored_as_null(service, make_user):
    _, req = await make_user()
    task = await service.create_task(
        TaskCreateRequest(title="t", description=""), req,
    )
    assert task.description is None


async def test_assignee_update_is_narrowed(service, make_user):
    _, creator = await make_user()
    assignee, assignee_req = await make_user()
    task = await service.create_task(
        TaskCreateRequest(title="Original", assigned_to=assignee.id), creator,
    )

    updated = await service.update_task(
        task.id,
        TaskPatch(title="Hijacked", priority=TaskPriority.HIGH, status=TaskStatus.COMPLETED),
        assignee_req,
    )

    assert updated.title == "Original"
    assert updated.priority == TaskPriority.MEDIUM
    assert updated.status == TaskStatus.COMPLETED


async def test_admin_update_changes_everything(service, make_user):
    _, creator = await make_user()
    _, admin = await make_user(role=Role.ADMIN)
    task = await service.create_task(TaskCreateRequest(title="Original"), creator)

    updated = await service.update_task(
        task.id, TaskPatch(title="Renamed", priority=TaskPriority.HIGH), admin,
    )

    assert updated.title == "Renamed"
    assert updated.priority == TaskPriority.HIGH


async def test_update_stamps_updated_at(service, make_user):
    _, creator = await make_user()
    task = await service.create_task(TaskCreateRequest(title="t"), creator)

    updated = await service.update_task(
        task.id, TaskPatch(description="more"), creator,
    )

    assert updated.description == "more"
    assert updated.updated_at >= task.updated_at


async def test_update_by_stranger_forbidden(service, make_user):
    _, creator = await make_user()
    _, stranger = await make_user()
    task = await service.create_task(TaskCreateRequest(title="t"), creator)

    with pytest.raises(ForbiddenError):
        await service.update_task(task.id, TaskPatch(status=TaskStatus.COMPLETED), stranger)


async def test_update_rejects_past_due_date(service, make_user):
    _, admin = await make_user(role=Role.ADMIN)
    task = await service.create_task(TaskCreateRequest(title="t"), admin)

    with pytest.raises(BadRequestError):
        await service.update_task(task.id, TaskPatch(due_date=NOW), admin)


async def test_update_can_clear_assignee(service, make_user):
    assignee, _ = await make_user()
    _, admin = await make_user(role=Role.ADMIN)
    task = await service.create_task(
        TaskCreateRequest(title="t", assigned_to=assignee.id), admin,
    )

    updated = await service.update_task(task.id, TaskPatch(assigned_to=None), admin)

    assert updated.assigned_to is None
    assert updated.assigned_to_name is None


async def test_update_unknown_task_not_found(service, make_user):
    _, admin = await make_user(role=Role.ADMIN)
    with pytest.raises(ResourceNotFoundError):
        await service.update_task(uuid4(), TaskPatch(title="x"), admin)


async def test_assignee_cannot_delete(service, task_store, make_user):
    _, creator = await make_user()
    assignee, assignee_req = await make_user()
    task = await service.create_task(
        TaskCreateRequest(title="t", assigned_to=assignee.id), creator,
    )

    with pytest.raises(ForbiddenError):
        await service.delete_task(task.id, assignee_req)
    assert await task_store.find_by_id(task.id) is not None


async def test_creator_deletes(service, task_store, make_user):
    _, creator = await make_user()
    task = await service.create_task(TaskCreateRequest(title="t"), creator)

    await service.delete_task(task.id, creator)

    assert await task_store.find_by_id(task.id) is None


async def test_assign_sets_assignee(service, make_user):
    _, creator = await make_user()
    assignee, _ = await make_user(name="Dana")
    task = await service.create_task(TaskCreateRequest(title="t"), creator)

    assigned = await service.assign_task(task.id, assignee.id, creator)

    assert assigned.assigned_to == assignee.id
    assert assigned.assigned_to_name == "Dana"


async def test_assign_unknown_user_not_found(service, make_user):
    _, creator = await make_user()
    task = await service.create_task(TaskCreateRequest(title="t"), creator)

    with pytest.raises(ResourceNotFoundError) as exc_info:
        await service.assign_task(task.id, uuid4(), creator)
    assert exc_info.value.message == "User not found"


async def test_assign_by_non_creator_forbidden(service, make_user):
    _, creator = await make_user()
    other, other_req = await make_user()
    task = await service.create_task(TaskCreateRequest(title="t"), creator)

    with pytest.raises(ForbiddenError):
        await service.assign_task(task.id, other.id, other_req)
