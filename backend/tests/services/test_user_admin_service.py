"""User Admin Service — admin-only management and self-service access.

Invariants:
    - list/create/delete require admin
    - Users read and update only themselves; their role changes are dropped
    - Email collisions -> ConflictError; admins cannot delete themselves
    - get_user_tasks returns the user's assigned tasks, newest first
"""

from uuid import uuid4

import pytest

from taskhub.core.domain_types import Role
from taskhub.core.errors import (
    BadRequestError, ConflictError, ForbiddenError, ResourceNotFoundError,
)
from taskhub.core.listing import PageRequest, build_user_list_query
from taskhub.core.patches import Address, UserPatch
from taskhub.models.task import Task
from taskhub.schemas.user import UserCreateRequest
from taskhub.services.user_admin_service import UserAdminService


@pytest.fixture
def service(user_store, task_store, hasher):
    return UserAdminService(user_store, task_store, hasher)


async def test_list_users_requires_admin(service, make_user):
    _, req = await make_user()
    with pytest.raises(ForbiddenError):
        await service.list_users(build_user_list_query(), req)


async def test_list_users_filters_by_role(service, make_user):
    _, admin = await make_user(role=Role.ADMIN)
    await make_user()
    await make_user()

    result = await service.list_users(build_user_list_query(role="user"), admin)

    assert result.pagination.total == 2
    assert all(u.role == Role.USER for u in result.users)


async def test_listed_users_have_no_password_hash(service, make_user):
    _, admin = await make_user(role=Role.ADMIN)
    result = await service.list_users(build_user_list_query(), admin)
    dumped = result.model_dump(by_alias=True)
    assert "passwordHash" not in dumped["users"][0]
    assert "password_hash" not in dumped["users"][0]


async def test_create_user_as_admin_with_role(service, make_user, user_store):
    _, admin = await make_user(role=Role.ADMIN)
    request = UserCreateRequest(
        name="New Admin", email="new@example.com", password="password123",
        role="admin", address={"city": "Porto", "country": ""},
    )

    created = await service.create_user(request, admin)

    assert created.role == Role.ADMIN
    assert created.city == "Porto"
    assert created.country is None
    assert await user_store.find_by_email("new@example.com") is not None


async def test_create_user_duplicate_email(service, make_user):
    existing, admin = await make_user(role=Role.ADMIN)
    request = UserCreateRequest(
        name="Dup", email=existing.email, password="password123",
    )
    with pytest.raises(ConflictError):
        await service.create_user(request, admin)


async def test_user_cannot_view_other_user(service, make_user):
    other, _ = await make_user()
    _, me = await make_user()
    with pytest.raises(ForbiddenError):
        await service.get_user_by_id(other.id, me)


async def test_get_unknown_user_not_found(service, make_user):
    _, admin = await make_user(role=Role.ADMIN)
    with pytest.raises(ResourceNotFoundError):
        await service.get_user_by_id(uuid4(), admin)


async def test_self_update_drops_role(service, make_user):
    me, req = await make_user()

    updated = await service.update_user(
        me.id, UserPatch(name="Renamed", role=Role.ADMIN), req,
    )

    assert updated.name == "Renamed"
    assert updated.role == Role.USER


async def test_admin_promotes_user(service, make_user):
    target, _ = await make_user()
    _, admin = await make_user(role=Role.ADMIN)

    updated = await service.update_user(target.id, UserPatch(role=Role.ADMIN), admin)

    assert updated.role == Role.ADMIN


async def test_update_address_flattened(service, make_user):
    me, req = await make_user()

    updated = await service.update_user(
        me.id, UserPatch(address=Address(address_line1="1 Main St", city="Braga")), req,
    )

    assert updated.address_line1 == "1 Main St"
    assert updated.city == "Braga"


async def test_update_email_in_use_conflicts(service, make_user):
    other, _ = await make_user()
    me, req = await make_user()

    with pytest.raises(ConflictError) as exc_info:
        await service.update_user(me.id, UserPatch(email=other.email), req)
    assert exc_info.value.message == "Email already in use"


async def test_update_same_email_is_not_a_conflict(service, make_user):
    me, req = await make_user()
    updated = await service.update_user(me.id, UserPatch(email=me.email), req)
    assert updated.email == me.email


async def test_update_other_user_forbidden(service, make_user):
    other, _ = await make_user()
    _, me = await make_user()
    with pytest.raises(ForbiddenError):
        await service.update_user(other.id, UserPatch(name="Nope"), me)


async def test_admin_cannot_delete_self(service, make_user):
    admin_user, admin = await make_user(role=Role.ADMIN)
    with pytest.raises(BadRequestError) as exc_info:
        await service.delete_user(admin_user.id, admin)
    assert exc_info.value.message == "Cannot delete your own account"


async def test_delete_requires_admin(service, make_user):
    other, _ = await make_user()
    _, me = await make_user()
    with pytest.raises(ForbiddenError):
        await service.delete_user(other.id, me)


async def test_admin_deletes_user(service, make_user, user_store):
    target, _ = await make_user()
    _, admin = await make_user(role=Role.ADMIN)

    await service.delete_user(target.id, admin)

    assert await user_store.find_by_id(target.id) is None


async def test_delete_unknown_user_not_found(service, make_user):
    _, admin = await make_user(role=Role.ADMIN)
    with pytest.raises(ResourceNotFoundError):
        await service.delete_user(uuid4(), admin)


async def test_get_user_tasks_only_assigned(service, task_store, make_user):
    me, req = await make_user()
    other, _ = await make_user()
    await task_store.insert(Task(title="mine", created_by=other.id, assigned_to=me.id))
    await task_store.insert(Task(title="created only", created_by=me.id))

    result = await service.get_user_tasks(me.id, PageRequest(1, 10), req)

    assert [t.title for t in result.tasks] == ["mine"]
    assert result.pagination.total == 1


async def test_get_user_tasks_of_other_user_forbidden(service, make_user):
    other, _ = await make_user()
    _, me = await make_user()
    with pytest.raises(ForbiddenError):
        await service.get_user_tasks(other.id, PageRequest(), me)
