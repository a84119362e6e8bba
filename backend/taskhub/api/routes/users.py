"""User Routes — account administration and per-user task lists.

Invariants:
    - list/create/delete are admin-only (enforced in UserAdminService)
    - get/update/tasks: admins anything, users only themselves
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from taskhub.api.dependencies import get_current_requester, get_user_admin_service
from taskhub.core.authorization import Requester
from taskhub.core.listing import PageRequest, build_user_list_query
from taskhub.schemas.common import MessageResponse, SuccessResponse
from taskhub.schemas.task import TaskListResult
from taskhub.schemas.user import (
    UserCreateRequest,
    UserListResult,
    UserResponse,
    UserUpdateRequest,
)
from taskhub.services.user_admin_service import UserAdminService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=SuccessResponse[UserListResult])
async def list_users(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    role: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    order: str | None = Query(None),
    requester: Requester = Depends(get_current_requester),
    service: UserAdminService = Depends(get_user_admin_service),
):
    query = build_user_list_query(
        page=page, limit=limit, role=role, sort_by=sort_by, order=order,
    )
    return SuccessResponse(data=await service.list_users(query, requester))


@router.post(
    "", response_model=SuccessResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreateRequest,
    requester: Requester = Depends(get_current_requester),
    service: UserAdminService = Depends(get_user_admin_service),
):
    return SuccessResponse(data=await service.create_user(body, requester))


@router.get("/{user_id}", response_model=SuccessResponse[UserResponse])
async def get_user(
    user_id: UUID,
    requester: Requester = Depends(get_current_requester),
    service: UserAdminService = Depends(get_user_admin_service),
):
    return SuccessResponse(data=await service.get_user_by_id(user_id, requester))


@router.put("/{user_id}", response_model=SuccessResponse[UserResponse])
async def update_user(
    user_id: UUID,
    body: UserUpdateRequest,
    requester: Requester = Depends(get_current_requester),
    service: UserAdminService = Depends(get_user_admin_service),
):
    updated = await service.update_user(user_id, body.to_patch(), requester)
    return SuccessResponse(data=updated)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    requester: Requester = Depends(get_current_requester),
    service: UserAdminService = Depends(get_user_admin_service),
):
    await service.delete_user(user_id, requester)
    return MessageResponse(message="User deleted successfully")


@router.get("/{user_id}/tasks", response_model=SuccessResponse[TaskListResult])
async def get_user_tasks(
    user_id: UUID,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    requester: Requester = Depends(get_current_requester),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """Tasks assigned to the user, newest first."""
    result = await service.get_user_tasks(
        user_id, PageRequest.from_raw(page, limit), requester,
    )
    return SuccessResponse(data=result)
