"""Task Routes — listing, summary, CRUD and assignment.

Invariants:
    - Every route requires an authenticated requester
    - /summary is registered before /{task_id} so it is not parsed as an id
    - Listing query values are normalized in core/listing.py, not rejected here
      (except status/priority, which must be valid enum members)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from taskhub.api.dependencies import (
    get_current_requester,
    get_summary_service,
    get_task_mutation_service,
    get_task_query_service,
)
from taskhub.core.authorization import Requester
from taskhub.core.listing import build_task_list_query
from taskhub.schemas.common import MessageResponse, SuccessResponse
from taskhub.schemas.task import (
    TaskAssignRequest,
    TaskCreateRequest,
    TaskListResult,
    TaskResponse,
    TaskUpdateRequest,
)
from taskhub.services.summary_service import SummaryService
from taskhub.services.task_mutation_service import TaskMutationService
from taskhub.services.task_query_service import TaskQueryService

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])

SUMMARY_DEFAULT_LIMIT = 10
SUMMARY_MAX_LIMIT = 50


@router.get("", response_model=SuccessResponse[TaskListResult])
async def list_tasks(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    task_status: str | None = Query(None, alias="status"),
    priority: str | None = Query(None),
    assigned_to: UUID | None = Query(None, alias="assignedTo"),
    sort_by: str | None = Query(None, alias="sortBy"),
    order: str | None = Query(None),
    requester: Requester = Depends(get_current_requester),
    service: TaskQueryService = Depends(get_task_query_service),
):
    query = build_task_list_query(
        page=page, limit=limit, status=task_status, priority=priority,
        assigned_to=assigned_to, sort_by=sort_by, order=order,
    )
    return SuccessResponse(data=await service.list_tasks(query, requester))


@router.get("/summary", response_model=SuccessResponse[dict])
async def summarize_tasks(
    limit: int = Query(SUMMARY_DEFAULT_LIMIT, ge=1, le=SUMMARY_MAX_LIMIT),
    requester: Requester = Depends(get_current_requester),
    service: SummaryService = Depends(get_summary_service),
):
    """Natural-language digest of the newest tasks."""
    return SuccessResponse(data=await service.summarize_newest(limit))


@router.post(
    "", response_model=SuccessResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreateRequest,
    requester: Requester = Depends(get_current_requester),
    service: TaskMutationService = Depends(get_task_mutation_service),
):
    return SuccessResponse(data=await service.create_task(body, requester))


@router.get("/{task_id}", response_model=SuccessResponse[TaskResponse])
async def get_task(
    task_id: UUID,
    requester: Requester = Depends(get_current_requester),
    service: TaskQueryService = Depends(get_task_query_service),
):
    return SuccessResponse(data=await service.get_task_by_id(task_id, requester))


@router.put("/{task_id}", response_model=SuccessResponse[TaskResponse])
async def update_task(
    task_id: UUID,
    body: TaskUpdateRequest,
    requester: Requester = Depends(get_current_requester),
    service: TaskMutationService = Depends(get_task_mutation_service),
):
    updated = await service.update_task(task_id, body.to_patch(), requester)
    return SuccessResponse(data=updated)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: UUID,
    requester: Requester = Depends(get_current_requester),
    service: TaskMutationService = Depends(get_task_mutation_service),
):
    await service.delete_task(task_id, requester)
    return MessageResponse(message="Task deleted successfully")


@router.post("/{task_id}/assign", response_model=SuccessResponse[TaskResponse])
async def assign_task(
    task_id: UUID,
    body: TaskAssignRequest,
    requester: Requester = Depends(get_current_requester),
    service: TaskMutationService = Depends(get_task_mutation_service),
):
    assigned = await service.assign_task(task_id, body.user_id, requester)
    return SuccessResponse(data=assigned)
