"""User Admin Service — account management and per-user task views.

Invariants:
    - list/create/delete are admin-only
    - get/update/get_user_tasks: admins anything, users only themselves
    - A non-admin's role change is dropped silently
    - Email change to an address held by another record -> ConflictError("Email already in use")
    - An admin cannot delete their own account (BadRequest)
    - Returned user data never includes the password hash
"""

import logging
from uuid import UUID

from taskhub.core.authorization import (
    Decision,
    Requester,
    enforce,
    is_self_deletion,
    user_create_policy,
    user_delete_policy,
    user_list_policy,
    user_tasks_policy,
    user_update_policy,
    user_view_policy,
)
from taskhub.core.domain_types import Role
from taskhub.core.errors import (
    BadRequestError, ConflictError, ResourceNotFoundError,
)
from taskhub.core.listing import PageRequest, UserListQuery, build_page_info
from taskhub.core.patches import UserPatch, is_set
from taskhub.core.ports import IdentityStore, PasswordHasher, TaskStore
from taskhub.models.user import User
from taskhub.schemas.common import PaginationMeta
from taskhub.schemas.task import TaskListResult, TaskResponse
from taskhub.schemas.user import (
    UserCreateRequest, UserListResult, UserResponse,
)
from taskhub.services.user_records import build_user, to_user_response

logger = logging.getLogger(__name__)


class UserAdminService:
    def __init__(
        self, users: IdentityStore, tasks: TaskStore, hasher: PasswordHasher,
    ):
        self.users = users
        self.tasks = tasks
        self.hasher = hasher

    async def list_users(
        self, query: UserListQuery, requester: Requester,
    ) -> UserListResult:
        self._enforce(user_list_policy(requester), requester, None, "USERS_LIST_DENIED")
        users = await self.users.list(query)
        total = await self.users.count(query.role)
        info = build_page_info(query.page, total)
        logger.info(
            "Users retrieved",
            extra={
                "event": "USERS_RETRIEVED",
                "requester_id": str(requester.id),
                "count": len(users),
                "total": total,
                "page": info.page,
            },
        )
        return UserListResult(
            users=[to_user_response(u) for u in users],
            pagination=PaginationMeta.from_page_info(info),
        )

    async def get_user_by_id(
        self, user_id: UUID, requester: Requester,
    ) -> UserResponse:
        user = await self._require_user(user_id)
        self._enforce(
            user_view_policy(requester, user_id), requester, user_id,
            "USER_ACCESS_DENIED",
        )
        return to_user_response(user)

    async def create_user(
        self, request: UserCreateRequest, requester: Requester,
    ) -> UserResponse:
        self._enforce(
            user_create_policy(requester), requester, None, "USER_CREATE_DENIED",
        )
        if await self.users.find_by_email(request.email):
            logger.warning(
                "User creation rejected: email exists",
                extra={"event": "USER_CREATION_FAILED", "reason": "email_exists"},
            )
            raise ConflictError("Email already registered")

        user = await self.users.insert(
            build_user(request, self.hasher, request.role or Role.USER),
        )
        logger.info(
            "User created",
            extra={
                "event": "USER_CREATED",
                "user_id": str(user.id),
                "requester_id": str(requester.id),
            },
        )
        return to_user_response(user)

    async def update_user(
        self, user_id: UUID, patch: UserPatch, requester: Requester,
    ) -> UserResponse:
        existing = await self._require_user(user_id)
        decision = self._enforce(
            user_update_policy(requester, user_id), requester, user_id,
            "USER_UPDATE_DENIED",
        )
        patch = patch.narrowed(decision.fields)

        if is_set(patch.email) and patch.email != existing.email:
            holder = await self.users.find_by_email(patch.email)
            if holder is not None and holder.id != user_id:
                logger.warning(
                    "User update rejected: email in use",
                    extra={
                        "event": "USER_UPDATE_FAILED",
                        "user_id": str(user_id),
                        "reason": "email_exists",
                    },
                )
                raise ConflictError("Email already in use")

        updated = await self.users.update(user_id, patch.to_columns())
        if updated is None:
            raise ResourceNotFoundError("User", str(user_id))
        logger.info(
            "User updated",
            extra={
                "event": "USER_UPDATED",
                "user_id": str(user_id),
                "requester_id": str(requester.id),
                "updated_fields": patch.present_fields(),
            },
        )
        return to_user_response(updated)

    async def delete_user(self, user_id: UUID, requester: Requester) -> None:
        self._enforce(
            user_delete_policy(requester), requester, user_id, "USER_DELETE_DENIED",
        )
        if is_self_deletion(requester, user_id):
            logger.warning(
                "User deletion rejected: self",
                extra={
                    "event": "USER_DELETE_FAILED",
                    "user_id": str(user_id),
                    "reason": "self_deletion",
                },
            )
            raise BadRequestError("Cannot delete your own account")

        await self._require_user(user_id)
        if not await self.users.delete(user_id):
            raise ResourceNotFoundError("User", str(user_id))
        logger.info(
            "User deleted",
            extra={
                "event": "USER_DELETED",
                "user_id": str(user_id),
                "requester_id": str(requester.id),
            },
        )

    async def get_user_tasks(
        self, user_id: UUID, page: PageRequest, requester: Requester,
    ) -> TaskListResult:
        """Tasks assigned to the user, newest first."""
        self._enforce(
            user_tasks_policy(requester, user_id), requester, user_id,
            "USER_TASKS_DENIED",
        )
        await self._require_user(user_id)

        views = await self.tasks.find_by_assignee(user_id, page)
        total = await self.tasks.count_by_assignee(user_id)
        info = build_page_info(page, total)
        logger.info(
            "User tasks retrieved",
            extra={
                "event": "USER_TASKS_RETRIEVED",
                "user_id": str(user_id),
                "requester_id": str(requester.id),
                "count": len(views),
                "total": total,
            },
        )
        return TaskListResult(
            tasks=[TaskResponse.from_view(v) for v in views],
            pagination=PaginationMeta.from_page_info(info),
        )

    # ─── Helpers ─────────────────────────────────────────────────

    async def _require_user(self, user_id: UUID) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    def _enforce(
        self,
        decision: Decision,
        requester: Requester,
        target_id: UUID | None,
        event: str,
    ) -> Decision:
        if not decision.allowed:
            logger.warning(
                "User operation denied",
                extra={
                    "event": event,
                    "user_id": str(target_id) if target_id else None,
                    "requester_id": str(requester.id),
                },
            )
        return enforce(decision, requester, target_id)
