"""Ports — collaborator interfaces the services depend on.

Invariants:
    - Services receive concrete implementations through their constructors
    - Nothing here performs IO; these are structural types only

Design Decisions:
    - typing.Protocol over ABCs: repositories and test doubles satisfy the
      contract structurally, no registration or inheritance required
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from taskhub.core.domain_types import Role
    from taskhub.core.listing import PageRequest, TaskListQuery, UserListQuery
    from taskhub.models.task import Task
    from taskhub.models.user import User
    from taskhub.repositories.task_repository import TaskView


class IdentityStore(Protocol):
    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_id(self, user_id: UUID) -> User | None: ...

    async def insert(self, user: User) -> User: ...

    async def list(self, query: UserListQuery) -> list[User]: ...

    async def count(self, role: Role | None = None) -> int: ...

    async def update(self, user_id: UUID, columns: dict[str, Any]) -> User | None: ...

    async def delete(self, user_id: UUID) -> bool: ...


class TaskStore(Protocol):
    async def find_by_id(self, task_id: UUID) -> TaskView | None: ...

    async def list(self, query: TaskListQuery) -> list[TaskView]: ...

    async def count(self, query: TaskListQuery) -> int: ...

    async def insert(self, task: Task) -> TaskView: ...

    async def update(self, task_id: UUID, columns: dict[str, Any]) -> TaskView | None: ...

    async def delete(self, task_id: UUID) -> bool: ...

    async def find_by_assignee(
        self, user_id: UUID, page: PageRequest,
    ) -> list[TaskView]: ...

    async def count_by_assignee(self, user_id: UUID) -> int: ...

    async def find_newest(self, limit: int) -> list[Task]: ...


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str: ...

    def verify(self, plaintext: str, hashed: str) -> bool: ...


class TokenSigner(Protocol):
    def sign(self, payload: dict[str, Any]) -> str: ...

    def verify(self, token: str) -> dict[str, Any]: ...


class Summarizer(Protocol):
    """Turns a numbered task list into a short status overview."""
    async def summarize(self, text: str) -> str: ...
