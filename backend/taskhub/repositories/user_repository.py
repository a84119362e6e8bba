"""Identity Store — persistence of user records.

Invariants:
    - email lookups are exact-match (case-sensitive as stored)
    - A unique-constraint violation on insert/update surfaces as ConflictError,
      same kind as the service-level pre-check
    - update() always stamps updated_at
    - list() orders by an allow-listed column with id as tie-breaker
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.domain_types import Role, SortOrder
from taskhub.core.errors import ConflictError
from taskhub.core.listing import UserListQuery
from taskhub.models.user import User

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "created_at": User.created_at,
    "name": User.name,
    "email": User.email,
}


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(User.email == email)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: UUID) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def insert(self, user: User) -> User:
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Duplicate email rejected by store",
                extra={"event": "USER_INSERT_CONFLICT"},
            )
            raise ConflictError("Email already registered")
        await self.db.refresh(user)
        return user

    async def list(self, query: UserListQuery) -> list[User]:
        sort_column = _SORT_COLUMNS[query.sort_column]
        if query.order == SortOrder.ASC:
            ordering = (sort_column.asc(), User.id.asc())
        else:
            ordering = (sort_column.desc(), User.id.desc())
        stmt = select(User)
        if query.role is not None:
            stmt = stmt.where(User.role == query.role.value)
        stmt = (
            stmt.order_by(*ordering)
            .limit(query.page.limit)
            .offset(query.page.offset)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count(self, role: Role | None = None) -> int:
        stmt = select(func.count()).select_from(User)
        if role is not None:
            stmt = stmt.where(User.role == role.value)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def update(self, user_id: UUID, columns: dict[str, Any]) -> User | None:
        values = {**columns, "updated_at": datetime.now(timezone.utc)}
        try:
            result = await self.db.execute(
                update(User).where(User.id == user_id).values(**values),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Duplicate email rejected by store",
                extra={"event": "USER_UPDATE_CONFLICT", "user_id": str(user_id)},
            )
            raise ConflictError("Email already in use")
        if result.rowcount == 0:
            return None
        return await self.find_by_id(user_id)

    async def delete(self, user_id: UUID) -> bool:
        result = await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        return result.rowcount > 0
