"""Task ORM — units of work created by one user and optionally assigned to another.

Invariants:
    - status in {"pending", "in_progress", "completed"}, default "pending"
    - priority in {"low", "medium", "high"}, default "medium"
    - created_by is required; assigned_to is nullable
    - updated_at is stamped explicitly by every write (repository update())

Design Decisions:
    - No ForeignKey on created_by/assigned_to: deleting a user leaves tasks in
      place, referential cleanup is a store-side concern
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskhub.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default="medium", index=True,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
