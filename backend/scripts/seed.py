"""Development Seed — two accounts and five tasks for local testing.

Usage (from backend/):
    python -m scripts.seed

Invariants:
    - Writes straight through the ORM in one transaction; a failure leaves
      nothing behind
    - Passwords are hashed with the same hasher the API uses
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskhub.config import get_settings
from taskhub.core.domain_types import Role, TaskPriority, TaskStatus
from taskhub.core.ports import PasswordHasher
from taskhub.db.session import create_engine_for_url, create_session_factory
from taskhub.infrastructure.observability import setup_logging
from taskhub.infrastructure.password_hasher import BcryptPasswordHasher
from taskhub.models.task import Task
from taskhub.models.user import User

logger = logging.getLogger(__name__)

SEED_USERS = (
    ("Admin User", "admin@example.com", "admin123", Role.ADMIN),
    ("Regular User", "user@example.com", "user123", Role.USER),
)

# (title, description, status, priority, assignee email, creator email)
SEED_TASKS = (
    ("Set up database schema",
     "Create database tables and migrations for the task management system",
     TaskStatus.COMPLETED, TaskPriority.HIGH,
     "user@example.com", "admin@example.com"),
    ("Implement user authentication",
     "Add token-based authentication with login and register endpoints",
     TaskStatus.IN_PROGRESS, TaskPriority.HIGH,
     "admin@example.com", "admin@example.com"),
    ("Build task CRUD operations",
     "Create API endpoints for creating, reading, updating and deleting tasks",
     TaskStatus.PENDING, TaskPriority.MEDIUM,
     "user@example.com", "admin@example.com"),
    ("Design frontend interface",
     "Create a user-friendly interface for task management",
     TaskStatus.PENDING, TaskPriority.LOW,
     None, "user@example.com"),
    ("Add email notifications",
     "Send notifications for task assignments and due dates",
     TaskStatus.PENDING, TaskPriority.MEDIUM,
     "admin@example.com", "admin@example.com"),
)


async def seed_database(
    session_factory: async_sessionmaker[AsyncSession],
    hasher: PasswordHasher,
) -> tuple[list[User], list[Task]]:
    users = [
        User(
            name=name, email=email,
            password_hash=hasher.hash(password), role=role.value,
        )
        for name, email, password, role in SEED_USERS
    ]
    async with session_factory() as session:
        session.add_all(users)
        await session.flush()
        ids = {user.email: user.id for user in users}
        tasks = [
            Task(
                title=title, description=description,
                status=status.value, priority=priority.value,
                assigned_to=ids[assignee] if assignee else None,
                created_by=ids[creator],
            )
            for title, description, status, priority, assignee, creator in SEED_TASKS
        ]
        session.add_all(tasks)
        await session.commit()

    for user in users:
        logger.info(f"Created user: {user.email} ({user.role})")
    for task in tasks:
        logger.info(f"Created task: {task.title} ({task.status}, {task.priority})")
    return users, tasks


def print_summary(users: list[User], tasks: list[Task]) -> None:
    print("\nDatabase seeded successfully!")
    print("\nSummary:")
    print(f"- Created {len(users)} users")
    print(f"- Created {len(tasks)} tasks")
    print("\nSample login credentials:")
    for _, email, password, role in SEED_USERS:
        print(f"  {email} / {password} ({role.value})")
    print("\nNote: Default passwords are for development only. Change them in production!")


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine = create_engine_for_url(settings.database_url)
    try:
        users, tasks = await seed_database(
            create_session_factory(engine),
            BcryptPasswordHasher(rounds=settings.password_hash_rounds),
        )
    finally:
        await engine.dispose()
    print_summary(users, tasks)


if __name__ == "__main__":
    asyncio.run(main())
