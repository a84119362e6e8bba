"""Database Session Manager — pooled async sessions for request handlers.

Invariants:
    - A session that sees an exception is rolled back and closed
    - SQLAlchemy errors leave as DatabaseError (503); every other exception
      propagates unchanged
    - Unique-email violations never reach here: the Identity Store turns them
      into ConflictError, and tasks carry no unique constraints

Design Decisions:
    - One module-level manager, created by init_db() in the app lifespan
    - expire_on_commit=False so views stay readable after commit
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from taskhub.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: OperationalError is a DBAPIError is a SQLAlchemyError.
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (OperationalError, "Database unavailable", "connect"),
    (DBAPIError, "Statement rejected by database", "execute"),
    (SQLAlchemyError, "Unexpected database failure", "session"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for error_type, message, operation in _ERROR_MAP:
        if isinstance(exc, error_type):
            return DatabaseError(message, operation)
    return DatabaseError("Unexpected database failure", "session")


class DatabaseSessionManager:
    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = to_database_error(e)
            logger.error(
                "Database session failed",
                extra={
                    "event": "DB_SESSION_ERROR",
                    "operation": error.operation,
                    "error_type": type(e).__name__,
                },
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (DatabaseError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
