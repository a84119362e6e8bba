"""Dependency Wiring — builds services per request from the DB session and collaborators.

Invariants:
    - Every service gets its stores and collaborators through its constructor
    - get_current_requester raises UnauthorizedError for missing, malformed,
      expired or tampered bearer tokens
    - The summarizer strategy is created once in the lifespan and read from app.state

Design Decisions:
    - Hasher and signer cached per process (lru_cache), like get_settings()
    - Tests override get_db and get_summarizer through app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.config import get_settings
from taskhub.core.authorization import Requester
from taskhub.core.errors import UnauthorizedError
from taskhub.core.ports import PasswordHasher, Summarizer, TokenSigner
from taskhub.infrastructure.database import get_db
from taskhub.infrastructure.password_hasher import BcryptPasswordHasher
from taskhub.infrastructure.token_signer import JWTTokenSigner
from taskhub.repositories.task_repository import TaskRepository
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.auth_service import AuthService
from taskhub.services.summary_service import SummaryService
from taskhub.services.task_mutation_service import TaskMutationService
from taskhub.services.task_query_service import TaskQueryService
from taskhub.services.user_admin_service import UserAdminService

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher(rounds=get_settings().password_hash_rounds)


@lru_cache
def get_token_signer() -> TokenSigner:
    settings = get_settings()
    return JWTTokenSigner(
        secret=settings.jwt_secret,
        expires_in_seconds=settings.jwt_expires_in_seconds,
        algorithm=settings.jwt_algorithm,
    )


def get_summarizer(request: Request) -> Summarizer:
    summarizer = getattr(request.app.state, "summarizer", None)
    if summarizer is None:
        raise RuntimeError("Summarizer not initialized")
    return summarizer


# ─── Services ────────────────────────────────────────────────────

def get_auth_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
) -> AuthService:
    return AuthService(
        UserRepository(db), hasher, signer,
        allow_admin_registration=get_settings().allow_admin_registration,
    )


def get_task_query_service(
    db: AsyncSession = Depends(get_db),
) -> TaskQueryService:
    return TaskQueryService(TaskRepository(db))


def get_task_mutation_service(
    db: AsyncSession = Depends(get_db),
) -> TaskMutationService:
    return TaskMutationService(TaskRepository(db), UserRepository(db))


def get_user_admin_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserAdminService:
    return UserAdminService(UserRepository(db), TaskRepository(db), hasher)


def get_summary_service(
    db: AsyncSession = Depends(get_db),
    summarizer: Summarizer = Depends(get_summarizer),
) -> SummaryService:
    return SummaryService(TaskRepository(db), summarizer)


# ─── Authentication ──────────────────────────────────────────────

async def get_current_requester(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(get_auth_service),
) -> Requester:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")
    return auth.authenticate(credentials.credentials)
