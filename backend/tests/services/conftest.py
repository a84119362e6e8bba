"""Service test fixtures — in-memory SQLite stores plus real hasher/signer.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Stores are the production repositories bound to that database
    - make_user inserts accounts directly, bypassing the services under test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service tests
    - bcrypt at 4 rounds keeps hashing cheap without faking it
"""

import pytest

from taskhub.core.authorization import Requester
from taskhub.core.domain_types import Role
from taskhub.db.base import Base
from taskhub.db.session import create_engine_for_url, create_session_factory
from taskhub.infrastructure.password_hasher import BcryptPasswordHasher
from taskhub.infrastructure.token_signer import JWTTokenSigner
from taskhub.models.user import User
from taskhub.repositories.task_repository import TaskRepository
from taskhub.repositories.user_repository import UserRepository

TEST_SECRET = "service-test-secret-long-enough-for-hs256"


@pytest.fixture
async def test_engine():
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    async with create_session_factory(test_engine)() as session:
        yield session


@pytest.fixture
def user_store(test_db):
    return UserRepository(test_db)


@pytest.fixture
def task_store(test_db):
    return TaskRepository(test_db)


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def signer():
    return JWTTokenSigner(secret=TEST_SECRET, expires_in_seconds=3600)


@pytest.fixture
def make_user(user_store, hasher):
    """Insert a user and return (User, Requester)."""
    counter = {"n": 0}

    async def _make(role: Role = Role.USER, name: str | None = None):
        counter["n"] += 1
        n = counter["n"]
        user = await user_store.insert(User(
            name=name or f"User {n}",
            email=f"user{n}@example.com",
            password_hash=hasher.hash("password123"),
            role=role.value,
        ))
        return user, Requester(id=user.id, email=user.email, role=role)

    return _make
