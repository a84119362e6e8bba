"""API test fixtures — FastAPI app over an in-memory database.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db overridden to use the test session factory
    - get_summarizer overridden with the offline fallback (lifespan does not
      run under ASGITransport)
"""

import pytest
from httpx import ASGITransport, AsyncClient

import taskhub.infrastructure.database as db_module
from taskhub.api.dependencies import get_password_hasher, get_summarizer
from taskhub.core.domain_types import Role
from taskhub.db.base import Base
from taskhub.db.session import create_engine_for_url, create_session_factory
from taskhub.infrastructure.database import DatabaseSessionManager, get_db
from taskhub.main import app
from taskhub.models.user import User
from taskhub.services.summarizers import LocalFallbackSummarizer

from tests.api.http_helpers import PASSWORD


@pytest.fixture
async def test_engine():
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB and summarizer dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_summarizer] = LocalFallbackSummarizer

    # Readiness check reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def register(client):
    """Register a user through the API, return (user_json, token)."""
    counter = {"n": 0}

    async def _register(name: str = "Test User", **extra):
        counter["n"] += 1
        body = {
            "name": name,
            "email": f"user{counter['n']}@example.com",
            "password": PASSWORD,
            **extra,
        }
        res = await client.post("/api/v1/auth/register", json=body)
        assert res.status_code == 201, res.text
        data = res.json()["data"]
        return data["user"], data["token"]

    return _register


@pytest.fixture
def admin(client, test_session_factory):
    """Insert an admin directly, log in through the API, return (user_json, token)."""
    async def _admin(email: str = "admin@example.com"):
        async with test_session_factory() as session:
            session.add(User(
                name="Admin",
                email=email,
                password_hash=get_password_hasher().hash(PASSWORD),
                role=Role.ADMIN.value,
            ))
            await session.commit()
        res = await client.post(
            "/api/v1/auth/login", json={"email": email, "password": PASSWORD},
        )
        assert res.status_code == 200, res.text
        data = res.json()["data"]
        return data["user"], data["token"]

    return _admin
