"""Auth Routes — register, login, /me and bearer-token handling over HTTP."""

from tests.api.http_helpers import PASSWORD, auth_header


async def test_register_returns_201_with_token(client):
    res = await client.post("/api/v1/auth/register", json={
        "name": "Ana Silva", "email": "ana@example.com", "password": PASSWORD,
        "phoneNumber": "+351 900 000 000",
    })
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["email"] == "ana@example.com"
    assert user["phoneNumber"] == "+351 900 000 000"
    assert user["role"] == "user"
    assert "passwordHash" not in user
    assert body["data"]["token"]


async def test_register_duplicate_email_409(client, register):
    user, _ = await register()
    res = await client.post("/api/v1/auth/register", json={
        "name": "Again", "email": user["email"], "password": PASSWORD,
    })
    assert res.status_code == 409
    assert res.json()["error"]["message"] == "Email already registered"


async def test_register_validation_error_400(client):
    res = await client.post("/api/v1/auth/register", json={
        "name": "A", "email": "not-an-email", "password": "short",
    })
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert len(error["details"]) == 3


async def test_register_cannot_self_promote(client, register):
    user, _ = await register(role="admin")
    assert user["role"] == "user"


async def test_login_failures_share_message(client, register):
    user, _ = await register()
    unknown = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com", "password": PASSWORD,
    })
    wrong = await client.post("/api/v1/auth/login", json={
        "email": user["email"], "password": "not-the-password",
    })
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["error"]["message"] == wrong.json()["error"]["message"]


async def test_me_returns_profile(client, register):
    user, token = await register(name="Profile Owner")
    res = await client.get("/api/v1/auth/me", headers=auth_header(token))
    assert res.status_code == 200
    assert res.json()["data"]["id"] == user["id"]


async def test_missing_token_401(client):
    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "No token provided"


async def test_garbage_token_401(client):
    res = await client.get("/api/v1/auth/me", headers=auth_header("garbage"))
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Invalid or expired token"
