"""User Routes — admin management and self-service over HTTP."""

from tests.api.http_helpers import PASSWORD, auth_header


async def test_list_users_forbidden_for_user(client, register):
    _, token = await register()
    res = await client.get("/api/v1/users", headers=auth_header(token))
    assert res.status_code == 403


async def test_admin_lists_users_by_role(client, register, admin):
    await register()
    await register()
    _, admin_token = await admin()

    res = await client.get("/api/v1/users?role=admin", headers=auth_header(admin_token))

    data = res.json()["data"]
    assert [u["role"] for u in data["users"]] == ["admin"]
    assert data["pagination"]["total"] == 1


async def test_admin_creates_user_201(client, admin):
    _, admin_token = await admin()
    res = await client.post("/api/v1/users", json={
        "name": "Created", "email": "created@example.com", "password": PASSWORD,
        "role": "admin", "address": {"city": "Faro"},
    }, headers=auth_header(admin_token))
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["role"] == "admin"
    assert data["city"] == "Faro"


async def test_user_reads_self_but_not_others(client, register):
    me, token = await register()
    other, _ = await register()

    mine = await client.get(f"/api/v1/users/{me['id']}", headers=auth_header(token))
    theirs = await client.get(f"/api/v1/users/{other['id']}", headers=auth_header(token))

    assert mine.status_code == 200
    assert theirs.status_code == 403


async def test_self_update_ignores_role(client, register):
    me, token = await register()
    res = await client.put(
        f"/api/v1/users/{me['id']}", json={"name": "New Name", "role": "admin"},
        headers=auth_header(token),
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["name"] == "New Name"
    assert data["role"] == "user"


async def test_empty_update_400(client, register):
    me, token = await register()
    res = await client.put(
        f"/api/v1/users/{me['id']}", json={}, headers=auth_header(token),
    )
    assert res.status_code == 400


async def test_update_email_conflict_409(client, register):
    me, token = await register()
    other, _ = await register()
    res = await client.put(
        f"/api/v1/users/{me['id']}", json={"email": other["email"]},
        headers=auth_header(token),
    )
    assert res.status_code == 409


async def test_admin_cannot_delete_self(client, admin):
    admin_user, admin_token = await admin()
    res = await client.delete(
        f"/api/v1/users/{admin_user['id']}", headers=auth_header(admin_token),
    )
    assert res.status_code == 400


async def test_admin_deletes_user(client, register, admin):
    target, _ = await register()
    _, admin_token = await admin()

    res = await client.delete(
        f"/api/v1/users/{target['id']}", headers=auth_header(admin_token),
    )

    assert res.json() == {"success": True, "message": "User deleted successfully"}
    gone = await client.get(
        f"/api/v1/users/{target['id']}", headers=auth_header(admin_token),
    )
    assert gone.status_code == 404


async def test_user_tasks(client, register):
    me, token = await register()
    creator, creator_token = await register()
    await client.post(
        "/api/v1/tasks", json={"title": "for me", "assignedTo": me["id"]},
        headers=auth_header(creator_token),
    )

    res = await client.get(f"/api/v1/users/{me['id']}/tasks", headers=auth_header(token))

    data = res.json()["data"]
    assert [t["title"] for t in data["tasks"]] == ["for me"]
    assert data["pagination"]["total"] == 1


async def test_user_tasks_malformed_paging_falls_back(client, register):
    me, token = await register()
    res = await client.get(
        f"/api/v1/users/{me['id']}/tasks?page=--1&limit=-", headers=auth_header(token),
    )
    assert res.status_code == 200
    assert res.json()["data"]["pagination"]["page"] == 1
