import pytest
from httpx import AsyncClient


async def _admin_headers(client, register, update_user) -> dict:
    await register(username="admin", email="admin@x.com")
    await update_user("admin", roles=["ROLE_ADMIN", "ROLE_USER"])
    login = await client.post(
        "/auth/login", json={"identifier": "admin", "password": "Passw0rd!"}
    )
    return {"Authorization": f"Bearer {login.json()['access_token']}"}


@pytest.mark.asyncio
async def test_list_users_requires_admin(client: AsyncClient, register):
    registered = await register()

    response = await client.get(
        "/users", headers={"Authorization": f"Bearer {registered['access_token']}"}
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_list_users_paginates(client: AsyncClient, register, update_user):
    headers = await _admin_headers(client, register, update_user)
    await register(username="alice", email="alice@x.com")
    await register(username="bob", email="bob@x.com")

    first = await client.get("/users", params={"page": 0, "size": 2}, headers=headers)
    second = await client.get("/users", params={"page": 1, "size": 2}, headers=headers)

    assert first.status_code == 200
    assert first.json()["total"] == 3
    assert len(first.json()["items"]) == 2
    assert len(second.json()["items"]) == 1
    usernames = {u["username"] for u in first.json()["items"] + second.json()["items"]}
    assert usernames == {"admin", "alice", "bob"}


@pytest.mark.asyncio
async def test_get_user_by_id(client: AsyncClient, register, update_user):
    headers = await _admin_headers(client, register, update_user)
    alice = await register()

    found = await client.get(f"/users/{alice['user_id']}", headers=headers)
    missing = await client.get("/users/00000000-0000-0000-0000-000000000000", headers=headers)

    assert found.status_code == 200
    assert found.json()["username"] == "alice"
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.asyncio
async def test_admin_updates_roles(client: AsyncClient, register, update_user):
    headers = await _admin_headers(client, register, update_user)
    alice = await register()

    response = await client.patch(
        f"/users/{alice['user_id']}",
        json={"roles": ["ROLE_INSTRUCTOR", "ROLE_USER"]},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["roles"] == ["ROLE_INSTRUCTOR", "ROLE_USER"]

    forbidden_role = await client.patch(
        f"/users/{alice['user_id']}",
        json={"roles": ["ROLE_INTERNAL_SERVICE"]},
        headers=headers,
    )
    assert forbidden_role.status_code == 400
    assert forbidden_role.json()["error"]["code"] == "INVALID_ROLES"


@pytest.mark.asyncio
async def test_admin_deactivates_user(client: AsyncClient, register, update_user):
    """Soft delete disables login and revokes refresh tokens"""
    headers = await _admin_headers(client, register, update_user)
    alice = await register()

    response = await client.delete(f"/users/{alice['user_id']}", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "User deactivated successfully."

    refreshed = await client.post("/auth/refresh", json={"refresh_token": alice["refresh_token"]})
    assert refreshed.status_code == 401

    login = await client.post(
        "/auth/login", json={"identifier": "alice", "password": "Passw0rd!"}
    )
    assert login.status_code == 403
    assert login.json()["error"]["code"] == "USER_DISABLED"

    # Record is kept
    fetched = await client.get(f"/users/{alice['user_id']}", headers=headers)
    assert fetched.json()["enabled"] is False
