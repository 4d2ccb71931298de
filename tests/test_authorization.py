from __future__ import annotations

from httpx import AsyncClient

from app.features.permissions.dependencies import has_permission
from app.features.permissions.models import Permission, Role
from app.features.users.auth import create_access_token
from app.features.users.models import User


def test_user_without_role_has_no_permissions() -> None:
    user = User(id=1, email="nobody@example.com", name="Nobody", role=None)

    assert has_permission(user, "Read") is False


def test_role_grants_only_its_permissions() -> None:
    role = Role(name="Reader", permissions=[Permission(name="Read"), Permission(name="List")])
    user = User(id=1, email="reader@example.com", name="Reader", role=role)

    assert has_permission(user, "Read") is True
    assert has_permission(user, "Delete") is False


async def test_missing_token_is_unauthorized(async_client: AsyncClient) -> None:
    response = await async_client.get("/roles")

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


async def test_invalid_token_is_unauthorized(async_client: AsyncClient) -> None:
    response = await async_client.get("/roles", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


async def test_expired_token_is_unauthorized(async_client: AsyncClient, seed_identity) -> None:
    token = create_access_token(1, seed_identity["admin"]["email"], expires_minutes=-1)

    response = await async_client.get("/roles", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


async def test_reader_may_list_but_not_delete(
    async_client: AsyncClient,
    admin_headers: dict[str, str],
    reader_headers: dict[str, str],
) -> None:
    created = await async_client.post("/roles", json={"name": "Temp"}, headers=admin_headers)
    role_id = created.json()["data"]["id"]

    response = await async_client.get("/roles", headers=reader_headers)
    assert response.status_code == 200

    response = await async_client.delete(f"/roles/{role_id}", headers=reader_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Permission denied: Delete"

    # the handler never ran, so the role is still there
    response = await async_client.get(f"/roles/{role_id}", headers=reader_headers)
    assert response.status_code == 200


async def test_reader_may_not_create_or_update(
    async_client: AsyncClient, reader_headers: dict[str, str]
) -> None:
    response = await async_client.post("/roles", json={"name": "Sneaky"}, headers=reader_headers)
    assert response.status_code == 403

    response = await async_client.put("/roles/1/permissions", json={"permissionIds": []}, headers=reader_headers)
    assert response.status_code == 403


async def test_gate_passes_to_handler_with_permission(
    async_client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await async_client.delete("/contacts/999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Contact with ID [999] does not exist."
