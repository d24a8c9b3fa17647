"""Cross-tenant requests from a company admin never reach another company's data."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.requires_db


@pytest.fixture
async def role_b(tenants, make_role):
    return await make_role("YARD_CREW", ["EXPENSE_READ"], tenants.company_b.id)


async def test_other_company_role_is_invisible(client: AsyncClient, tenants, role_b) -> None:
    response = await client.get(f"/api/v1/roles/{role_b.id}", headers=tenants.admin_a.headers)
    assert response.status_code == 404


async def test_other_company_role_cannot_be_updated(
    client: AsyncClient, tenants, role_b
) -> None:
    response = await client.put(
        f"/api/v1/roles/{role_b.id}",
        json={"description": "hijacked"},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 403


async def test_other_company_role_cannot_be_deleted(
    client: AsyncClient, tenants, role_b
) -> None:
    response = await client.delete(f"/api/v1/roles/{role_b.id}", headers=tenants.admin_a.headers)
    assert response.status_code == 403
    still_there = await client.get(
        f"/api/v1/roles/{role_b.id}", headers=tenants.admin_b.headers
    )
    assert still_there.status_code == 200


async def test_cannot_create_role_in_other_company(client: AsyncClient, tenants) -> None:
    response = await client.post(
        "/api/v1/roles",
        json={
            "name": "INTRUDER",
            "display_name": "Intruder",
            "description": "Should not exist",
            "permissions": ["EXPENSE_READ"],
            "company_id": tenants.company_b.id,
        },
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 403
    assert response.json()["error"] == "TENANT_ACCESS_DENIED"


async def test_cannot_assign_other_company_role(client: AsyncClient, tenants, role_b) -> None:
    response = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.driver_a.id, "role_id": role_b.id},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 403
    assert response.json()["error"] == "TENANT_ACCESS_DENIED"


async def test_cannot_assign_to_other_company_user(
    client: AsyncClient, tenants, make_role
) -> None:
    role_a = await make_role("YARD_CREW", ["EXPENSE_READ"], tenants.company_a.id)
    response = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.driver_b.id, "role_id": role_a.id},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 403


async def test_cannot_list_other_company_user_roles(client: AsyncClient, tenants) -> None:
    response = await client.get(
        f"/api/v1/roles/user/{tenants.driver_b.id}", headers=tenants.admin_a.headers
    )
    assert response.status_code == 403


async def test_role_listing_excludes_other_company(client: AsyncClient, tenants, role_b) -> None:
    response = await client.get("/api/v1/roles", headers=tenants.admin_a.headers)
    names = [r["name"] for r in response.json()["data"]["items"]]
    assert "YARD_CREW" not in names
