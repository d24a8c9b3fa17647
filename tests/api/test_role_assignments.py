"""Role assignment API and its effect on effective permissions."""

from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.shared.utils.datetime import utc_now

pytestmark = pytest.mark.requires_db


async def _audit_logs_status(client: AsyncClient, account) -> int:
    """Status of GET /audit-logs, which needs AUDIT_LOG_VIEW (managers lack it by default)."""
    response = await client.get("/api/v1/audit-logs", headers=account.headers)
    return response.status_code


async def test_assign_and_list(client: AsyncClient, tenants, make_role) -> None:
    role = await make_role("PLANNER", ["REPORT_VIEW"], tenants.company_a.id)
    response = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.driver_a.id, "role_id": role.id},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 201
    assignment = response.json()["data"]
    assert assignment["is_active"] is True
    assert assignment["assigned_by"] == tenants.admin_a.id
    assert assignment["expires_at"] is None

    listed = await client.get(
        f"/api/v1/roles/user/{tenants.driver_a.id}", headers=tenants.admin_a.headers
    )
    assert listed.status_code == 200
    items = listed.json()["data"]
    assert [i["role_id"] for i in items] == [role.id]
    assert items[0]["role"]["name"] == "PLANNER"


async def test_duplicate_assignment_conflicts(client: AsyncClient, tenants, make_role) -> None:
    role = await make_role("PLANNER", ["REPORT_VIEW"], tenants.company_a.id)
    body = {"user_id": tenants.driver_a.id, "role_id": role.id}
    first = await client.post("/api/v1/roles/assign", json=body, headers=tenants.admin_a.headers)
    assert first.status_code == 201
    second = await client.post("/api/v1/roles/assign", json=body, headers=tenants.admin_a.headers)
    assert second.status_code == 409
    assert second.json()["error"] == "DUPLICATE_ASSIGNMENT"


async def test_assigned_role_grants_permission_immediately(
    client: AsyncClient, tenants, make_role
) -> None:
    """Assigning and revoking take effect on the very next request."""
    role = await make_role("AUDITOR", ["AUDIT_LOG_VIEW"], tenants.company_a.id)
    assert await _audit_logs_status(client, tenants.manager_a) == 403

    assigned = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.manager_a.id, "role_id": role.id},
        headers=tenants.admin_a.headers,
    )
    assert assigned.status_code == 201
    assert await _audit_logs_status(client, tenants.manager_a) == 200

    revoked = await client.delete(
        f"/api/v1/roles/assign/{tenants.manager_a.id}/{role.id}",
        headers=tenants.admin_a.headers,
    )
    assert revoked.status_code == 200
    assert revoked.json() == {
        "success": True,
        "data": None,
        "message": "Role revoked successfully",
    }
    assert await _audit_logs_status(client, tenants.manager_a) == 403


async def test_expired_assignment_grants_nothing(client: AsyncClient, tenants, make_role) -> None:
    role = await make_role("AUDITOR", ["AUDIT_LOG_VIEW"], tenants.company_a.id)
    past = (utc_now() - timedelta(minutes=5)).isoformat()
    response = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.manager_a.id, "role_id": role.id, "expires_at": past},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 201

    denied = await client.get("/api/v1/audit-logs", headers=tenants.manager_a.headers)
    assert denied.status_code == 403
    assert denied.json()["details"]["missing"] == ["AUDIT_LOG_VIEW"]

    active = await client.get(
        f"/api/v1/roles/user/{tenants.manager_a.id}", headers=tenants.admin_a.headers
    )
    assert active.json()["data"] == []
    history = await client.get(
        f"/api/v1/roles/user/{tenants.manager_a.id}",
        params={"include_history": "true"},
        headers=tenants.admin_a.headers,
    )
    assert len(history.json()["data"]) == 1


async def test_expired_pair_can_be_assigned_again(client: AsyncClient, tenants, make_role) -> None:
    role = await make_role("AUDITOR", ["AUDIT_LOG_VIEW"], tenants.company_a.id)
    past = (utc_now() - timedelta(minutes=5)).isoformat()
    body = {"user_id": tenants.manager_a.id, "role_id": role.id}
    await client.post(
        "/api/v1/roles/assign", json={**body, "expires_at": past}, headers=tenants.admin_a.headers
    )
    again = await client.post("/api/v1/roles/assign", json=body, headers=tenants.admin_a.headers)
    assert again.status_code == 201
    assert await _audit_logs_status(client, tenants.manager_a) == 200


async def test_future_expiry_grants_until_then(client: AsyncClient, tenants, make_role) -> None:
    role = await make_role("AUDITOR", ["AUDIT_LOG_VIEW"], tenants.company_a.id)
    future = (utc_now() + timedelta(days=1)).isoformat()
    response = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.manager_a.id, "role_id": role.id, "expires_at": future},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["expires_at"] is not None
    assert await _audit_logs_status(client, tenants.manager_a) == 200


async def test_assign_multiple_replaces_previous_set(
    client: AsyncClient, tenants, make_role, assignment_rows
) -> None:
    """Two successive replacements leave exactly the second set active."""
    r1 = await make_role("ROLE_ONE", ["REPORT_VIEW"], tenants.company_a.id)
    r2 = await make_role("ROLE_TWO", ["REPORT_EXPORT"], tenants.company_a.id)
    r3 = await make_role("ROLE_THREE", ["AUDIT_LOG_VIEW"], tenants.company_a.id)

    first = await client.post(
        "/api/v1/roles/assign-multiple",
        json={"user_id": tenants.driver_a.id, "role_ids": [r1.id, r2.id]},
        headers=tenants.admin_a.headers,
    )
    assert first.status_code == 201
    assert len(first.json()["data"]) == 2

    second = await client.post(
        "/api/v1/roles/assign-multiple",
        json={"user_id": tenants.driver_a.id, "role_ids": [r3.id]},
        headers=tenants.admin_a.headers,
    )
    assert second.status_code == 201

    rows = await assignment_rows(tenants.driver_a.id)
    active = [r for r in rows if r.is_active]
    assert [r.role_id for r in active] == [r3.id]
    assert len(rows) == 3

    assert await _audit_logs_status(client, tenants.driver_a) == 200


async def test_assign_multiple_twice_with_same_role(
    client: AsyncClient, tenants, make_role, assignment_rows
) -> None:
    role = await make_role("ROLE_ONE", ["REPORT_VIEW"], tenants.company_a.id)
    body = {"user_id": tenants.driver_a.id, "role_ids": [role.id]}
    for _ in range(2):
        response = await client.post(
            "/api/v1/roles/assign-multiple", json=body, headers=tenants.admin_a.headers
        )
        assert response.status_code == 201
    active = [r for r in await assignment_rows(tenants.driver_a.id) if r.is_active]
    assert len(active) == 1


async def test_assign_multiple_is_all_or_nothing(
    client: AsyncClient, tenants, make_role, assignment_rows
) -> None:
    kept = await make_role("ROLE_ONE", ["REPORT_VIEW"], tenants.company_a.id)
    await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.driver_a.id, "role_id": kept.id},
        headers=tenants.admin_a.headers,
    )
    response = await client.post(
        "/api/v1/roles/assign-multiple",
        json={"user_id": tenants.driver_a.id, "role_ids": [kept.id, "missing-role"]},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 404
    active = [r for r in await assignment_rows(tenants.driver_a.id) if r.is_active]
    assert [r.role_id for r in active] == [kept.id]


async def test_admin_cannot_assign_system_role(client: AsyncClient, tenants, system_roles) -> None:
    response = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.driver_a.id, "role_id": system_roles["SYSTEM_ADMIN"].id},
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_revoke_unknown_assignment_is_not_found(
    client: AsyncClient, tenants, make_role
) -> None:
    role = await make_role("PLANNER", ["REPORT_VIEW"], tenants.company_a.id)
    response = await client.delete(
        f"/api/v1/roles/assign/{tenants.driver_a.id}/{role.id}",
        headers=tenants.admin_a.headers,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_role_permission_edit_reaches_assigned_users(
    client: AsyncClient, tenants, make_role
) -> None:
    """Editing a role's tokens evicts cached sets of everyone holding it."""
    role = await make_role("PLANNER", ["REPORT_VIEW"], tenants.company_a.id)
    await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.manager_a.id, "role_id": role.id},
        headers=tenants.admin_a.headers,
    )
    assert await _audit_logs_status(client, tenants.manager_a) == 403

    updated = await client.put(
        f"/api/v1/roles/{role.id}",
        json={"permissions": ["REPORT_VIEW", "AUDIT_LOG_VIEW"]},
        headers=tenants.admin_a.headers,
    )
    assert updated.status_code == 200
    assert await _audit_logs_status(client, tenants.manager_a) == 200


async def test_revoke_is_committed_before_the_response_is_sent(
    client: AsyncClient, tenants, make_role, assignment_rows
) -> None:
    """By the time the last body chunk goes out, the revoked row is already inactive."""
    role = await make_role("AUDITOR", ["AUDIT_LOG_VIEW"], tenants.company_a.id)
    assigned = await client.post(
        "/api/v1/roles/assign",
        json={"user_id": tenants.manager_a.id, "role_id": role.id},
        headers=tenants.admin_a.headers,
    )
    assert assigned.status_code == 201

    seen_at_send: list[list[bool]] = []

    async def recording_app(scope, receive, send):
        async def send_and_record(message):
            if message["type"] == "http.response.body" and not message.get("more_body"):
                rows = await assignment_rows(tenants.manager_a.id)
                seen_at_send.append([row.is_active for row in rows])
            await send(message)

        await app(scope, receive, send_and_record)

    transport = ASGITransport(app=recording_app)
    async with AsyncClient(transport=transport, base_url="http://test") as raw_client:
        revoked = await raw_client.delete(
            f"/api/v1/roles/assign/{tenants.manager_a.id}/{role.id}",
            headers=tenants.admin_a.headers,
        )

    assert revoked.status_code == 200
    assert seen_at_send == [[False]]
    assert await _audit_logs_status(client, tenants.manager_a) == 403
