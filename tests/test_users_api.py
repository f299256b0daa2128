"""Tests for user administration and employee profile endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from portfolio_cms.data.models import UserRole


@pytest.fixture
def admin(auth_headers) -> dict[str, str]:
    return auth_headers(UserRole.ADMIN)


def _me(client: TestClient, headers: dict[str, str]) -> dict:
    return client.get("/api/auth/me", headers=headers).json()


class TestUserAdministration:
    """Tests for /api/users."""

    def test_list_requires_staff(self, client: TestClient, auth_headers) -> None:
        assert client.get("/api/users").status_code == 401
        assert client.get("/api/users", headers=auth_headers(UserRole.CRAFTER)).status_code == 403

    def test_list_and_filter(self, client: TestClient, auth_headers, admin) -> None:
        auth_headers(UserRole.CRAFTER)
        auth_headers(UserRole.CRAFTER)

        everyone = client.get("/api/users", headers=admin).json()
        crafters = client.get("/api/users", params={"role": "CRAFTER"}, headers=admin).json()
        paged = client.get("/api/users", params={"limit": 2, "page": 2}, headers=admin).json()

        assert everyone["meta"]["total"] == 3
        assert crafters["meta"]["total"] == 2
        assert len(paged["data"]) == 1
        assert paged["meta"]["pages"] == 2
        assert all("password" not in user for user in everyone["data"])

    def test_role_stats(self, client: TestClient, auth_headers, admin) -> None:
        auth_headers(UserRole.FINANCE)

        counts = client.get("/api/users/stats/roles", headers=admin).json()

        assert counts["ADMIN"] == 1
        assert counts["FINANCE"] == 1
        assert counts["USER"] == 0

    def test_update_and_role_change(self, client: TestClient, auth_headers, admin) -> None:
        target_id = _me(client, auth_headers())["id"]

        renamed = client.patch(f"/api/users/{target_id}", json={"name": "Kai"}, headers=admin)
        promoted = client.patch(
            f"/api/users/{target_id}/role", json={"role": "CRAFTER"}, headers=admin
        )
        escalated = client.patch(
            f"/api/users/{target_id}/role", json={"role": "SUPER_ADMIN"}, headers=admin
        )

        assert renamed.json()["name"] == "Kai"
        assert promoted.json()["role"] == "CRAFTER"
        assert escalated.status_code == 403

    def test_deactivated_user_loses_access(self, client: TestClient, auth_headers, admin) -> None:
        headers = auth_headers()
        target_id = _me(client, headers)["id"]

        client.patch(f"/api/users/{target_id}", json={"is_active": False}, headers=admin)

        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_delete_user(self, client: TestClient, auth_headers, admin) -> None:
        target_id = _me(client, auth_headers())["id"]

        assert client.delete(f"/api/users/{target_id}", headers=admin).status_code == 204
        assert client.get(f"/api/users/{target_id}", headers=admin).status_code == 404

    def test_delete_blocked_by_authored_projects(
        self, client: TestClient, auth_headers, admin
    ) -> None:
        crafter = auth_headers(UserRole.CRAFTER)
        crafter_id = _me(client, crafter)["id"]
        client.post(
            "/api/projects",
            json={"title": "Shed", "description": "Small.", "category": "RESIDENTIAL"},
            headers=crafter,
        )

        response = client.delete(f"/api/users/{crafter_id}", headers=admin)

        assert response.status_code == 409
        assert "deactivate" in response.json()["message"]

    def test_cannot_delete_self(self, client: TestClient, admin) -> None:
        admin_id = _me(client, admin)["id"]

        assert client.delete(f"/api/users/{admin_id}", headers=admin).status_code == 400


class TestEmployeeProfiles:
    """Tests for /api/users/{id}/employee-profile and /api/employee-profiles."""

    def test_owner_and_staff_access(self, client: TestClient, auth_headers, admin) -> None:
        employee = auth_headers(UserRole.EMPLOYEE)
        employee_id = _me(client, employee)["id"]
        url = f"/api/users/{employee_id}/employee-profile"

        created = client.post(
            url,
            json={"employee_id": "E-7", "department": "Design", "salary": "5200.00"},
            headers=admin,
        )
        assert created.status_code == 201
        assert Decimal(created.json()["salary"]) == Decimal("5200")

        own = client.get(url, headers=employee)
        assert own.json()["employee_id"] == "E-7"

        other = client.get(url, headers=auth_headers())
        assert other.status_code == 403

        patched = client.patch(url, json={"phone": "555-0100"}, headers=admin)
        assert patched.json()["phone"] == "555-0100"

        duplicate = client.post(url, json={"employee_id": "E-8"}, headers=admin)
        assert duplicate.status_code == 409

        assert client.delete(url, headers=admin).status_code == 204
        assert client.get(url, headers=admin).status_code == 404

    def test_owner_cannot_write_own_profile(
        self, client: TestClient, auth_headers, admin
    ) -> None:
        user = auth_headers()
        url = f"/api/users/{_me(client, user)['id']}/employee-profile"

        created = client.post(
            url, json={"employee_id": "SELF-1", "salary": "99999999.00"}, headers=user
        )
        assert created.status_code == 403
        assert client.get(url, headers=user).status_code == 404

        client.post(url, json={"employee_id": "E-9", "salary": "3000"}, headers=admin)

        raised = client.patch(url, json={"salary": "99999999.00"}, headers=user)
        removed = client.delete(url, headers=user)

        assert raised.status_code == 403
        assert removed.status_code == 403
        assert Decimal(client.get(url, headers=user).json()["salary"]) == Decimal("3000")

    def test_finance_views(self, client: TestClient, auth_headers, admin) -> None:
        for number, salary in enumerate(("3000", "5000"), start=1):
            user_id = _me(client, auth_headers(UserRole.EMPLOYEE))["id"]
            client.post(
                f"/api/users/{user_id}/employee-profile",
                json={"employee_id": f"E-{number}", "department": "Design", "salary": salary},
                headers=admin,
            )
        finance = auth_headers(UserRole.FINANCE)

        assert client.get("/api/employee-profiles", headers=auth_headers()).status_code == 403
        listing = client.get("/api/employee-profiles", headers=finance).json()
        stats = client.get("/api/employee-profiles/stats", headers=finance).json()

        assert [p["employee_id"] for p in listing] == ["E-1", "E-2"]
        assert stats["salaries"]["headcount"] == 2
        assert Decimal(stats["salaries"]["total"]) == Decimal("8000")
        assert stats["salaries"]["average"] == pytest.approx(4000.0)
        assert stats["departments"] == [{"department": "Design", "headcount": 2}]
