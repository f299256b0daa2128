"""Tests for health, contact, newsletter and settings endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from portfolio_cms.data.models import UserRole


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}


class TestContact:
    """Tests for /api/contact."""

    def test_public_submit_and_staff_triage(self, client: TestClient, auth_headers) -> None:
        admin = auth_headers(UserRole.ADMIN)
        submitted = client.post(
            "/api/contact",
            json={
                "name": "Grace",
                "email": "grace@example.com",
                "subject": "Extension",
                "message": "Could you design a rear extension?",
            },
        )
        assert submitted.status_code == 201
        inquiry_id = submitted.json()["id"]

        assert client.get("/api/contact").status_code == 401
        assert client.get("/api/contact", headers=auth_headers()).status_code == 403

        unread = client.get("/api/contact", params={"unread_only": True}, headers=admin).json()
        assert unread["meta"]["total"] == 1

        replied = client.post(f"/api/contact/{inquiry_id}/replied", headers=admin).json()
        assert replied["is_read"] is True
        assert replied["is_replied"] is True

        assert client.delete(f"/api/contact/{inquiry_id}", headers=admin).status_code == 204
        missing = client.post(f"/api/contact/{inquiry_id}/read", headers=admin)
        assert missing.status_code == 404

    def test_submit_validates_email(self, client: TestClient) -> None:
        response = client.post(
            "/api/contact",
            json={"name": "G", "email": "nope", "subject": "s", "message": "m"},
        )

        assert response.status_code == 422


class TestNewsletter:
    """Tests for /api/newsletter."""

    def test_subscribe_flow(self, client: TestClient, auth_headers) -> None:
        first = client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})
        again = client.post("/api/newsletter/subscribe", json={"email": "Reader@example.com"})
        assert first.json()["id"] == again.json()["id"]

        left = client.post("/api/newsletter/unsubscribe", json={"email": "reader@example.com"})
        assert left.json()["is_active"] is False

        admin = auth_headers(UserRole.ADMIN)
        stats = client.get("/api/newsletter/stats", headers=admin).json()
        assert stats == {"active": 0, "inactive": 1, "total": 1}
        assert client.get("/api/newsletter", headers=admin).json() == []
        everyone = client.get("/api/newsletter", params={"active_only": False}, headers=admin)
        assert len(everyone.json()) == 1

    def test_unsubscribe_unknown(self, client: TestClient) -> None:
        response = client.post("/api/newsletter/unsubscribe", json={"email": "ghost@example.com"})

        assert response.status_code == 404


class TestSettings:
    """Tests for /api/settings."""

    def test_settings_crud(self, client: TestClient, auth_headers) -> None:
        admin = auth_headers(UserRole.ADMIN)

        denied = client.put("/api/settings/site.title", json={"value": "Studio"})
        assert denied.status_code == 401

        client.put("/api/settings/site.title", json={"value": "Studio"}, headers=admin)
        updated = client.put(
            "/api/settings/site.title",
            json={"value": "Atelier", "description": "Shown in the header"},
            headers=admin,
        )
        assert updated.status_code == 200

        assert client.get("/api/settings").json() == {"site.title": "Atelier"}
        single = client.get("/api/settings/site.title").json()
        assert single["description"] == "Shown in the header"

        assert client.delete("/api/settings/site.title", headers=admin).status_code == 204
        assert client.get("/api/settings/site.title").status_code == 404
