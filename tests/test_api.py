"""API endpoint tests using FastAPI TestClient."""

from datetime import datetime

from fastapi.testclient import TestClient

from walkin_queue.config import settings
from walkin_queue.core.security import is_past_staff_logout_time
from walkin_queue.main import app
from walkin_queue.models import QueueEntry, QueueStatus, ServingLog, Staff
from walkin_queue.services.category_service import category_service
from walkin_queue.utils.logger import logger
from walkin_queue.utils.office_time import office_today

from conftest import bearer, make_staff

QUEUE = "/api/v1/queue"
STAFF = "/api/v1/staff"


def _join(client, name, client_type, category_id, **extra):
    payload = {"clientName": name, "clientType": client_type, "categoryIds": [category_id]}
    payload.update(extra)
    return client.post(f"{QUEUE}/join", json=payload)


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestErrorHandling:
    def test_unhandled_error_returns_json_and_logs_traceback(self, client, monkeypatch):
        def broken_listing(db):
            raise ValueError("bad row {'id': 1}")

        monkeypatch.setattr(category_service, "list_categories", broken_listing)
        monkeypatch.setattr(settings, "debug", False)
        records = []
        sink_id = logger.add(lambda message: records.append(message.record), level="ERROR")
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/v1/categories")
        finally:
            logger.remove(sink_id)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
        logged = [r for r in records if "Unhandled exception on GET /api/v1/categories" in r["message"]]
        assert len(logged) == 1
        assert logged[0]["exception"] is not None
        assert logged[0]["exception"].type is ValueError



class TestAuth:
    def test_staff_login(self, client, staff_one):
        response = client.post(
            "/api/v1/auth/staff/login", json={"username": "alice", "password": "secret123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["staff"]["username"] == "alice"
        assert data["staff"]["lastSeenAt"] is not None

    def test_staff_login_wrong_password(self, client, staff_one):
        response = client.post(
            "/api/v1/auth/staff/login", json={"username": "alice", "password": "nope"}
        )
        assert response.status_code == 401

    def test_admin_cannot_use_staff_login(self, client, admin):
        response = client.post(
            "/api/v1/auth/staff/login", json={"username": "admin", "password": "secret123"}
        )
        assert response.status_code == 401

    def test_admin_login_and_verify(self, client, admin):
        response = client.post(
            "/api/v1/auth/admin/login", json={"username": "admin", "password": "secret123"}
        )
        assert response.status_code == 200

        token = response.json()["accessToken"]
        verify = client.get("/api/v1/auth/verify", headers={"Authorization": f"Bearer {token}"})
        assert verify.status_code == 200
        assert verify.json()["staff"]["role"] == "ADMIN"

    def test_unauthorized_access(self, client):
        assert client.get(f"{STAFF}/dashboard").status_code == 401
        bad = {"Authorization": "Bearer not-a-token"}
        assert client.get(f"{STAFF}/dashboard", headers=bad).status_code == 401

    def test_staff_cannot_use_admin_endpoints(self, client, staff_one):
        response = client.post("/api/v1/admin/queue/reset", headers=bearer(staff_one))
        assert response.status_code == 403

    def test_staff_sessions_end_at_logout_hour(self, client, staff_one, admin, monkeypatch):
        monkeypatch.setattr(settings, "staff_logout_hour", 0)

        assert client.get(f"{STAFF}/dashboard", headers=bearer(staff_one)).status_code == 401
        # Administrators are not logged out automatically
        assert client.get("/api/v1/auth/verify", headers=bearer(admin)).status_code == 200

    def test_logout_hour_boundary(self, monkeypatch):
        monkeypatch.setattr(settings, "staff_logout_hour", 18)
        # 09:59 and 10:00 UTC are 17:59 and 18:00 in Manila
        assert not is_past_staff_logout_time(datetime(2026, 1, 25, 9, 59))
        assert is_past_staff_logout_time(datetime(2026, 1, 25, 10, 0))


class TestPublicEndpoints:
    def test_list_categories(self, client, billing, records):
        response = client.get("/api/v1/categories")

        assert response.status_code == 200
        categories = response.json()["categories"]
        assert [c["name"] for c in categories] == ["Billing", "Records"]
        assert [s["name"] for s in categories[0]["subCategories"]] == ["Payment", "Refund"]

    def test_join(self, client, billing):
        response = _join(client, "Ana", "PWD", billing.id)

        assert response.status_code == 200
        data = response.json()
        entry = data["queueEntry"]
        prefix = office_today().strftime("%m%d%y")
        assert entry["queueNumber"] == f"{prefix}-0001"
        assert entry["status"] == "WAITING"
        assert entry["isPriority"] is True
        assert entry["category"]["name"] == "Billing"
        assert data["date"] == office_today().isoformat()

    def test_join_with_legacy_single_category(self, client, billing):
        payload = {"clientName": "Ana", "clientType": "REGULAR", "categoryId": billing.id}
        response = client.post(f"{QUEUE}/join", json=payload)

        assert response.status_code == 200
        assert response.json()["queueEntry"]["categoryIds"] == [billing.id]

    def test_join_validation_errors(self, client, billing):
        missing_name = _join(client, "", "REGULAR", billing.id)
        assert missing_name.status_code == 400
        assert missing_name.json()["detail"] == "Client name is required"

        bad_category = _join(client, "Ana", "REGULAR", 9999)
        assert bad_category.status_code == 400
        assert bad_category.json()["detail"] == "Invalid category"

    def test_lookup_and_people_ahead(self, client, billing):
        first = _join(client, "Ana", "REGULAR", billing.id).json()["queueEntry"]
        second = _join(client, "Ben", "REGULAR", billing.id).json()["queueEntry"]

        lookup = client.get(f"{QUEUE}/{second['queueNumber']}")
        assert lookup.status_code == 200
        assert lookup.json()["queueEntry"]["clientName"] == "Ben"

        ahead = client.get(f"{QUEUE}/{second['queueNumber']}/ahead")
        assert ahead.json() == {"peopleAhead": 1}
        assert client.get(f"{QUEUE}/{first['queueNumber']}/ahead").json() == {"peopleAhead": 0}

    def test_unknown_queue_number(self, client):
        response = client.get(f"{QUEUE}/010199-0001")
        assert response.status_code == 404
        assert response.json()["detail"] == "Queue entry not found"


class TestServingScenario:
    def test_end_to_end(self, client, test_db, billing, staff_one, staff_two, window_one):
        regular = _join(client, "Ana", "REGULAR", billing.id).json()["queueEntry"]
        senior = _join(client, "Ben", "SENIOR_CITIZEN", billing.id).json()["queueEntry"]

        dashboard = client.get(f"{STAFF}/dashboard", headers=bearer(staff_one))
        assert dashboard.status_code == 200
        data = dashboard.json()
        assert data["window"]["label"] == "Window 1"
        assert [e["id"] for e in data["queue"]] == [senior["id"], regular["id"]]

        claim = client.post(f"{STAFF}/serve/{senior['id']}", headers=bearer(staff_one))
        assert claim.status_code == 200
        assert claim.json()["queueEntry"]["status"] == "NOW_SERVING"
        assert claim.json()["queueEntry"]["windowId"] == window_one.id

        conflict = client.post(f"{STAFF}/serve/{senior['id']}", headers=bearer(staff_two))
        assert conflict.status_code == 409
        assert "already claimed" in conflict.json()["detail"]

        monitor = client.get(f"{QUEUE}/public/windows").json()["windows"]
        serving = {w["label"]: w["currentServing"] for w in monitor}
        assert serving["Window 1"]["queueNumber"] == senior["queueNumber"]
        assert serving["Window 2"] is None

        stats = client.get(f"{QUEUE}/public/stats").json()
        assert stats == {"waiting": 1, "serving": 1}

        complete = client.post(f"{STAFF}/complete/{senior['id']}", headers=bearer(staff_one))
        assert complete.status_code == 200
        assert complete.json()["servingLog"]["duration"] >= 0

        skip = client.post(f"{STAFF}/skip/{regular['id']}", headers=bearer(staff_two))
        assert skip.status_code == 200
        assert skip.json()["queueEntry"]["status"] == "SKIPPED"

        again = client.post(f"{STAFF}/skip/{regular['id']}", headers=bearer(staff_two))
        assert again.status_code == 400
        assert again.json()["detail"] == "Entry already skipped"

        stats = client.get(f"{STAFF}/dashboard", headers=bearer(staff_one)).json()["stats"]
        assert stats == {"totalServed": 1, "totalSkipped": 0}

        test_db.expire_all()
        assert test_db.get(QueueEntry, senior["id"]).status == QueueStatus.SERVED
        assert test_db.query(ServingLog).count() == 1

    def test_serve_without_window(self, client, test_db, billing):
        staff = make_staff(test_db, "dave")
        entry = _join(client, "Ana", "REGULAR", billing.id).json()["queueEntry"]

        response = client.post(f"{STAFF}/serve/{entry['id']}", headers=bearer(staff))

        assert response.status_code == 400
        assert response.json()["detail"] == "No active window assignment"

    def test_assign_and_release_window(self, client, test_db, window_two):
        staff = make_staff(test_db, "dave")
        headers = bearer(staff)

        assigned = client.post(
            f"{STAFF}/assign-window", json={"windowId": window_two.id}, headers=headers
        )
        assert assigned.status_code == 200
        assert assigned.json()["assignment"]["window"]["label"] == "Window 2"

        missing = client.post(f"{STAFF}/assign-window", json={"windowId": 999}, headers=headers)
        assert missing.status_code == 400

        released = client.post(f"{STAFF}/assign-window", json={"windowId": None}, headers=headers)
        assert released.status_code == 200
        assert released.json()["assignment"] is None
        assert client.get(f"{STAFF}/dashboard", headers=headers).json()["window"] is None

    def test_logout_clears_online_indicator(self, client, test_db, staff_one):
        headers = bearer(staff_one)
        client.get(f"{STAFF}/dashboard", headers=headers)
        test_db.expire_all()
        assert test_db.get(Staff, staff_one.id).last_seen_at is not None

        assert client.post(f"{STAFF}/logout", headers=headers).json() == {"success": True}
        test_db.expire_all()
        assert test_db.get(Staff, staff_one.id).last_seen_at is None


class TestAdminEndpoints:
    def test_reset_and_reconcile(self, client, billing, admin):
        _join(client, "Ana", "REGULAR", billing.id)
        headers = bearer(admin)

        reconcile = client.post("/api/v1/admin/queue/reconcile", headers=headers)
        assert reconcile.json() == {"resolved": 0}

        reset = client.post("/api/v1/admin/queue/reset", headers=headers)
        assert reset.status_code == 200
        assert reset.json() == {"deleted": 1}

        rejoined = _join(client, "Ben", "REGULAR", billing.id).json()["queueEntry"]
        assert rejoined["queueNumber"].endswith("-0001")
