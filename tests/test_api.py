# tests/test_api.py
"""HTTP surface tests: routers wired to an in-memory record store."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import base64
import json
import pytest
from fastapi.testclient import TestClient
from app.database import get_db
from app.dependencies import get_current_user
from app.main import app
from app.schemas.guard import GuardCreate, SessionUser
from app.services import guard_service
from app.services.rate_limiter import LoginAttemptLimiter

GUARD = SessionUser(id=1, email="guard@campus.mx", role="guard", full_name="Gate Guard", gate=1)
ADMIN = SessionUser(id=2, email="admin@campus.mx", role="admin", full_name="Admin")

VEHICLE = {"plate": "TNA1234", "student_id": "202161606", "student_name": "Ana Ruiz", "vehicle_type": "moto"}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: GUARD
    yield TestClient(app)
    app.dependency_overrides.clear()


def as_user(user):
    app.dependency_overrides[get_current_user] = lambda: user


class TestVehicles:
    def test_register_search_and_move(self, client):
        created = client.post("/api/v1/vehicles", json=VEHICLE)
        assert created.status_code == 201
        vehicle = created.json()
        assert vehicle["plate"] == "TNA-1234"
        assert vehicle["status"] == "outside"

        found = client.get("/api/v1/vehicles", params={"q": "202161606"})
        assert found.status_code == 200
        assert found.json()["id"] == vehicle["id"]

        moved = client.post("/api/v1/movements", json={"vehicle_id": vehicle["id"], "type": "entry"})
        assert moved.status_code == 201
        assert moved.json()["new_status"] == "inside"

        history = client.get(f"/api/v1/vehicles/{vehicle['id']}/movements").json()
        assert [m["type"] for m in history] == ["entry"]
        assert history[0]["guard_id"] == GUARD.id

    def test_validation_error_taxonomy(self, client):
        response = client.post("/api/v1/vehicles", json={**VEHICLE, "plate": "IOA-123"})
        assert response.status_code == 400
        assert response.json()["detail"]["reason"] == "excluded_letter"

        response = client.post("/api/v1/vehicles", json={**VEHICLE, "student_id": "2021"})
        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "student_id"

    def test_duplicate_plate_conflict(self, client):
        client.post("/api/v1/vehicles", json=VEHICLE)
        assert client.post("/api/v1/vehicles", json=VEHICLE).status_code == 409

    def test_photo_path_must_be_opaque(self, client):
        response = client.post("/api/v1/vehicles", json={**VEHICLE, "vehicle_photo_path": "/etc/passwd"})
        assert response.status_code == 422

    def test_not_found_and_blank(self, client):
        assert client.get("/api/v1/vehicles", params={"q": "TNA-9999"}).status_code == 404
        assert client.get("/api/v1/vehicles", params={"q": "  "}).status_code == 400
        assert client.get("/api/v1/vehicles/999").status_code == 404

    def test_student_vehicles(self, client):
        client.post("/api/v1/vehicles", json=VEHICLE)
        client.post("/api/v1/vehicles", json={**VEHICLE, "plate": "TNB555", "vehicle_type": "bici"})
        listed = client.get("/api/v1/vehicles/student/202161606").json()
        assert [v["plate"] for v in listed] == ["TNB-555", "TNA-1234"]

    def test_delete_requires_admin(self, client):
        vehicle_id = client.post("/api/v1/vehicles", json=VEHICLE).json()["id"]
        assert client.delete(f"/api/v1/vehicles/{vehicle_id}").status_code == 403
        as_user(ADMIN)
        assert client.delete(f"/api/v1/vehicles/{vehicle_id}").status_code == 204
        assert client.delete(f"/api/v1/vehicles/{vehicle_id}").status_code == 404

    def test_movement_for_unknown_vehicle(self, client):
        response = client.post("/api/v1/movements", json={"vehicle_id": 404, "type": "entry"})
        assert response.status_code == 404
        response = client.post("/api/v1/movements", json={"vehicle_id": 1, "type": "sideways"})
        assert response.status_code == 422


class TestLookup:
    def test_qr_resolve_decoded(self, client):
        client.post("/api/v1/vehicles", json=VEHICLE)
        raw = base64.b64encode(json.dumps({"matricula": "202161606", "action": "entry"}).encode()).decode()
        body = client.post("/api/v1/qr/resolve", json={"raw": raw}).json()
        assert body["decoded"] is True
        assert body["action"] == "entry"
        assert body["vehicle"]["plate"] == "TNA-1234"

    def test_qr_resolve_falls_back_to_raw_text(self, client):
        client.post("/api/v1/vehicles", json=VEHICLE)
        body = client.post("/api/v1/qr/resolve", json={"raw": " TNA-1234 "}).json()
        assert body["decoded"] is False
        assert body["search_term"] == "TNA-1234"
        assert body["vehicle"]["student_id"] == "202161606"

    def test_validate_and_format(self, client):
        body = client.post("/api/v1/validate/plate", json={"value": "tna1234"}).json()
        assert body == {"valid": True, "normalized": "TNA-1234", "reason": None, "message": None}

        body = client.post("/api/v1/validate/matricula", json={"value": "2021"}).json()
        assert body["valid"] is False
        assert body["reason"] == "too_short"

        assert client.post("/api/v1/format/plate", json={"value": "atna12345"}).json() == {"formatted": "TNA-1234"}


class TestAuthAndAdmin:
    def test_login_sets_session_cookie(self, client, session_factory, monkeypatch):
        monkeypatch.setattr("app.routers.auth.login_limiter", LoginAttemptLimiter(max_attempts=2))
        db = session_factory()
        guard_service.create_guard(db, GuardCreate(email="g@campus.mx", password="s3cret-pass",
                                                   full_name="Gate Guard", gate=4))
        db.close()

        bad = client.post("/api/v1/auth/login", json={"email": "g@campus.mx", "password": "nope"})
        assert bad.status_code == 401

        good = client.post("/api/v1/auth/login", json={"email": "G@campus.mx", "password": "s3cret-pass"})
        assert good.status_code == 200
        assert good.json()["user"]["gate"] == 4
        assert "session" in good.cookies

    def test_login_rate_limited(self, client, monkeypatch):
        monkeypatch.setattr("app.routers.auth.login_limiter", LoginAttemptLimiter(max_attempts=1))
        credentials = {"email": "g@campus.mx", "password": "nope"}
        assert client.post("/api/v1/auth/login", json=credentials).status_code == 401
        assert client.post("/api/v1/auth/login", json=credentials).status_code == 429

    def test_session_requires_token(self, session_factory):
        app.dependency_overrides.clear()
        assert TestClient(app).get("/api/v1/auth/session").status_code == 401

    def test_guard_management(self, client):
        assert client.get("/api/v1/admin/guards").status_code == 403
        as_user(ADMIN)
        created = client.post("/api/v1/admin/guards", json={
            "email": "new@campus.mx", "password": "s3cret-pass", "full_name": "New Guard", "gate": 30})
        assert created.status_code == 201
        assert created.json()["gate"] == 15
        guard_id = created.json()["id"]

        assert [g["email"] for g in client.get("/api/v1/admin/guards").json()] == ["new@campus.mx"]
        assert client.get(f"/api/v1/admin/guards/{guard_id}/movements").json() == []
        assert client.delete(f"/api/v1/admin/guards/{guard_id}").status_code == 204
        assert client.delete(f"/api/v1/admin/guards/{guard_id}").status_code == 404
