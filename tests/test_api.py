# tests/test_api.py
"""HTTP + WebSocket tests through the FastAPI app."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from parkki.database import get_db
from parkki.main import app
from parkki.services.broadcast_hub import broadcast_hub
from parkki.services.ingestion_service import IngestionCoordinator, get_ingestion_coordinator

EVENT = {"type": "motion", "timestamp": "2024-01-01T12:00:00Z", "confidence": 0.87}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    coordinator = IngestionCoordinator(session_factory, broadcast_hub)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ingestion_coordinator] = lambda: coordinator

    with patch("parkki.main.create_tables"), TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class TestSubmitEndpoint:
    def test_single_object_body(self, client):
        resp = client.post("/api/v1/cameras/cam1/events", json=EVENT)

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "success"
        assert body["accepted_count"] == 1
        assert len(body["event_ids"]) == 1

        camera = client.get("/api/v1/cameras/cam1").json()
        assert camera["status"] == "online"
        assert camera["last_event"]["summary"] == "Motion detected (87%)"
        assert camera["last_event"]["id"] == body["event_ids"][0]

    def test_batch_body(self, client):
        batch = [EVENT, {**EVENT, "type": "person", "confidence": 0.4}]
        resp = client.post("/api/v1/cameras/cam2/events", json=batch)

        assert resp.status_code == 200
        assert resp.json()["accepted_count"] == 2

        events = client.get("/api/v1/events", params={"camera_id": "cam2"}).json()
        assert [e["id"] for e in events] == list(reversed(resp.json()["event_ids"]))
        assert events[0]["timestamp"] == "2024-01-01T12:00:00Z"
        assert events[0]["received_at"].endswith("Z")

    def test_validation_error_is_422_with_field(self, client):
        resp = client.post("/api/v1/cameras/cam1/events", json={**EVENT, "confidence": 1.5})

        assert resp.status_code == 422
        assert resp.json()["detail"]["field"] == "events[0].confidence"
        assert client.get("/api/v1/events").json() == []
        assert client.get("/api/v1/cameras/cam1").status_code == 404

    def test_empty_batch_is_422(self, client):
        resp = client.post("/api/v1/cameras/cam1/events", json=[])
        assert resp.status_code == 422
        assert resp.json()["detail"]["field"] == "events"

    def test_storage_error_is_generic_500(self, client):
        with patch("parkki.services.ingestion_service.insert_event",
                   side_effect=OperationalError("INSERT", {}, Exception("disk I/O error at /var/db"))):
            resp = client.post("/api/v1/cameras/cam1/events", json=[EVENT, EVENT])

        assert resp.status_code == 500
        assert resp.json() == {"detail": "Database error"}
        assert client.get("/api/v1/events").json() == []


class TestCameraEndpoints:
    def test_register_and_list(self, client):
        resp = client.post("/api/v1/cameras", json={"id": "cam1", "name": "Entrance"})
        assert resp.status_code == 201
        assert resp.json()["status"] == "offline"
        assert resp.json()["last_event"] is None

        cameras = client.get("/api/v1/cameras").json()
        assert [c["id"] for c in cameras] == ["cam1"]

    def test_duplicate_registration_is_409(self, client):
        client.post("/api/v1/cameras", json={"id": "cam1"})
        assert client.post("/api/v1/cameras", json={"id": "cam1"}).status_code == 409

    def test_unknown_camera_is_404(self, client):
        assert client.get("/api/v1/cameras/nope").status_code == 404


class TestLiveStream:
    def test_subscriber_receives_committed_event(self, client):
        with client.websocket_connect("/api/v1/ws") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"

            resp = client.post("/api/v1/cameras/cam1/events", json=EVENT)
            message = ws.receive_json()

        assert message == {
            "camera_id": "cam1",
            "event_id": resp.json()["event_ids"][0],
            "event_type": "motion",
            "timestamp": "2024-01-01T12:00:00Z",
            "confidence": 0.87,
        }

    def test_rejected_batch_is_not_broadcast(self, client):
        with client.websocket_connect("/api/v1/events/stream") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"

            client.post("/api/v1/cameras/cam1/events", json={**EVENT, "confidence": 1.5})
            resp = client.post("/api/v1/cameras/cam1/events", json={**EVENT, "type": "person"})

            # First message on the socket is the accepted event, not the rejected one
            message = ws.receive_json()

        assert message["event_type"] == "person"
        assert message["event_id"] == resp.json()["event_ids"][0]


    def test_unprefixed_dashboard_path(self, client):
        with client.websocket_connect("/events") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"

            resp = client.post("/api/v1/cameras/cam1/events", json=EVENT)
            message = ws.receive_json()

        assert message["event_id"] == resp.json()["event_ids"][0]


class TestListEvents:
    def test_limit_caps_results(self, client):
        client.post("/api/v1/cameras/cam1/events", json=[EVENT, EVENT, EVENT])

        events = client.get("/api/v1/events", params={"limit": 2}).json()
        assert len(events) == 2

    @pytest.mark.parametrize("limit", [0, -1, 100000])
    def test_out_of_range_limit_is_422(self, client, limit):
        client.post("/api/v1/cameras/cam1/events", json=EVENT)

        resp = client.get("/api/v1/events", params={"limit": limit})
        assert resp.status_code == 422


class TestMisc:
    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert "subscribers" in body

    def test_root(self, client):
        assert client.get("/").json()["documentation"] == "/docs"
