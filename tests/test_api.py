"""
API Tests
=========

HTTP adapter over the engine, exercised through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from signal_heatmap import main


@pytest.fixture
def client():
    """Provide a client bound to a fresh engine."""
    main._engine = None
    with TestClient(main.app) as test_client:
        yield test_client
    main._engine = None


def _record(client, x, strength, **labels):
    body = {"position": {"x": x, "y": 0.0, "z": 0.0}, "strength": strength, **labels}
    return client.post("/samples", json=body)


class TestServiceEndpoints:
    """Tests for info, health and metrics."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "SignalHeatmap"
        assert response.json()["status"] == "Ready to map"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_metrics(self, client):
        data = client.get("/metrics").json()
        assert data["sample_count"] == 0
        assert data["dead_zone_count"] == 0


class TestRecordingFlow:
    """Tests for start / record / stop over HTTP."""

    def test_record_outside_session_is_not_accepted(self, client):
        response = _record(client, 0.0, -50)
        assert response.status_code == 200
        assert response.json() == {"accepted": False}

    def test_session(self, client):
        client.patch("/config", json={"interpolation_enabled": False, "smoothing_factor": 0.0})

        assert client.post("/recording/start").json()["started"] is True
        for x in (0.0, 0.3, 0.6):
            assert _record(client, x, -80, ssid="hall").json()["accepted"] is True

        live = client.get("/cells").json()
        assert len(live) == 3

        stopped = client.post("/recording/stop").json()
        assert stopped["stopped"] is True
        assert stopped["status"] == "Recorded 3 samples"
        assert stopped["statistics"]["total_samples"] == 3
        assert stopped["statistics"]["average_strength"] == -80

        zones = client.get("/dead-zones").json()
        assert len(zones) == 1
        assert zones[0]["member_count"] == 3
        assert zones[0]["center"]["x"] == pytest.approx(0.3)

        snapshot = client.get("/snapshot").json()
        assert snapshot["is_recording"] is False
        assert len(snapshot["cells"]) == 3
        assert snapshot["statistics"]["dead_zone_count"] == 1
        assert snapshot["statistics"]["quality_distribution"] == {"WEAK": 3}

    def test_invalid_record_body(self, client):
        client.post("/recording/start")
        response = client.post("/samples", json={"position": {"x": 0.0}, "strength": -50})
        assert response.status_code == 422

    def test_unquantizable_position_is_rejected(self, client):
        started = client.post("/recording/start").json()
        assert started["status"] == "Recording..."
        _record(client, 0.0, -50)

        assert _record(client, 1e308, -50).status_code == 422
        non_finite = b'{"position": {"x": NaN, "y": 0, "z": 0}, "strength": -50}'
        response = client.post(
            "/samples", content=non_finite, headers={"content-type": "application/json"}
        )
        assert response.status_code == 422

        stopped = client.post("/recording/stop").json()
        assert stopped["status"] == "Recorded 1 sample"
        assert client.get("/metrics").json()["sample_count"] == 1

    def test_clear(self, client):
        client.post("/recording/start")
        _record(client, 0.0, -50)
        client.post("/recording/stop")

        response = client.delete("/samples")
        assert response.json()["status"] == "Ready to map"
        assert client.get("/cells").json() == []
        assert client.get("/statistics").json()["total_samples"] == 0


class TestPersistenceEndpoints:
    """Tests for export / import over HTTP."""

    def test_export_then_import(self, client):
        client.post("/recording/start")
        _record(client, 0.0, -45, ssid="a", bssid="aa:01")
        _record(client, 0.9, -85)
        client.post("/recording/stop")

        exported = client.get("/samples/export")
        assert exported.status_code == 200
        assert exported.headers["content-type"].startswith("application/json")
        records = exported.json()
        assert [r["strength"] for r in records] == [-45, -85]

        client.delete("/samples")
        response = client.post("/samples/import", content=exported.content)
        assert response.status_code == 200
        assert response.json()["status"] == "Imported 2 samples"
        assert response.json()["statistics"]["total_samples"] == 2
        assert client.get("/samples/export").json() == records

    def test_malformed_import_is_rejected(self, client, sample_payload):
        client.post("/samples/import", content=sample_payload)

        response = client.post("/samples/import", content=b'[{"id": "x"}]')
        assert response.status_code == 400
        assert "error" in response.json()

        far = (
            b'[{"id": "f", "position": {"x": 1e308, "y": 0, "z": 0}, "strength": -50,'
            b' "timestamp": "2026-01-01T00:00:00Z"}]'
        )
        assert client.post("/samples/import", content=far).status_code == 400
        assert client.get("/statistics").json()["total_samples"] == 2


class TestConfigEndpoints:
    """Tests for configuration read / update."""

    def test_get_defaults(self, client):
        config = client.get("/config").json()
        assert config["cell_size"] == 0.3
        assert config["min_cluster_size"] == 3

    def test_patch_clamps(self, client):
        response = client.patch("/config", json={"smoothing_factor": 5, "cell_size": 0.5})
        assert response.status_code == 200
        assert response.json()["smoothing_factor"] == 1.0
        assert response.json()["cell_size"] == 0.5
        assert client.get("/config").json()["smoothing_factor"] == 1.0
