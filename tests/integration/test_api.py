"""
Integration tests for API endpoints (api/main.py)
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from api.main import app, get_exporter
from core.exporter import ExporterConfig, PromptExporter


@pytest.fixture
def client(exporter):
    """Test client wired to the in-memory exporter fixture."""
    app.dependency_overrides[get_exporter] = lambda: exporter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(fixed_clock):
    """Test client whose exporter cannot store anything."""
    sink = AsyncMock()
    sink.name = "broken"
    sink.upload = AsyncMock(side_effect=OSError("disk full"))
    exporter = PromptExporter(ExporterConfig(use_enhancement=False), sink=sink, clock=fixed_clock)

    app.dependency_overrides[get_exporter] = lambda: exporter
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestExportEndpoint:
    """Test POST /api/export"""

    def test_export_success(self, client):
        response = client.post("/api/export", json={
            "sourceContent": "Cinematic urban scene with dramatic lighting",
            "targetPlatform": "midjourney",
            "exportFormat": "json",
        })
        assert response.status_code == 200
        data = response.json()

        assert data["summary"] == {"totalPrompts": 1, "validPrompts": 1, "warningPrompts": 0, "errorPrompts": 0}
        assert data["exportUrl"].startswith("memory://")

        record = data["exportedPrompts"][0]
        assert record["platform"] == "midjourney"
        assert record["format"] == "json"
        assert record["fileName"] == "prompt_2024-03-15T12-30-45.json"
        assert record["mimeType"] == "application/json"
        assert record["sizeBytes"] > 0
        assert record["validation"]["status"] == "valid"
        assert "cinematic" in record["metadata"]["styles"]

    def test_validation_error_is_still_200(self, client):
        response = client.post("/api/export", json={"sourceContent": "nsfw content here"})
        assert response.status_code == 200
        assert response.json()["summary"]["errorPrompts"] == 1

    def test_enhancement_options(self, client):
        response = client.post("/api/export", json={
            "sourceContent": "castle",
            "exportFormat": "txt",
            "enhancementOptions": {"includeMetadata": False},
        })
        assert response.status_code == 200
        assert response.json()["exportedPrompts"][0]["mimeType"] == "text/plain"

    # ========================================================================
    # Errors
    # ========================================================================

    def test_unsupported_platform(self, client):
        response = client.post("/api/export", json={"sourceContent": "castle", "targetPlatform": "pixelforge"})
        assert response.status_code == 400
        assert response.json() == {"error": "Failed to export prompt: Unsupported platform: pixelforge"}

    def test_missing_source_content(self, client):
        response = client.post("/api/export", json={"targetPlatform": "midjourney"})
        assert response.status_code == 400
        assert "Source content is required" in response.json()["error"]

    def test_wrong_field_type(self, client):
        response = client.post("/api/export", json={"sourceContent": ["not", "text"]})
        assert response.status_code == 400
        assert "sourceContent" in response.json()["error"]

    def test_malformed_body(self, client):
        response = client.post(
            "/api/export", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_storage_failure(self, broken_client):
        response = broken_client.post("/api/export", json={"sourceContent": "castle"})
        assert response.status_code == 500
        assert response.json() == {"error": "Server error"}


class TestBatchEndpoint:
    """Test POST /api/batch"""

    def test_batch_success(self, client):
        response = client.post("/api/batch", json={"folderId": "scenes", "targetPlatform": "midjourney"})
        assert response.status_code == 200
        data = response.json()

        assert data["summary"]["totalPrompts"] == 3
        assert data["summary"]["errorPrompts"] == 1
        assert data["exportUrl"].endswith("batch_2024-03-15T12-30-45.json")
        assert [p["name"] for p in data["exportedPrompts"]] == ["01_city.txt", "02_forbidden.txt", "03_doc.json"]

    def test_missing_folder_id(self, client):
        response = client.post("/api/batch", json={})
        assert response.status_code == 400
        assert "Folder ID is required" in response.json()["error"]

    def test_unknown_folder(self, client):
        response = client.post("/api/batch", json={"folderId": "nowhere"})
        assert response.status_code == 400


class TestInfoEndpoints:

    def test_platforms(self, client):
        response = client.get("/api/platforms")
        assert response.status_code == 200
        platforms = {p["id"]: p for p in response.json()["platforms"]}
        assert set(platforms) == {"midjourney", "stable_diffusion", "dall_e", "runway", "custom"}
        assert platforms["midjourney"]["maxContentLength"] == 500
        assert platforms["custom"]["supportedFormats"] == ["json", "txt", "csv", "xml"]

    def test_formats(self, client):
        response = client.get("/api/formats")
        assert response.status_code == 200
        formats = {f["id"]: f for f in response.json()["formats"]}
        assert formats["xml"]["mimeType"] == "application/xml"
        assert formats["csv"]["extension"] == ".csv"

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_unexpected_error(self, exporter, monkeypatch):
        def explode():
            raise RuntimeError("boom")

        monkeypatch.setattr(exporter, "get_supported_formats", explode)
        app.dependency_overrides[get_exporter] = lambda: exporter
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/formats")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Server error"}
