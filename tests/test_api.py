"""
Tests for the Display API

Tests the FastAPI surface with the real lifespan:
- initial count on startup
- refresh / close messages and their error codes
- health, readiness and liveness checks
- SSE frames, keepalives and disconnect cleanup
"""

import json

import pytest
from fastapi.testclient import TestClient

from pixelcount.api.main import app
from pixelcount.api.routes.pixels import event_frames
from pixelcount.core.config import settings
from pixelcount.session.controller import QueueEventSink
from pixelcount.session.messages import CountMessage


def _write_document(tmp_path, include_broken_page: bool = False):
    pages = [
        {
            "id": "A",
            "name": "Page A",
            "children": [{
                "id": "frame",
                "type": "FRAME",
                "width": 100,
                "height": 100,
                "children": [
                    {"id": "r1", "type": "RECTANGLE", "width": 20, "height": 10},
                    {"id": "r2", "type": "RECTANGLE", "width": 30, "height": 5},
                ],
            }],
        },
        {"id": "B", "name": "Page B", "source": "b.json"},
    ]
    if include_broken_page:
        pages.append({"id": "C", "name": "Page C", "source": "missing.json"})

    (tmp_path / "b.json").write_text(json.dumps([
        {"id": "text", "type": "TEXT"},
        {"id": "ellipse", "type": "ELLIPSE", "width": 8, "height": 8},
    ]))
    path = tmp_path / "document.json"
    path.write_text(json.dumps({"name": "Scenario", "pages": pages}))
    return path


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "document_path", str(_write_document(tmp_path)))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_client(tmp_path, monkeypatch):
    path = _write_document(tmp_path, include_broken_page=True)
    monkeypatch.setattr(settings, "document_path", str(path))
    with TestClient(app) as test_client:
        yield test_client


# ──────────────────────────────────────────────────────────────
# Pixel routes
# ──────────────────────────────────────────────────────────────


class TestPixelRoutes:
    """Tests for /api/v1/pixels and /api/v1/messages."""

    def test_initial_count_on_startup(self, client) -> None:
        """Test the count is available right after startup."""
        response = client.get("/api/v1/pixels")
        assert response.status_code == 200
        body = response.json()
        assert body["pixels"] == 414
        assert body["state"] == "idle"
        assert body["closed"] is False

    def test_refresh_message(self, client) -> None:
        """Test a refresh returns the recomputed total."""
        response = client.post("/api/v1/messages", json={"type": "refresh"})
        assert response.status_code == 200
        assert response.json() == {"type": "refresh", "pixels": 414}

    def test_close_then_refresh_conflicts(self, client) -> None:
        """Test commands after close are rejected with 409."""
        response = client.post("/api/v1/messages", json={"type": "close"})
        assert response.status_code == 200
        assert response.json() == {"type": "close", "pixels": None}

        response = client.post("/api/v1/messages", json={"type": "refresh"})
        assert response.status_code == 409

    def test_unknown_message_is_422(self, client) -> None:
        """Test invalid display messages are rejected."""
        response = client.post("/api/v1/messages", json={"type": "zoom"})
        assert response.status_code == 422

    def test_load_failure_is_502(self, broken_client) -> None:
        """Test a page that cannot load fails the request without a total."""
        response = broken_client.get("/api/v1/pixels")
        assert response.json()["pixels"] is None

        response = broken_client.post("/api/v1/messages", json={"type": "refresh"})
        assert response.status_code == 502
        assert "C" in response.json()["detail"]

    def test_request_id_header(self, client) -> None:
        """Test every response carries X-Request-ID."""
        response = client.get("/api/v1/pixels")
        assert response.headers.get("X-Request-ID")


# ──────────────────────────────────────────────────────────────
# Health routes
# ──────────────────────────────────────────────────────────────


class TestHealthRoutes:
    """Tests for health endpoints."""

    def test_health_and_live(self, client) -> None:
        """Test basic health checks."""
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/live").json() == {"status": "alive"}

    def test_ready(self, client) -> None:
        """Test readiness with an open session."""
        body = client.get("/ready").json()
        assert body["status"] == "ready"
        assert body["components"]["session"] == "healthy"

    def test_ready_without_document(self, tmp_path, monkeypatch) -> None:
        """Test readiness degrades and pixels 503 when no document exists."""
        monkeypatch.setattr(settings, "document_path", str(tmp_path / "absent.json"))
        with TestClient(app) as test_client:
            body = test_client.get("/ready").json()
            assert body["status"] == "degraded"
            assert test_client.get("/api/v1/pixels").status_code == 503


# ──────────────────────────────────────────────────────────────
# Event stream
# ──────────────────────────────────────────────────────────────


class _ClientConnection:
    """Request stand-in that reports a disconnect after `checks` polls."""

    def __init__(self, checks: int) -> None:
        self._remaining = checks

    async def is_disconnected(self) -> bool:
        self._remaining -= 1
        return self._remaining < 0


class TestEventFrames:
    """Tests for the SSE frame generator."""

    @pytest.mark.asyncio
    async def test_message_frame(self) -> None:
        """Test queued messages become data frames."""
        sink = QueueEventSink()
        queue = sink.subscribe()
        sink.post_message(CountMessage(pixels=414))

        frames = [f async for f in event_frames(_ClientConnection(1), sink, queue, 1.0)]

        assert frames == ['data: {"type":"count","pixels":414}\n\n']
        assert sink.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_idle_stream_notices_disconnect(self) -> None:
        """Test a silent stream times out, sends a keepalive and releases its queue."""
        sink = QueueEventSink()
        queue = sink.subscribe()

        frames = [f async for f in event_frames(_ClientConnection(1), sink, queue, 0.01)]

        assert frames == [": keepalive\n\n"]
        assert sink.subscriber_count == 0
