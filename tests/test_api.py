from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from moments.errors import ServerError, ValidationError
from moments.handlers.compose_handler import get_publisher
from moments.main import app
from moments.models import Thought

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


class StubPublisher:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def publish(self, draft, editing_id=None):
        self.calls.append((draft, editing_id))
        if self.error:
            raise self.error
        return Thought(id=editing_id or "new", content=draft.content, tags=draft.tags,
                       created_at=NOW, updated_at=NOW)


@pytest.fixture
def publisher():
    stub = StubPublisher()
    app.dependency_overrides[get_publisher] = lambda: stub
    yield stub
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_create_thought_puts_kept_images_first(client, publisher, red_png):
    kept = [{"url": "https://x/a.jpg", "width": 640, "height": 480, "blurhash": "00TI:j"}]
    resp = client.post(
        "/thoughts",
        data={"content": "hello", "tags": ["a", "b"], "kept_images": json.dumps(kept)},
        files=[("images", ("red.png", red_png, "image/png"))],
    )

    assert resp.status_code == 200
    assert resp.json()["id"] == "new"
    assert "createdAt" in resp.json()
    draft, editing_id = publisher.calls[0]
    assert editing_id is None
    assert draft.tags == ["a", "b"]
    assert [s.url for s in draft.images] == ["https://x/a.jpg", None]
    assert draft.images[0].blurhash == "00TI:j"
    assert draft.images[1].data == red_png


def test_update_thought_passes_id(client, publisher):
    resp = client.put("/thoughts/t1", data={"content": "edited"})

    assert resp.status_code == 200
    assert publisher.calls[0][1] == "t1"
    assert publisher.calls[0][0].images == []


def test_bad_kept_images_is_422(client, publisher):
    resp = client.post("/thoughts", data={"content": "x", "kept_images": "not json"})

    assert resp.status_code == 422
    assert publisher.calls == []


@pytest.mark.parametrize("error, status", [(ValidationError("empty"), 422), (ServerError(500, "down"), 502)])
def test_app_errors_map_to_status(client, error, status):
    app.dependency_overrides[get_publisher] = lambda: StubPublisher(error=error)
    try:
        resp = client.post("/thoughts", data={"content": "x"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == status
    assert resp.json()["detail"] == str(error)
