"""
Integration tests for the map session HTTP surface
"""
import pytest
from fastapi.testclient import TestClient

from helpers import FakeFetcher, FakeRouting, restaurant, restroom
from poimap.core.session import MapSession
from poimap.main import create_app
from poimap.models.poi import Category
from poimap.services.map_surface import HeadlessMapSurface

VIEWPORT = {"south": 40.75, "west": -73.99, "north": 40.77, "east": -73.97, "zoom": 14}


@pytest.fixture
def fetcher():
    return FakeFetcher({
        Category.RESTROOM: [restroom(40.7536, -73.9832, "Bryant Park")],
        Category.RESTAURANT: [restaurant(40.7547, -73.9870, "Joe's Pizza")],
    })


@pytest.fixture
def client(fetcher, test_settings):
    routing = FakeRouting()

    def factory(**kwargs):
        return MapSession(
            surface=HeadlessMapSurface(),
            fetcher=fetcher,
            routing=routing,
            settings=test_settings,
            **kwargs,
        )

    with TestClient(create_app(session_factory=factory)) as client:
        yield client


def create_session(client, **body):
    r = client.post("/sessions", json=body or {"viewport": VIEWPORT})
    assert r.status_code == 201
    return r.json()["data"]


def first_marker(data, category):
    return next(m for m in data["markers"] if m["poi"]["category"] == category)


def test_root_and_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["data"]["active_sessions"] == 0
    assert "X-Request-ID" in r.headers


def test_create_session_runs_initial_fetch(client, fetcher):
    data = create_session(client)

    assert data["counts"] == {"restroom": 1, "restaurant": 1}
    assert data["located"] is False
    assert data["surface"]["camera"]["zoom"] == 13
    assert len(fetcher.calls) == 1


def test_create_session_with_location(client):
    data = create_session(client, location={"lng": -73.99, "lat": 40.73}, viewport=VIEWPORT)

    assert data["located"] is True
    assert data["user_location"] == [-73.99, 40.73]
    assert data["surface"]["camera"]["zoom"] == 14


def test_unknown_session_is_404_envelope(client):
    r = client.get("/sessions/does-not-exist")

    assert r.status_code == 404
    body = r.json()
    assert body["status"] == "error"
    assert body["error"]["error_code"] == "SESSION_NOT_FOUND"


def test_error_envelope_carries_request_id(client):
    r = client.get("/sessions/does-not-exist", headers={"X-Request-ID": "req-123"})

    assert r.headers["X-Request-ID"] == "req-123"
    assert r.json()["error"]["request_id"] == "req-123"


def test_invalid_viewport_is_422(client):
    session_id = create_session(client)["session_id"]

    r = client.post(f"/sessions/{session_id}/viewport", json={"south": 41, "west": -74, "north": 40, "east": -73})

    assert r.status_code == 422
    assert r.json()["error"]["error_code"] == "VALIDATION_ERROR"


def test_viewport_change_is_accepted(client):
    session_id = create_session(client)["session_id"]

    r = client.post(f"/sessions/{session_id}/viewport", json=VIEWPORT)

    assert r.status_code == 202
    assert r.json()["data"]["pending"] is True


def test_forced_refresh(client, fetcher):
    session_id = create_session(client)["session_id"]

    r = client.post(f"/sessions/{session_id}/refresh", json=VIEWPORT)

    assert r.status_code == 200
    assert len(fetcher.calls) == 2


def test_activate_marker_and_clear_selection(client):
    data = create_session(client)
    session_id = data["session_id"]
    marker = first_marker(data, "restaurant")

    r = client.post(f"/sessions/{session_id}/markers/{marker['marker_id']}/activate")
    assert r.status_code == 200
    assert r.json()["data"]["selected"]["name"] == "Joe's Pizza"
    assert r.json()["data"]["apple_maps_url"] == "https://maps.apple.com/?daddr=40.7547,-73.987"

    r = client.delete(f"/sessions/{session_id}/selection")
    assert r.json()["data"]["selected"] is None


def test_activate_unknown_marker_is_404(client):
    session_id = create_session(client)["session_id"]

    r = client.post(f"/sessions/{session_id}/markers/nope/activate")

    assert r.status_code == 404
    assert r.json()["error"]["error_code"] == "MARKER_NOT_FOUND"


def test_nearest(client):
    session_id = create_session(client)["session_id"]

    r = client.get(f"/sessions/{session_id}/nearest")

    data = r.json()["data"]
    assert data["nearest"]["name"] == "Joe's Pizza"
    assert data["distance"].endswith("m")
    assert data["advisory"] is None


def test_nearest_advisory_when_empty(client, fetcher):
    fetcher.responses = {Category.RESTROOM: [], Category.RESTAURANT: []}
    session_id = create_session(client)["session_id"]

    r = client.get(f"/sessions/{session_id}/nearest")

    assert r.status_code == 200
    assert r.json()["data"]["nearest"] is None
    assert r.json()["data"]["advisory"]


def test_directions_lifecycle(client):
    data = create_session(client)
    session_id = data["session_id"]
    marker = first_marker(data, "restroom")

    r = client.post(f"/sessions/{session_id}/directions", json={"marker_id": marker["marker_id"]})
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "active"

    state = client.get(f"/sessions/{session_id}").json()["data"]
    assert state["surface"]["layers"][-1] == "route"

    r = client.delete(f"/sessions/{session_id}/directions")
    assert r.json()["data"]["status"] == "idle"

    r = client.delete(f"/sessions/{session_id}/directions")
    assert r.json()["data"]["status"] == "idle"


def test_directions_without_destination_is_409(client):
    session_id = create_session(client)["session_id"]

    r = client.post(f"/sessions/{session_id}/directions", json={})

    assert r.status_code == 409
    assert r.json()["error"]["error_code"] == "NO_DESTINATION"


def test_close_session(client):
    session_id = create_session(client)["session_id"]

    r = client.delete(f"/sessions/{session_id}")
    assert r.status_code == 200

    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404
