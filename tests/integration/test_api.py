"""Integration smoke tests for the REST and WebSocket API over an in-memory store."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from wordflight_chat.app import create_app
from tests.conftest import FakeDatabase, make_store


@pytest.fixture
def app_with_store():
    app = create_app()
    db = FakeDatabase()
    app.state.store = make_store(db)
    return app, db


@pytest.fixture
def client(app_with_store):
    app, _ = app_with_store
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def db(app_with_store):
    _, db = app_with_store
    return db


def _create_room(client, name: str = "general", created_by: str = "Alice") -> dict:
    resp = client.post("/api/v1/rooms", json={"name": name, "created_by": created_by})
    assert resp.status_code == 201
    return resp.json()


def _receive_until(ws, event_type: str, predicate=lambda data: True, limit: int = 50) -> dict:
    for _ in range(limit):
        msg = ws.receive_json()
        if msg["type"] == event_type and predicate(msg["data"]):
            return msg["data"]
    raise AssertionError(f"no matching {event_type!r} event")


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_create_and_list_rooms(client):
    room = _create_room(client, " general ")

    assert room["name"] == "general"
    assert room["created_by"] == "Alice"
    assert len(room["id"]) == 20

    resp = client.get("/api/v1/rooms")
    assert resp.status_code == 200
    assert [r["name"] for r in resp.json()] == ["general"]


def test_blank_room_name_is_rejected(client, db):
    resp = client.post("/api/v1/rooms", json={"name": "   ", "created_by": "Alice"})

    assert resp.status_code == 422
    assert resp.json()["detail"] == "Room name is required"
    assert db.rooms == {}


def test_get_unknown_room_is_404(client):
    assert client.get("/api/v1/rooms/nope").status_code == 404
    assert client.delete("/api/v1/rooms/nope").status_code == 404


def test_messages_paginate_backwards(client):
    room = _create_room(client)
    for i in range(3):
        resp = client.post(
            f"/api/v1/rooms/{room['id']}/messages",
            json={"text": f"m{i}", "user_name": "Bob"},
        )
        assert resp.status_code == 201

    first = client.get(f"/api/v1/rooms/{room['id']}/messages", params={"limit": 2}).json()
    assert [m["text"] for m in first["items"]] == ["m1", "m2"]
    assert first["items"][0]["room_creator"] == "Alice"

    second = client.get(
        f"/api/v1/rooms/{room['id']}/messages",
        params={"limit": 2, "cursor": first["next_cursor"]},
    ).json()
    assert [m["text"] for m in second["items"]] == ["m0"]
    assert second["next_cursor"] is None


def test_send_to_unknown_room_is_404(client):
    resp = client.post("/api/v1/rooms/nope/messages", json={"text": "hi", "user_name": "Bob"})
    assert resp.status_code == 404


def test_malformed_cursor_is_422(client):
    room = _create_room(client)
    resp = client.get(f"/api/v1/rooms/{room['id']}/messages", params={"cursor": "%%%"})
    assert resp.status_code == 422


def test_delete_message_then_room(client, db):
    room = _create_room(client)
    msg = client.post(
        f"/api/v1/rooms/{room['id']}/messages",
        json={"text": "bye", "user_name": "Bob"},
    ).json()
    client.post(f"/api/v1/rooms/{room['id']}/messages", json={"text": "still here", "user_name": "Bob"})

    assert client.delete(f"/api/v1/messages/{msg['id']}").status_code == 204
    assert client.delete(f"/api/v1/messages/{msg['id']}").status_code == 404

    resp = client.delete(f"/api/v1/rooms/{room['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"id": room["id"], "deleted_messages": 1}
    assert db.messages == {}


def test_ws_requires_display_name(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/chat?name=%20%20"):
            pass
    assert exc_info.value.code == 4001


def test_ws_session_flow(client):
    with client.websocket_connect("/ws/chat?name=Alice&permission=denied") as ws:
        state = _receive_until(ws, "state")
        assert state["user_name"] == "Alice"
        assert state["current_room_id"] is None

        ws.send_json({"type": "create_room", "data": {"name": "general"}})
        rooms = _receive_until(ws, "rooms", lambda d: d["current_room_id"] is not None)
        assert [r["name"] for r in rooms["rooms"]] == ["general"]

        ws.send_json({"type": "send_message", "data": {"text": "hello"}})
        messages = _receive_until(ws, "messages", lambda d: d["messages"])
        assert messages["messages"][0]["text"] == "hello"
        assert messages["messages"][0]["is_own"] is True

        ws.send_json({"type": "ping"})
        _receive_until(ws, "pong")

        ws.send_json({"type": "bogus"})
        error = _receive_until(ws, "error")
        assert error == {"code": "unknown_type", "type": "bogus"}

