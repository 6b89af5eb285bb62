"""Tests for the HTTP API (Flask test client, fake input handler)."""

from __future__ import annotations

import pytest

from airhid import Controller
from airhid.actions._handler import InputHandler
from airhid.actions._keys import KeyId, Modifier
from airhid.actions.executor import CommandExecutor
from airhid.server import create_app

TOKEN = "0123456789abcdef0123456789abcdef"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


class _RecordingHandler(InputHandler):
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    @property
    def platform_name(self):
        return "test"

    def press_chord(self, modifiers, keys):
        self.calls.append(("chord", frozenset(modifiers), tuple(keys)))

    def move_mouse(self, dx, dy):
        self.calls.append(("move", dx, dy))

    def click(self, button="left"):
        self.calls.append(("click", button))

    def scroll(self, amount):
        self.calls.append(("scroll", amount))


@pytest.fixture
def handler():
    return _RecordingHandler()


@pytest.fixture
def copied():
    return []


@pytest.fixture
def client(handler, copied):
    exe = CommandExecutor(handler, sleep=lambda _: None, copy_text=copied.append)
    app = create_app(Controller(executor=exe), TOKEN)
    app.config["TESTING"] = True
    return app.test_client()


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class TestAuth:
    def test_index_needs_no_token(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"AirHID" in resp.data

    def test_missing_header_is_401(self, client, handler):
        resp = client.post("/command", json={"command": "enter"})
        assert resp.status_code == 401
        assert handler.calls == []

    def test_wrong_token_is_403(self, client, handler):
        resp = client.post(
            "/command", json={"command": "enter"}, headers={"Authorization": "Bearer nope"}
        )
        assert resp.status_code == 403
        assert handler.calls == []

    def test_wrong_scheme_is_403(self, client):
        resp = client.post(
            "/command", json={"command": "enter"}, headers={"Authorization": f"Basic {TOKEN}"}
        )
        assert resp.status_code == 403

    def test_info_requires_token(self, client):
        assert client.get("/api/info").status_code == 401

    def test_info(self, client):
        resp = client.get("/api/info", headers=AUTH)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "online"
        assert data["version"].startswith("airhid-")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


class TestRoutes:
    @pytest.mark.parametrize("path", ["/command", "/key", "/type", "/mouse"])
    def test_get_not_allowed(self, client, path):
        assert client.get(path, headers=AUTH).status_code == 405

    def test_command(self, client, handler):
        resp = client.post("/command", json={"command": "ctrl+shift+esc"}, headers=AUTH)
        assert resp.get_json() == {"success": True}
        assert handler.calls == [
            ("chord", frozenset({Modifier.CTRL, Modifier.SHIFT}), (KeyId.ESC,))
        ]

    def test_command_unrecognized(self, client, handler):
        resp = client.post("/command", json={"command": "!!!"}, headers=AUTH)
        data = resp.get_json()
        assert data["success"] is False
        assert "No recognizable keys" in data["error"]
        assert handler.calls == []

    def test_command_empty(self, client):
        data = client.post("/command", json={}, headers=AUTH).get_json()
        assert data == {"success": False, "error": "Command must not be empty"}

    def test_bad_json(self, client):
        resp = client.post("/command", data="not json", headers=AUTH)
        assert resp.status_code == 200
        assert resp.get_json()["success"] is False

    def test_key(self, client, handler):
        assert client.post("/key", json={"key": "ctrl_enter"}, headers=AUTH).get_json() == {
            "success": True
        }
        assert handler.calls == [("chord", frozenset({Modifier.CTRL}), (KeyId.ENTER,))]

    def test_unknown_key(self, client):
        data = client.post("/key", json={"key": "hyper"}, headers=AUTH).get_json()
        assert data == {"success": False, "error": "Unknown key: hyper"}

    def test_type(self, client, handler, copied):
        data = client.post("/type", json={"text": "你好", "mode": "type"}, headers=AUTH).get_json()
        assert data == {"success": True}
        assert copied == ["你好"]
        assert handler.calls == [("chord", frozenset({Modifier.CTRL}), (KeyId.V,))]

    def test_type_defaults_to_type_mode(self, client, copied):
        client.post("/type", json={"text": "hi"}, headers=AUTH)
        assert copied == ["hi"]

    def test_type_empty_text(self, client):
        data = client.post("/type", json={"text": "", "mode": "type"}, headers=AUTH).get_json()
        assert data["success"] is False

    def test_clipboard_mode(self, client, handler, copied):
        client.post("/type", json={"text": "x", "mode": "clipboard"}, headers=AUTH)
        assert copied == ["x"]
        assert handler.calls == []

    def test_mouse_move(self, client, handler):
        resp = client.post("/mouse", json={"action": "move", "x": 5, "y": -3}, headers=AUTH)
        assert resp.get_json() == {"success": True}
        assert handler.calls == [("move", 5, -3)]

    def test_mouse_click(self, client, handler):
        client.post("/mouse", json={"action": "right_click"}, headers=AUTH)
        assert handler.calls == [("click", "right")]

    def test_mouse_unknown_action(self, client, handler):
        data = client.post("/mouse", json={"action": "fly"}, headers=AUTH).get_json()
        assert data["success"] is False
        assert handler.calls == []

    def test_mouse_infinite_delta(self, client, handler):
        resp = client.post(
            "/mouse",
            data='{"action": "move", "x": Infinity, "y": 0}',
            headers=AUTH,
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["success"] is False
        assert "Invalid mouse coordinates" in data["error"]
        assert handler.calls == []
