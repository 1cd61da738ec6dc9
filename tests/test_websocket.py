from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from snake_server.main import create_app
from snake_server.services.game_service import GameService


@pytest.fixture()
def client_and_game():
    game = GameService(width=20, height=10)
    with TestClient(create_app(game)) as client:
        yield client, game


def _receive_type(ws, message_type: str, limit: int = 50) -> dict:
    for _ in range(limit):
        msg = ws.receive_json()
        if msg["type"] == message_type:
            return msg
    raise AssertionError(f"no {message_type} message received")


def _wait_for_state(ws, predicate, limit: int = 100) -> dict:
    for _ in range(limit):
        state = _receive_type(ws, "state")
        if predicate(state):
            return state
    raise AssertionError("state never matched")


def test_rest_endpoints(client_and_game) -> None:
    client, _ = client_and_game

    assert client.get("/").json() == {"message": "Snake Server Running"}

    config = client.get("/api/game/config").json()
    assert config["grid"] == {"width": 48, "height": 32}
    assert "slow" in config["speeds"]

    state = client.get("/api/game/state").json()
    assert state["phase"] == "lobby"
    assert state["grid"] == {"width": 20, "height": 10}

    stats = client.get("/api/game/stats").json()
    assert stats["totalPlayers"] == 0


def test_hello_then_state_broadcast(client_and_game) -> None:
    client, game = client_and_game

    with client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        ws.send_json({"type": "fire"})  # before hello: ignored
        ws.send_json({"type": "hello", "name": "alice"})

        ack = _receive_type(ws, "hello_ack")
        assert ack["you"]["name"] == "alice"
        assert ack["you"]["spectator"] is False
        assert ack["hostId"] == ack["you"]["id"]
        assert ack["grid"] == {"width": 20, "height": 10}

        state = _receive_type(ws, "state")
        assert [p["id"] for p in state["players"]] == [ack["you"]["id"]]

        ws.send_json({"type": "hello", "name": "again"})
        ws.send_json({"type": "set_ready", "ready": True})
        _wait_for_state(ws, lambda s: s["readyCount"] == 1)
        assert len(game.room.players) == 1


def test_host_start_over_websocket(client_and_game) -> None:
    client, game = client_and_game

    with client.websocket_connect("/ws") as host_ws, client.websocket_connect("/ws") as guest_ws:
        host_ws.send_json({"type": "hello", "name": "host"})
        _receive_type(host_ws, "hello_ack")
        guest_ws.send_json({"type": "hello", "name": "guest"})
        guest_ack = _receive_type(guest_ws, "hello_ack")
        assert guest_ack["hostId"] != guest_ack["you"]["id"]

        for ws in (host_ws, guest_ws):
            ws.send_json({"type": "set_ready", "ready": True})
        _wait_for_state(host_ws, lambda s: s["readyCount"] == 2)

        guest_ws.send_json({"type": "start"})
        _wait_for_state(host_ws, lambda s: s["readyCount"] == 2)
        assert game.room.phase == "lobby"

        host_ws.send_json({"type": "start"})
        state = _wait_for_state(host_ws, lambda s: s["phase"] == "playing")
        assert state["timeRemainingMs"] > 0
        assert all(p["alive"] and len(p["snake"]) >= 3 for p in state["players"])


def test_binary_frames_are_ignored(client_and_game) -> None:
    client, game = client_and_game

    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "hello", "name": "bytes"})
        _receive_type(ws, "hello_ack")

        ws.send_bytes(b"\x00\x01")
        ws.send_json({"type": "set_ready", "ready": True})
        _wait_for_state(ws, lambda s: s["readyCount"] == 1)
        assert len(game.room.players) == 1


class FlakyGameService(GameService):
    """Raises on its first tick only."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.ticks = 0

    def tick(self):
        self.ticks += 1
        if self.ticks == 1:
            raise RuntimeError("tick blew up")
        super().tick()


def test_tick_loop_survives_a_failing_tick() -> None:
    game = FlakyGameService(width=20, height=10)
    with TestClient(create_app(game)) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "hello", "name": "steady"})
            _receive_type(ws, "hello_ack")
            _receive_type(ws, "state")
        assert game.ticks > 1


def test_disconnect_removes_player(client_and_game) -> None:
    client, game = client_and_game

    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "hello", "name": "bye"})
        _receive_type(ws, "hello_ack")
        assert len(game.room.players) == 1

    for _ in range(100):
        if not game.room.players:
            break
        time.sleep(0.01)
    assert game.room.players == {}
    assert game.room.host_id is None
