from __future__ import annotations

from snake_server.config.settings import ROUND_DURATION_MS
from snake_server.models.entities import Powerup, PowerupType, Projectile


def test_lobby_snapshot(game) -> None:
    host = game.create_player("host")
    other = game.create_player("other")
    other.ready = True

    state = game.build_state()

    assert state["grid"] == {"width": 20, "height": 10}
    assert state["phase"] == "lobby"
    assert state["hostId"] == host.id
    assert state["timeRemainingMs"] == 0
    assert state["speed"] == "slow"
    assert state["mode"] == "balanced"
    assert state["readyCount"] == 1
    assert state["playerCount"] == 2
    assert [p["name"] for p in state["players"]] == ["host", "other"]
    assert state["apples"] == []
    assert state["powerups"] == []
    assert state["projectiles"] == []


def test_player_entry_exposes_buffs_as_booleans(game, clock, place_snake) -> None:
    p = place_snake(game, [(5, 5), (4, 5), (3, 5)])
    p.shield_until = clock() + 10
    p.fire_until = clock() - 10

    entry = game.build_state()["players"][0]

    assert entry["snake"] == [{"x": 5, "y": 5}, {"x": 4, "y": 5}, {"x": 3, "y": 5}]
    assert entry["shield"] is True
    assert entry["ghost"] is False
    assert entry["fire"] is False
    assert entry["alive"] is True
    assert entry["spectator"] is False
    assert not any(key.endswith("Until") or key.endswith("_until") for key in entry)
    for key in ("score", "kills", "deaths", "applesEaten", "longest", "streak", "ready"):
        assert key in entry


def test_time_remaining_counts_down_and_floors(game, clock) -> None:
    host, other = game.create_player(), game.create_player()
    host.ready = other.ready = True
    game.start_round(host.id)

    clock.advance(1000)
    assert game.build_state()["timeRemainingMs"] == ROUND_DURATION_MS - 1000

    game.room.round_ends_at = clock() - 50
    assert game.build_state()["timeRemainingMs"] == 0


def test_consumables_are_position_lists(game) -> None:
    game.room.powerups.append(Powerup(x=1, y=2, type=PowerupType.GHOST))
    game.room.projectiles.append(
        Projectile(x=3, y=4, dx=1, dy=0, owner="x", range_left=4)
    )

    state = game.build_state()

    assert state["powerups"] == [{"x": 1, "y": 2, "type": "ghost"}]
    assert state["projectiles"] == [{"x": 3, "y": 4}]


def test_join_ack(game) -> None:
    p = game.create_player("neo")

    ack = game.build_join_ack(p)

    assert ack["you"] == {
        "id": p.id,
        "name": "neo",
        "color": p.color,
        "head": p.head,
        "spectator": False,
    }
    assert ack["hostId"] == p.id
    assert ack["phase"] == "lobby"
    assert ack["grid"] == {"width": 20, "height": 10}
