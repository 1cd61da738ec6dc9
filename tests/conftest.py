from __future__ import annotations

import random

import pytest

from snake_server.models.entities import Phase
from snake_server.services.game_service import GameService


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def make_game(clock):
    """Build a GameService on the fake clock with a seeded random source."""

    def _make(**kwargs) -> GameService:
        kwargs.setdefault("width", 20)
        kwargs.setdefault("height", 10)
        kwargs.setdefault("apple_count", 0)
        kwargs.setdefault("powerup_count", 0)
        return GameService(clock=clock, rng=random.Random(1234), **kwargs)

    return _make


@pytest.fixture()
def game(make_game) -> GameService:
    return make_game()


@pytest.fixture()
def place_snake():
    """Put a living snake with an explicit body into a playing room."""

    def _place(game: GameService, body, heading=(1, 0), name=None):
        player = game.create_player(name)
        game.room.phase = Phase.PLAYING
        player.body = list(body)
        player.heading = heading
        player.alive = True
        player.respawn_at = None
        player.longest = len(player.body)
        return player

    return _place
