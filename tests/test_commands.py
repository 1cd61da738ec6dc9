from __future__ import annotations

import pytest

from snake_server.models.commands import (
    FireCommand,
    HelloCommand,
    SetCosmeticsCommand,
    SetReadyCommand,
    parse_command,
)


def test_parses_known_commands() -> None:
    assert parse_command({"type": "hello", "name": "bob"}) == HelloCommand(
        type="hello", name="bob"
    )
    assert isinstance(parse_command({"type": "fire"}), FireCommand)
    assert parse_command({"type": "direction", "direction": "left"}).direction == "left"
    assert parse_command({"type": "set_ready", "ready": True}) == SetReadyCommand(
        type="set_ready", ready=True
    )
    assert parse_command({"type": "set_cosmetics", "head": "🐸"}) == SetCosmeticsCommand(
        type="set_cosmetics", head="🐸"
    )


def test_hello_without_name() -> None:
    assert parse_command({"type": "hello"}).name is None


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "start",
        [],
        {},
        {"type": "teleport"},
        {"type": "direction", "direction": "diagonal"},
        {"type": "direction"},
        {"type": "set_speed"},
        {"type": "set_name", "name": {"first": "bob"}},
    ],
)
def test_invalid_payloads_are_ignored(payload) -> None:
    assert parse_command(payload) is None
