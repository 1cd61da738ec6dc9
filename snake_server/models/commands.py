# snake_server/models/commands.py
"""Inbound client commands as a tagged union of validated models."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class HelloCommand(BaseModel):
    type: Literal["hello"]
    name: Optional[str] = None


class SetNameCommand(BaseModel):
    type: Literal["set_name"]
    name: Optional[str] = None


class SetCosmeticsCommand(BaseModel):
    type: Literal["set_cosmetics"]
    color: Optional[str] = None
    head: Optional[str] = None


class SetReadyCommand(BaseModel):
    type: Literal["set_ready"]
    ready: bool = False


class SetSpeedCommand(BaseModel):
    type: Literal["set_speed"]
    speed: str


class SetModeCommand(BaseModel):
    type: Literal["set_mode"]
    mode: str


class StartCommand(BaseModel):
    type: Literal["start"]


class RestartCommand(BaseModel):
    type: Literal["restart"]


class DirectionCommand(BaseModel):
    type: Literal["direction"]
    direction: Literal["up", "down", "left", "right"]


class FireCommand(BaseModel):
    type: Literal["fire"]


Command = Annotated[
    Union[
        HelloCommand,
        SetNameCommand,
        SetCosmeticsCommand,
        SetReadyCommand,
        SetSpeedCommand,
        SetModeCommand,
        StartCommand,
        RestartCommand,
        DirectionCommand,
        FireCommand,
    ],
    Field(discriminator="type"),
]

_command_adapter = TypeAdapter(Command)


def parse_command(data) -> Optional[Command]:
    """Validate a raw message; anything malformed comes back as None."""
    try:
        return _command_adapter.validate_python(data)
    except ValidationError:
        return None
