# snake_server/models/entities.py
"""Game entity models and data classes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from snake_server.config.settings import DEFAULT_MODE, DEFAULT_SPEED

Cell = Tuple[int, int]
Vector = Tuple[int, int]


class Phase(str, Enum):
    LOBBY = "lobby"
    PLAYING = "playing"
    ENDED = "ended"


class Role(str, Enum):
    ACTIVE = "active"
    SPECTATOR = "spectator"


class PowerupType(str, Enum):
    GHOST = "ghost"
    FIRE = "fire"


@dataclass
class Player:
    """Represents a connected participant and its per-round state."""

    id: str
    name: str
    color: str
    head: str
    role: Role = Role.ACTIVE
    body: List[Cell] = field(default_factory=list)  # head first
    heading: Vector = (1, 0)
    pending_heading: Optional[Vector] = None
    alive: bool = False
    score: int = 0
    respawn_at: Optional[float] = None
    shield_until: float = 0.0
    ghost_until: float = 0.0
    fire_until: float = 0.0
    kills: int = 0
    deaths: int = 0
    apples_eaten: int = 0
    longest: int = 0
    streak: int = 0
    ready: bool = False

    @property
    def active(self) -> bool:
        return self.role == Role.ACTIVE

    def shielded(self, now: float) -> bool:
        return now < self.shield_until

    def ghosted(self, now: float) -> bool:
        return now < self.ghost_until

    def on_fire(self, now: float) -> bool:
        return now < self.fire_until

    def reset_stats(self):
        """Zero every per-round counter."""
        self.score = 0
        self.kills = 0
        self.deaths = 0
        self.apples_eaten = 0
        self.longest = 0
        self.streak = 0
        self.respawn_at = None


@dataclass
class Apple:
    """Represents an apple that grows the snake eating it."""

    x: int
    y: int


@dataclass
class Powerup:
    """Represents a powerup that grants a timed buff on pickup."""

    x: int
    y: int
    type: PowerupType


@dataclass
class Projectile:
    """Represents a fireball travelling in a straight line."""

    x: int
    y: int
    dx: int
    dy: int
    owner: str
    range_left: int


@dataclass
class Room:
    """The single match: phase, settings and every live collection."""

    phase: Phase = Phase.LOBBY
    host_id: Optional[str] = None
    round_ends_at: float = 0.0
    last_move_at: Optional[float] = None
    speed: str = DEFAULT_SPEED
    mode: str = DEFAULT_MODE
    players: Dict[str, Player] = field(default_factory=dict)
    apples: List[Apple] = field(default_factory=list)
    powerups: List[Powerup] = field(default_factory=list)
    projectiles: List[Projectile] = field(default_factory=list)

    def clear_consumables(self):
        self.apples.clear()
        self.powerups.clear()
        self.projectiles.clear()

    def active_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.active]

    def living_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.active and p.alive]
