# snake_server/services/game_service.py
"""Core game logic and state management."""

import random
import re
import uuid
from dataclasses import asdict
from typing import Callable, List, Optional

from snake_server.config.settings import (
    APPLE_COUNT,
    COLORS,
    GRID_HEIGHT,
    GRID_WIDTH,
    HEADS,
    MAX_PLAYERS,
    MIN_READY_PLAYERS,
    MODES,
    POWERUP_COUNT,
    ROUND_DURATION_MS,
    SPEEDS,
)
from snake_server.models.commands import (
    DirectionCommand,
    FireCommand,
    RestartCommand,
    SetCosmeticsCommand,
    SetModeCommand,
    SetNameCommand,
    SetReadyCommand,
    SetSpeedCommand,
    StartCommand,
)
from snake_server.models.entities import Phase, Player, Role, Room
from snake_server.services.movement_service import MovementService
from snake_server.services.spawner_service import SpawnerService
from snake_server.utils.helpers import DIRECTIONS, now_ms, sanitize_name
from snake_server.utils.logger import get_logger

logger = get_logger(__name__)

COLOR_PATTERN = re.compile(r"#?[0-9a-fA-F]{6}")


class GameService:
    """Main game service that owns the room and runs the tick."""

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
        max_players: int = MAX_PLAYERS,
        round_duration_ms: float = ROUND_DURATION_MS,
        min_ready_players: int = MIN_READY_PLAYERS,
        apple_count: int = APPLE_COUNT,
        powerup_count: int = POWERUP_COUNT,
        **movement_options,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive: {width}x{height}")

        self.clock = clock or now_ms
        self.rng = rng or random.Random()
        self.width = width
        self.height = height
        self.max_players = max_players
        self.round_duration_ms = round_duration_ms
        self.min_ready_players = min_ready_players

        self.room = Room()
        self.spawner = SpawnerService(
            self.rng, width, height, apple_count=apple_count, powerup_count=powerup_count
        )
        self.movement = MovementService(self.spawner, **movement_options)

        # Cosmetics are handed out round-robin by join order
        self.next_join_index = 0

    # Entity registry
    def create_player(self, name: Optional[str] = None) -> Player:
        """Create a new player, as a spectator if the active slots are full."""
        player_id = str(uuid.uuid4())
        display_name = sanitize_name(name) or f"Player-{player_id[:4]}"
        role = (
            Role.SPECTATOR
            if len(self.room.active_players()) >= self.max_players
            else Role.ACTIVE
        )
        join_index = self.next_join_index
        self.next_join_index += 1

        player = Player(
            id=player_id,
            name=display_name,
            color=COLORS[join_index % len(COLORS)],
            head=HEADS[join_index % len(HEADS)],
            role=role,
        )
        if self.room.phase == Phase.PLAYING and player.active:
            # Enters the running round at the next movement step
            player.respawn_at = self.clock()

        self.room.players[player_id] = player
        self._assign_host_if_needed()
        logger.info("Player %s joined as %s (%s)", player_id, display_name, role.value)
        return player

    def remove_player(self, player_id: str):
        """Remove a player and hand the host role on if needed."""
        if self.room.players.pop(player_id, None) is None:
            return
        logger.info("Player %s left", player_id)
        if player_id == self.room.host_id:
            self._assign_host_if_needed()

    def _assign_host_if_needed(self):
        if self.room.host_id in self.room.players:
            return
        self.room.host_id = next(iter(self.room.players), None)
        if self.room.host_id is not None:
            logger.info("Host is now %s", self.room.host_id)

    def is_host(self, player_id: str) -> bool:
        return player_id == self.room.host_id

    # Commands
    def handle_command(self, player_id: str, command) -> bool:
        """Apply a parsed command; returns False when it was ignored."""
        player = self.room.players.get(player_id)
        if player is None:
            return False

        if isinstance(command, SetNameCommand):
            applied = self.set_name(player, command.name)
        elif isinstance(command, SetCosmeticsCommand):
            applied = self.set_cosmetics(player, command.color, command.head)
        elif isinstance(command, SetReadyCommand):
            player.ready = command.ready
            applied = True
        elif isinstance(command, SetSpeedCommand):
            applied = self.set_speed(player_id, command.speed)
        elif isinstance(command, SetModeCommand):
            applied = self.set_mode(player_id, command.mode)
        elif isinstance(command, StartCommand):
            applied = self.start_round(player_id)
        elif isinstance(command, RestartCommand):
            applied = self.reset_to_lobby(player_id)
        elif isinstance(command, DirectionCommand):
            applied = self.change_direction(player, command.direction)
        elif isinstance(command, FireCommand):
            applied = self.fire(player)
        else:
            applied = False

        if not applied:
            logger.debug("Ignored %r from %s", command, player_id)
        return applied

    def set_name(self, player: Player, name: Optional[str]) -> bool:
        display_name = sanitize_name(name)
        if not display_name:
            return False
        player.name = display_name
        return True

    def set_cosmetics(
        self, player: Player, color: Optional[str], head: Optional[str]
    ) -> bool:
        """Apply each cosmetic field that passes validation."""
        applied = False
        if color is not None and COLOR_PATTERN.fullmatch(color):
            player.color = color if color.startswith("#") else f"#{color}"
            applied = True
        if head is not None and head in HEADS:
            player.head = head
            applied = True
        return applied

    def set_speed(self, player_id: str, speed: str) -> bool:
        if not self.is_host(player_id) or speed not in SPEEDS:
            return False
        self.room.speed = speed
        return True

    def set_mode(self, player_id: str, mode: str) -> bool:
        if not self.is_host(player_id) or mode not in MODES:
            return False
        self.room.mode = mode
        return True

    def change_direction(self, player: Player, direction: str) -> bool:
        """Buffer a heading change; applied at the player's next movement step."""
        heading = DIRECTIONS.get(direction)
        if (
            heading is None
            or self.room.phase != Phase.PLAYING
            or not player.active
            or not player.alive
        ):
            return False
        player.pending_heading = heading
        return True

    def fire(self, player: Player) -> bool:
        if self.room.phase != Phase.PLAYING:
            return False
        return self.movement.fire(self.room, player, self.clock()) is not None

    # Match state machine
    def ready_count(self) -> int:
        return sum(1 for p in self.room.active_players() if p.ready)

    def start_round(self, player_id: str) -> bool:
        """Move lobby -> playing when the host asks and enough players are ready."""
        room = self.room
        if (
            not self.is_host(player_id)
            or room.phase != Phase.LOBBY
            or self.ready_count() < self.min_ready_players
        ):
            return False

        now = self.clock()
        room.phase = Phase.PLAYING
        room.round_ends_at = now + self.round_duration_ms
        room.last_move_at = None
        room.clear_consumables()

        for player in room.players.values():
            player.reset_stats()
            if not player.active:
                player.alive = False
                player.body = []
                continue
            self.movement.respawn(player, now)
            player.longest = len(player.body)

        self.spawner.maintain(room)
        logger.info("Round started with %d players", len(room.active_players()))
        return True

    def reset_to_lobby(self, player_id: str) -> bool:
        """Send everyone back to the lobby, keeping the roster."""
        if not self.is_host(player_id):
            return False

        room = self.room
        room.phase = Phase.LOBBY
        room.round_ends_at = 0.0
        room.last_move_at = None
        room.clear_consumables()

        for player in room.players.values():
            player.reset_stats()
            player.body = []
            player.alive = False
            player.heading = (1, 0)
            player.pending_heading = None
            player.ready = False
            player.shield_until = 0.0
            player.ghost_until = 0.0
            player.fire_until = 0.0

        self._assign_host_if_needed()
        logger.info("Room reset to lobby")
        return True

    def tick(self):
        """Advance the simulation by one broadcast tick."""
        room = self.room
        if room.phase != Phase.PLAYING:
            return

        now = self.clock()
        if now >= room.round_ends_at:
            room.phase = Phase.ENDED
            logger.info("Round ended")
            return

        self.spawner.maintain(room)
        interval = SPEEDS.get(room.speed, SPEEDS["normal"])
        if room.last_move_at is not None and now - room.last_move_at < interval:
            return

        room.last_move_at = now
        self.movement.step(room, now)
        self.spawner.maintain(room)

    # Snapshot
    def time_remaining_ms(self) -> int:
        if self.room.phase != Phase.PLAYING:
            return 0
        return int(max(0, self.room.round_ends_at - self.clock()))

    def get_player_state(self, player: Player, now: float) -> dict:
        return {
            "id": player.id,
            "name": player.name,
            "color": player.color,
            "head": player.head,
            "snake": [{"x": x, "y": y} for x, y in player.body],
            "alive": player.alive,
            "spectator": not player.active,
            "ready": player.ready,
            "score": player.score,
            "kills": player.kills,
            "deaths": player.deaths,
            "applesEaten": player.apples_eaten,
            "longest": player.longest,
            "streak": player.streak,
            "shield": player.shielded(now),
            "ghost": player.ghosted(now),
            "fire": player.on_fire(now),
        }

    def get_all_players(self) -> List[dict]:
        now = self.clock()
        return [self.get_player_state(p, now) for p in self.room.players.values()]

    def get_all_apples(self) -> List[dict]:
        return [asdict(apple) for apple in self.room.apples]

    def get_all_powerups(self) -> List[dict]:
        return [
            {"x": p.x, "y": p.y, "type": p.type.value} for p in self.room.powerups
        ]

    def get_all_projectiles(self) -> List[dict]:
        return [{"x": p.x, "y": p.y} for p in self.room.projectiles]

    def build_state(self) -> dict:
        """Full read-only snapshot pushed to every observer each tick."""
        room = self.room
        return {
            "grid": {"width": self.width, "height": self.height},
            "phase": room.phase.value,
            "hostId": room.host_id,
            "timeRemainingMs": self.time_remaining_ms(),
            "speed": room.speed,
            "mode": room.mode,
            "readyCount": self.ready_count(),
            "playerCount": len(room.active_players()),
            "players": self.get_all_players(),
            "apples": self.get_all_apples(),
            "powerups": self.get_all_powerups(),
            "projectiles": self.get_all_projectiles(),
        }

    def build_join_ack(self, player: Player) -> dict:
        return {
            "you": {
                "id": player.id,
                "name": player.name,
                "color": player.color,
                "head": player.head,
                "spectator": not player.active,
            },
            "grid": {"width": self.width, "height": self.height},
            "maxPlayers": self.max_players,
            "phase": self.room.phase.value,
            "hostId": self.room.host_id,
            "timeRemainingMs": self.time_remaining_ms(),
            "speed": self.room.speed,
            "mode": self.room.mode,
        }

    def get_stats(self) -> dict:
        room = self.room
        return {
            "totalPlayers": len(room.players),
            "activePlayers": len(room.active_players()),
            "alivePlayers": len(room.living_players()),
            "totalApples": len(room.apples),
            "totalPowerups": len(room.powerups),
            "totalProjectiles": len(room.projectiles),
        }
