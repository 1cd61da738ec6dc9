# snake_server/services/movement_service.py
"""Movement, collision, projectile and respawn resolution for one step."""

from typing import Dict, Optional, Tuple

from snake_server.config.settings import (
    BALANCED_DEATH_PENALTY,
    FIRE_MS,
    GHOST_MS,
    KILL_BONUS,
    MIN_LENGTH,
    PROJECTILE_DAMAGE,
    PROJECTILE_RANGE,
    RESPAWN_DELAY_MS,
    SHIELD_MS,
    START_LENGTH,
)
from snake_server.models.entities import (
    Cell,
    Player,
    PowerupType,
    Projectile,
    Room,
)
from snake_server.services.spawner_service import SpawnerService
from snake_server.utils.helpers import is_reverse, starting_body, step_cell
from snake_server.utils.logger import get_logger

logger = get_logger(__name__)

OccupancyIndex = Dict[Cell, Tuple[str, int]]


def build_occupancy(room: Room) -> OccupancyIndex:
    """Map every cell covered by a living active body to (owner id, segment index)."""
    occupancy: OccupancyIndex = {}
    for player in room.living_players():
        for index, cell in enumerate(player.body):
            occupancy[cell] = (player.id, index)
    return occupancy


class MovementService:
    """Advances snakes and projectiles by one movement step."""

    def __init__(
        self,
        spawner: SpawnerService,
        start_length: int = START_LENGTH,
        min_length: int = MIN_LENGTH,
        respawn_delay_ms: float = RESPAWN_DELAY_MS,
        kill_bonus: int = KILL_BONUS,
        shield_ms: float = SHIELD_MS,
        ghost_ms: float = GHOST_MS,
        fire_ms: float = FIRE_MS,
        projectile_range: int = PROJECTILE_RANGE,
        projectile_damage: int = PROJECTILE_DAMAGE,
    ):
        if start_length < min_length or min_length < 1:
            raise ValueError(
                f"Invalid snake lengths: start={start_length} min={min_length}"
            )
        self.spawner = spawner
        self.width = spawner.width
        self.height = spawner.height
        self.start_length = start_length
        self.min_length = min_length
        self.respawn_delay_ms = respawn_delay_ms
        self.kill_bonus = kill_bonus
        self.shield_ms = shield_ms
        self.buff_durations = {PowerupType.GHOST: ghost_ms, PowerupType.FIRE: fire_ms}
        self.projectile_range = projectile_range
        self.projectile_damage = projectile_damage

    def step(self, room: Room, now: float):
        """Run one full movement step: snakes, then projectiles, then respawns."""
        occupancy = build_occupancy(room)
        for player in room.living_players():
            self._move_player(room, player, occupancy, now)

        self.advance_projectiles(room, now)
        self.respawn_due(room, now)

    def _move_player(
        self, room: Room, player: Player, occupancy: OccupancyIndex, now: float
    ):
        if player.pending_heading is not None:
            if not is_reverse(player.heading, player.pending_heading):
                player.heading = player.pending_heading
            player.pending_heading = None

        target = step_cell(player.body[0], player.heading, self.width, self.height)
        apple = next((a for a in room.apples if (a.x, a.y) == target), None)

        collided, killer_id = False, None
        occupant = occupancy.get(target)
        if occupant is not None and not player.shielded(now):
            owner_id, index = occupant
            if owner_id == player.id:
                vacating_tail = index == len(player.body) - 1 and apple is None
                collided = not vacating_tail
            else:
                owner = room.players.get(owner_id)
                if owner is None or not owner.ghosted(now):
                    collided = True
                    killer_id = owner_id

        if collided:
            self.eliminate(room, player, now)
            if killer_id is not None and killer_id in room.players:
                self._credit_kill(room.players[killer_id])
                logger.debug("Player %s ran into %s", player.id, killer_id)
            return

        player.body.insert(0, target)
        if apple is not None:
            room.apples.remove(apple)
            player.score += 1
            player.apples_eaten += 1
        else:
            player.body.pop()
        player.longest = max(player.longest, len(player.body))

        powerup = next((p for p in room.powerups if (p.x, p.y) == target), None)
        if powerup is not None:
            room.powerups.remove(powerup)
            self.grant_buff(player, powerup.type, now)

    def grant_buff(self, player: Player, buff: PowerupType, now: float):
        expiry = now + self.buff_durations[buff]
        if buff == PowerupType.GHOST:
            player.ghost_until = expiry
        elif buff == PowerupType.FIRE:
            player.fire_until = expiry

    def eliminate(self, room: Room, player: Player, now: float):
        """Apply death bookkeeping and the active mode's score penalty."""
        player.alive = False
        player.deaths += 1
        player.streak = 0
        player.respawn_at = now + self.respawn_delay_ms
        if room.mode == "classic":
            player.score = 0
        else:
            player.score = max(0, player.score - BALANCED_DEATH_PENALTY)

    def _credit_kill(self, killer: Player):
        killer.kills += 1
        killer.streak += 1
        killer.score += self.kill_bonus

    def respawn(self, player: Player, now: float):
        """Drop the player back onto the grid with a fresh body and shield."""
        head = self.spawner.random_cell()
        player.body = starting_body(head, self.start_length, self.width, self.height)
        player.heading = (1, 0)
        player.pending_heading = None
        player.alive = True
        player.respawn_at = None
        player.shield_until = now + self.shield_ms
        player.ghost_until = 0.0
        player.fire_until = 0.0
        player.longest = max(player.longest, len(player.body))

    def respawn_due(self, room: Room, now: float):
        for player in room.active_players():
            if (
                not player.alive
                and player.respawn_at is not None
                and now >= player.respawn_at
            ):
                self.respawn(player, now)

    def fire(self, room: Room, player: Player, now: float) -> Optional[Projectile]:
        """Launch a fireball from the head of a burning snake."""
        if not (player.active and player.alive and player.on_fire(now)):
            return None
        head = player.body[0]
        projectile = Projectile(
            x=head[0],
            y=head[1],
            dx=player.heading[0],
            dy=player.heading[1],
            owner=player.id,
            range_left=self.projectile_range,
        )
        room.projectiles.append(projectile)
        return projectile

    def advance_projectiles(self, room: Room, now: float):
        """Move every projectile one cell; resolve hits against post-move bodies."""
        occupancy = build_occupancy(room)
        remaining = []

        for projectile in room.projectiles:
            projectile.x, projectile.y = step_cell(
                (projectile.x, projectile.y),
                (projectile.dx, projectile.dy),
                self.width,
                self.height,
            )
            projectile.range_left -= 1

            cell = (projectile.x, projectile.y)
            occupant = occupancy.get(cell)
            if occupant is not None and occupant[0] != projectile.owner:
                victim = room.players.get(occupant[0])
                if victim is not None and victim.alive and cell in victim.body:
                    self._hit(room, projectile, victim, now)
                    continue

            if projectile.range_left > 0:
                remaining.append(projectile)

        room.projectiles = remaining

    def _hit(self, room: Room, projectile: Projectile, victim: Player, now: float):
        logger.debug("Projectile from %s hit %s", projectile.owner, victim.id)
        for _ in range(self.projectile_damage):
            if len(victim.body) > self.min_length:
                victim.body.pop()
            else:
                self.eliminate(room, victim, now)
                break

        shooter = room.players.get(projectile.owner)
        if shooter is not None:
            self._credit_kill(shooter)
