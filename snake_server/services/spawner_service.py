# snake_server/services/spawner_service.py
"""Apple and powerup placement."""

import random
from typing import Optional

from snake_server.config.settings import APPLE_COUNT, POWERUP_COUNT, SPAWN_RETRIES
from snake_server.models.entities import Apple, Cell, Powerup, PowerupType, Room
from snake_server.utils.logger import get_logger

logger = get_logger(__name__)


class SpawnerService:
    """Keeps apples and powerups topped up to their target counts."""

    def __init__(
        self,
        rng: random.Random,
        width: int,
        height: int,
        apple_count: int = APPLE_COUNT,
        powerup_count: int = POWERUP_COUNT,
        retries: int = SPAWN_RETRIES,
    ):
        self.rng = rng
        self.width = width
        self.height = height
        self.apple_count = apple_count
        self.powerup_count = powerup_count
        self.retries = retries

    def random_cell(self) -> Cell:
        """Pick a uniformly random cell on the grid."""
        return self.rng.randrange(self.width), self.rng.randrange(self.height)

    def maintain(self, room: Room):
        """Top up consumables; gives up for this cycle once a placement fails."""
        while len(room.apples) < self.apple_count:
            if not self._spawn_apple(room):
                return
        while len(room.powerups) < self.powerup_count:
            if not self._spawn_powerup(room):
                return

    def _spawn_apple(self, room: Room) -> Optional[Apple]:
        """Spawn a single apple on a free cell."""
        cell = self._find_free_cell(room)
        if cell is None:
            return None
        apple = Apple(x=cell[0], y=cell[1])
        room.apples.append(apple)
        return apple

    def _spawn_powerup(self, room: Room) -> Optional[Powerup]:
        """Spawn a single powerup of a random type on a free cell."""
        cell = self._find_free_cell(room)
        if cell is None:
            return None
        powerup = Powerup(x=cell[0], y=cell[1], type=self.rng.choice(list(PowerupType)))
        room.powerups.append(powerup)
        return powerup

    def _find_free_cell(self, room: Room) -> Optional[Cell]:
        taken = {(a.x, a.y) for a in room.apples}
        taken.update((p.x, p.y) for p in room.powerups)

        for _ in range(self.retries):
            cell = self.random_cell()
            if cell not in taken:
                return cell

        logger.debug("No free cell after %d attempts, skipping spawn", self.retries)
        return None
