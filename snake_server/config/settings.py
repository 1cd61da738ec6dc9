# snake_server/config/settings.py
"""Game configuration constants and settings."""

import os

# Grid settings
GRID_WIDTH = 48
GRID_HEIGHT = 32

# Server settings
TICK_RATE = 20  # broadcast ticks per second
MAX_PLAYERS = 10  # active players; later joins become spectators
HOST = os.environ.get("SNAKE_HOST", "0.0.0.0")
PORT = int(os.environ.get("SNAKE_PORT", "8000"))
LOG_LEVEL = os.environ.get("SNAKE_LOG_LEVEL", "INFO")

# Round settings
ROUND_DURATION_MS = 60 * 1000
MIN_READY_PLAYERS = 2

# Snake settings
START_LENGTH = 3
MIN_LENGTH = 2
RESPAWN_DELAY_MS = 600
KILL_BONUS = 2
NAME_MAX_LENGTH = 16

# Consumable settings
APPLE_COUNT = 4
POWERUP_COUNT = 2
SPAWN_RETRIES = 500

# Buff durations
SHIELD_MS = 1500  # invulnerability on (re)spawn
GHOST_MS = 5000
FIRE_MS = 6000

# Projectile settings
PROJECTILE_RANGE = 16  # cells travelled before it fizzles
PROJECTILE_DAMAGE = 1  # tail segments removed per hit

# Movement cadence per speed tier (ms between steps, lower is faster)
SPEEDS = {"slow": 110, "normal": 70, "fast": 50}
DEFAULT_SPEED = "slow"

# Death penalty per game mode
MODES = {"classic": "reset", "balanced": "minus3"}
DEFAULT_MODE = "balanced"
BALANCED_DEATH_PENALTY = 3

# Cosmetics
COLORS = [
    "#e11d48",
    "#0ea5e9",
    "#22c55e",
    "#a855f7",
    "#f97316",
    "#14b8a6",
    "#f43f5e",
    "#10b981",
    "#f59e0b",
    "#3b82f6",
]
HEADS = ["🐸", "🦄", "🐧", "🐙", "🐝", "🐲", "🦖", "👾", "😎", "🦈"]


def get_game_config():
    """Get the complete game configuration as a dictionary."""
    return {
        "grid": {"width": GRID_WIDTH, "height": GRID_HEIGHT},
        "tickRate": TICK_RATE,
        "maxPlayers": MAX_PLAYERS,
        "roundDurationMs": ROUND_DURATION_MS,
        "minReadyPlayers": MIN_READY_PLAYERS,
        "startLength": START_LENGTH,
        "minLength": MIN_LENGTH,
        "respawnDelayMs": RESPAWN_DELAY_MS,
        "killBonus": KILL_BONUS,
        "appleCount": APPLE_COUNT,
        "powerupCount": POWERUP_COUNT,
        "shieldMs": SHIELD_MS,
        "ghostMs": GHOST_MS,
        "fireMs": FIRE_MS,
        "projectileRange": PROJECTILE_RANGE,
        "speeds": dict(SPEEDS),
        "modes": list(MODES),
        "colors": list(COLORS),
        "heads": list(HEADS),
    }
