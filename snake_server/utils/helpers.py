# snake_server/utils/helpers.py
"""Utility functions and helpers."""

import time
from typing import Optional

from snake_server.config.settings import NAME_MAX_LENGTH

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


def now_ms() -> float:
    """Wall clock in milliseconds."""
    return time.time() * 1000


def wrap_cell(x: int, y: int, width: int, height: int) -> tuple:
    """Reduce a coordinate onto the toroidal grid."""
    return x % width, y % height


def step_cell(cell: tuple, vector: tuple, width: int, height: int) -> tuple:
    """Move one cell along vector, wrapping on both axes."""
    return wrap_cell(cell[0] + vector[0], cell[1] + vector[1], width, height)


def is_reverse(current: tuple, proposed: tuple) -> bool:
    """Check if proposed points exactly opposite to current."""
    return current[0] == -proposed[0] and current[1] == -proposed[1]


def sanitize_name(raw: Optional[str]) -> str:
    """Trim and cap a display name; may return an empty string."""
    if not isinstance(raw, str):
        return ""
    return raw.strip()[:NAME_MAX_LENGTH]


def starting_body(head: tuple, length: int, width: int, height: int) -> list:
    """Build a straight body trailing left of head."""
    x, y = head
    return [wrap_cell(x - i, y, width, height) for i in range(length)]
