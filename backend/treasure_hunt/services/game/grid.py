import random
from typing import Dict, NamedTuple, Tuple

# Row 0 is the top of the board, so "up" decreases y
DIRECTIONS: Dict[str, Tuple[int, int]] = {
    'up': (0, -1),
    'down': (0, 1),
    'left': (-1, 0),
    'right': (1, 0),
}


class Position(NamedTuple):
    x: int
    y: int

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


def clamp(coord: int, delta: int, size: int) -> int:
    """Apply ``delta`` to ``coord`` without leaving ``[0, size - 1]``."""
    return max(0, min(size - 1, coord + delta))


def step(position: Position, direction: str, size: int) -> Position:
    """Move one cell in ``direction``; walls stop the move, no wraparound."""
    try:
        dx, dy = DIRECTIONS[direction]
    except (KeyError, TypeError):
        raise ValueError(f"unknown direction: {direction!r}")
    return Position(clamp(position.x, dx, size), clamp(position.y, dy, size))


def random_position(size: int, rng: random.Random) -> Position:
    return Position(rng.randrange(size), rng.randrange(size))
