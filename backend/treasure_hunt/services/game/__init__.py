"""Game domain services: grid, treasures, players and the session.

This package contains the transport-agnostic game logic. Socket.IO
handlers and the stream gateway only decode frames and feed them into
``GameSession``; they never touch the registry or treasures directly.
"""

from .grid import DIRECTIONS, Position
from .session import GameSession

__all__ = ['DIRECTIONS', 'Position', 'GameSession']
