import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .grid import Position, random_position


@dataclass
class Player:
    id: str
    position: Position
    # Transport handle with a non-blocking ``send(event)``
    connection: Any = field(repr=False, compare=False)
    treasures_found: int = 0

    def to_dict(self):
        return {
            'id': self.id,
            'x': self.position.x,
            'y': self.position.y,
            'treasuresFound': self.treasures_found,
        }


class PlayerRegistry:
    def __init__(self, grid_size: int, rng: Optional[random.Random] = None):
        self.grid_size = grid_size
        self._rng = rng or random.Random()
        self._players: Dict[str, Player] = {}

    def _new_id(self) -> str:
        # 4 random bytes as hex; retry on the (rare) clash with a live id
        while True:
            player_id = f"{self._rng.getrandbits(32):08x}"
            if player_id not in self._players:
                return player_id

    def register(self, connection) -> Player:
        player = Player(
            id=self._new_id(),
            position=random_position(self.grid_size, self._rng),
            connection=connection,
        )
        self._players[player.id] = player
        return player

    def unregister(self, player_id: str) -> Optional[Player]:
        return self._players.pop(player_id, None)

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def all(self) -> List[Player]:
        return list(self._players.values())

    def reset_positions_and_scores(self) -> None:
        for player in self._players.values():
            player.position = random_position(self.grid_size, self._rng)
            player.treasures_found = 0

    def snapshot(self):
        return {pid: p.to_dict() for pid, p in self._players.items()}

    def __contains__(self, player_id):
        return player_id in self._players

    def __len__(self):
        return len(self._players)
