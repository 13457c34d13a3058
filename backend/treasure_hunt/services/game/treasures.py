import itertools
import random
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from .grid import Position, random_position


@dataclass
class Treasure:
    id: str
    position: Position

    def to_dict(self):
        return {'id': self.id, 'x': self.position.x, 'y': self.position.y}


class Collection(NamedTuple):
    found: Treasure
    replacement: Treasure


class TreasureManager:
    """Owns the active treasure set for one session.

    Positions are drawn independently, so two treasures may share a cell.
    Not synchronised on its own: the session lock guards every call.
    """

    def __init__(self, count: int, grid_size: int, rng: Optional[random.Random] = None):
        self.count = count
        self.grid_size = grid_size
        self._rng = rng or random.Random()
        self._ids = itertools.count()
        self.treasures: List[Treasure] = self.generate_all()

    def _new_treasure(self) -> Treasure:
        return Treasure(
            id=f"t-{next(self._ids)}",
            position=random_position(self.grid_size, self._rng),
        )

    def generate_all(self) -> List[Treasure]:
        return [self._new_treasure() for _ in range(self.count)]

    def check_and_collect(self, position: Position) -> Optional[Collection]:
        """Collect the first treasure lying on ``position``, if any.

        The collected treasure is replaced by a fresh one at a new random
        cell, keeping the active count constant.
        """
        for index, treasure in enumerate(self.treasures):
            if treasure.position == position:
                del self.treasures[index]
                replacement = self._new_treasure()
                self.treasures.append(replacement)
                return Collection(found=treasure, replacement=replacement)
        return None

    def reset_all(self) -> None:
        self.treasures = self.generate_all()

    def snapshot(self):
        return [t.to_dict() for t in self.treasures]

    def __len__(self):
        return len(self.treasures)
