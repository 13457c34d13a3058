import logging
import random
import threading
from typing import Callable, Mapping, Optional

from . import events
from .grid import DIRECTIONS, Position, step
from .players import Player, PlayerRegistry
from .treasures import TreasureManager

Scheduler = Callable[[float, Callable[[], None]], None]


def _timer_schedule(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class GameSession:
    """The single authoritative game shared by every connection.

    All transitions (connect, disconnect, move, chat and the delayed
    reset) run under one re-entrant lock. Events are handed to each
    player's connection while the lock is held, so every client sees them
    in the same order; connections must buffer rather than block.
    """

    def __init__(
        self,
        grid_size: int = 10,
        treasure_count: int = 5,
        win_condition: int = 3,
        reset_delay: float = 5.0,
        schedule: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if grid_size < 1:
            raise ValueError('grid_size must be at least 1')
        if treasure_count < 0:
            raise ValueError('treasure_count must not be negative')
        if win_condition < 1:
            raise ValueError('win_condition must be at least 1')
        if reset_delay < 0:
            raise ValueError('reset_delay must not be negative')
        self.grid_size = grid_size
        self.treasure_count = treasure_count
        self.win_condition = win_condition
        self.reset_delay = reset_delay
        self.logger = logger or logging.getLogger(__name__)
        rng = rng or random.Random()
        self.players = PlayerRegistry(grid_size, rng)
        self.treasures = TreasureManager(treasure_count, grid_size, rng)
        self.reset_pending = False
        self._schedule = schedule or _timer_schedule
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: Mapping, schedule: Optional[Scheduler] = None, logger=None):
        return cls(
            grid_size=int(config.get('GRID_SIZE', 10)),
            treasure_count=int(config.get('TREASURE_COUNT', 5)),
            win_condition=int(config.get('WIN_CONDITION', 3)),
            reset_delay=float(config.get('RESET_DELAY_SEC', 5)),
            schedule=schedule,
            logger=logger,
        )

    # ---- Fan-out ----

    def deliver(self, player: Player, event: dict) -> None:
        try:
            player.connection.send(event)
        except Exception:
            # One broken connection must not starve the others
            self.logger.exception(f"[send-error] player={player.id} type={event.get('type')}")

    def broadcast(self, event: dict, exclude: Optional[str] = None) -> None:
        for player in self.players.all():
            if player.id != exclude:
                self.deliver(player, event)

    # ---- Connection lifecycle ----

    def handle_connect(self, connection) -> Player:
        with self._lock:
            player = self.players.register(connection)
            self.logger.info(
                f"[connect] player={player.id} pos=({player.position.x},{player.position.y}) online={len(self.players)}"
            )
            self.deliver(player, events.init(
                player,
                grid_size=self.grid_size,
                win_condition=self.win_condition,
                treasure_count=self.treasure_count,
                players=self.players.snapshot(),
                treasures=self.treasures.snapshot(),
            ))
            self.broadcast(events.player_joined(player), exclude=player.id)
            return player

    def handle_disconnect(self, player_id: str) -> bool:
        with self._lock:
            player = self.players.unregister(player_id)
            if player is None:
                return False
            self.logger.info(f"[disconnect] player={player_id} online={len(self.players)}")
            self.broadcast(events.player_left(player_id))
            return True

    # ---- Inbound messages ----

    def handle_message(self, player_id: str, message: Mapping) -> None:
        kind = message.get('type')
        if kind == 'move':
            self.handle_move(player_id, message.get('direction'))
        elif kind == 'chat':
            self.handle_chat(player_id, message.get('message'))
        else:
            self.logger.debug(f"[ignore] player={player_id} type={kind!r}")

    def handle_move(self, player_id: str, direction) -> Optional[Position]:
        with self._lock:
            player = self.players.get(player_id)
            if player is None:
                return None
            if not isinstance(direction, str) or direction not in DIRECTIONS:
                self.logger.warning(f"[drop] player={player_id} invalid direction {direction!r}")
                return None
            player.position = step(player.position, direction, self.grid_size)
            collection = self.treasures.check_and_collect(player.position)
            if collection is not None:
                player.treasures_found += 1
                self.logger.info(
                    f"[collect] player={player.id} treasure={collection.found.id} score={player.treasures_found}"
                )
            # Emitted even when a wall kept the player in place
            self.broadcast(events.player_moved(
                player, collection.found.id if collection else None
            ))
            if collection is not None:
                self.deliver(player, events.treasure_found(player))
                self.broadcast(events.new_treasure(collection.replacement))
                if player.treasures_found >= self.win_condition:
                    self._declare_winner(player)
            return player.position

    def handle_chat(self, player_id: str, text) -> None:
        if not isinstance(text, str):
            self.logger.warning(f"[drop] player={player_id} chat message is not text")
            return
        text = text.strip()
        if not text:
            return
        with self._lock:
            if player_id not in self.players:
                return
            self.broadcast(events.chat(player_id, text))

    # ---- Round lifecycle ----

    def _declare_winner(self, player: Player) -> None:
        self.logger.info(f"[win] player={player.id} score={player.treasures_found}")
        self.broadcast(events.game_won(player))
        if self.reset_pending:
            self.logger.info(f"[reset-skip] player={player.id} reset already scheduled")
            return
        self.reset_pending = True
        self.logger.info(f"[reset-set] delay={self.reset_delay}s")
        self._schedule(self.reset_delay, self.reset)

    def reset(self) -> None:
        """Start a new round: fresh treasures, every player moved and zeroed."""
        with self._lock:
            self.logger.info(f"[reset-fire] players={len(self.players)}")
            self.treasures.reset_all()
            self.players.reset_positions_and_scores()
            self.reset_pending = False
            players = self.players.snapshot()
            treasures = self.treasures.snapshot()
            for player in self.players.all():
                self.deliver(player, events.game_reset(player, players, treasures))
            self.broadcast(events.game_restarted())

    def snapshot(self):
        with self._lock:
            return {
                'gridSize': self.grid_size,
                'winCondition': self.win_condition,
                'treasureCount': self.treasure_count,
                'resetPending': self.reset_pending,
                'players': self.players.snapshot(),
                'treasures': self.treasures.snapshot(),
            }
