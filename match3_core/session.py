from __future__ import annotations

import logging
from typing import Optional, Sequence

from .actions import Match3Actions
from .board import Board
from .config import Match3Config, get_config, validate_config
from .errors import InvalidStateError
from .events import EventBus, TimeExpired
from .grid import PieceType, Position
from .pacing import Pacer
from .process import Match3Process
from .specials import SpecialRegistry
from .stats import Match3Stats
from .timer import Match3Timer

logger = logging.getLogger(__name__)


class Match3:
    """
    One game session. Builds every sub-system once and hands each of them this
    object, so they reach each other through it instead of through globals.
    Collaborators (renderers, audio, HTTP, terminal) subscribe to `events`.
    """

    def __init__(self, config: Optional[Match3Config] = None) -> None:
        self.config = validate_config(config) if config is not None else get_config()
        self.events = EventBus()
        self.pacer = Pacer(self.config.time_scale)
        self.timer = Match3Timer(self)
        self.stats = Match3Stats(self)
        self.special = SpecialRegistry(self)
        self.board = Board(self)
        self.actions = Match3Actions(self)
        self.process = Match3Process(self)
        self._playing = False
        self.events.subscribe(TimeExpired, self._on_time_expired)

    def setup(self, config: Optional[Match3Config] = None, rows: Optional[Sequence[Sequence[PieceType]]] = None) -> None:
        """
        Sets up a new game. `rows` replaces the random initial grid with an exact
        layout (its size wins over the config's rows and columns).
        """
        if self.process.is_processing():
            raise InvalidStateError('Cannot set up a new game while the board is processing')
        if config is not None:
            self.config = validate_config(config)
        self.reset()
        self.pacer.time_scale = self.config.time_scale
        self.actions.setup(self.config.free_moves)
        self.board.setup(self.config, rows)
        self.timer.setup(self.config.duration * 1000)

    def reset(self) -> None:
        self._playing = False
        self.timer.reset()
        self.stats.reset()
        self.board.reset()
        self.special.reset()
        self.process.reset()
        self.pacer.resume()

    def start_playing(self) -> None:
        self._playing = True
        self.timer.start()
        logger.info('Playing')

    def stop_playing(self) -> None:
        self._playing = False
        self.timer.stop()
        logger.info('Stopped playing')

    def is_playing(self) -> bool:
        return self._playing

    def pause(self) -> None:
        self.timer.pause()
        self.pacer.pause()

    def resume(self) -> None:
        self.timer.resume()
        self.pacer.resume()

    def update(self, delta: float) -> None:
        """Advances the session clock by `delta` milliseconds."""
        self.timer.update(delta)

    async def move(self, from_position: Position, to_position: Position) -> bool:
        return await self.actions.move(from_position, to_position)

    async def tap(self, position: Position) -> bool:
        return await self.actions.tap_special(position)

    def _on_time_expired(self, _event: TimeExpired) -> None:
        # The clock already stopped itself; only stop accepting actions.
        self._playing = False
