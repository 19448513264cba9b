from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import Match3Config
from .events import GridRefilled, PiecePopped, PieceSpawned, PiecesFell
from .grid import EMPTY, Grid, PieceType, Position, apply_gravity, create_grid, fill_up
from .matches import Match, find_matches, unique_positions
from .pieces import is_special_name, types_map_for_mode

if TYPE_CHECKING:
    from .session import Match3

logger = logging.getLogger(__name__)


class Board:
    """
    Owns the grid state and is the only component that writes grid cells.
    Everything else reads the grid through these accessors and asks the board
    to pop, spawn, drop and refill pieces.
    """

    def __init__(self, match3: 'Match3') -> None:
        self.match3 = match3
        self.grid = Grid(rows=0, columns=0)
        self.rows = 0
        self.columns = 0
        self.tile_size = 0
        self.common_types: List[PieceType] = []
        self.special_types: List[PieceType] = []
        self.types_map: Dict[PieceType, str] = {}
        self.rng = random.Random()

    def setup(self, config: Match3Config, rows: Optional[Sequence[Sequence[PieceType]]] = None) -> None:
        """
        Registers the piece types for the config's mode and builds the initial grid.
        Without explicit `rows` the grid is random and free of runs.
        """
        self.tile_size = config.tile_size
        self.rng = random.Random(config.seed)
        self.types_map = types_map_for_mode(config.mode)
        self.common_types = []
        self.special_types = []
        for piece_type, name in self.types_map.items():
            if is_special_name(name):
                self.special_types.append(piece_type)
                self.match3.special.add_handler(name, piece_type)
            else:
                self.common_types.append(piece_type)

        if rows is not None:
            self.grid = Grid.from_rows(rows)
        else:
            self.grid = create_grid(config.rows, config.columns, self.common_types, self.rng)
        self.rows = self.grid.rows
        self.columns = self.grid.columns
        logger.info('Board ready: %dx%d, mode %s', self.rows, self.columns, config.mode)

    def reset(self) -> None:
        self.grid = Grid(rows=0, columns=0)
        self.rows = self.columns = 0
        self.common_types = []
        self.special_types = []
        self.types_map = {}

    # ---------- queries ----------

    def in_bounds(self, position: Position) -> bool:
        return self.grid.in_bounds(position)

    def get_type(self, position: Position) -> PieceType:
        return self.grid.get(position)

    def is_common(self, piece_type: PieceType) -> bool:
        return piece_type in self.common_types

    def is_special(self, piece_type: PieceType) -> bool:
        return piece_type in self.special_types

    def type_by_name(self, name: str) -> PieceType:
        for piece_type, piece_name in self.types_map.items():
            if piece_name == name:
                return piece_type
        raise KeyError(name)

    def for_each(self, fn: Callable[[Position, PieceType], None]) -> None:
        self.grid.for_each(fn)

    def find_matches(self, filter_positions: Optional[Iterable[Position]] = None) -> List[Match]:
        """Matches among common pieces currently on the board."""
        return find_matches(self.grid, self.is_common, filter_positions)

    def get_width(self) -> int:
        return self.tile_size * self.columns

    def get_height(self) -> int:
        return self.tile_size * self.rows

    # ---------- mutation ----------

    def set_type(self, position: Position, piece_type: PieceType) -> None:
        self.grid.set(position, piece_type)

    def swap(self, a: Position, b: Position) -> None:
        self.grid.swap(a, b)

    async def spawn_piece(self, position: Position, piece_type: PieceType) -> None:
        """Places a new piece, replacing whatever sits at the position."""
        self.grid.set(position, piece_type)
        if piece_type == EMPTY:
            return
        duration = self.match3.config.spawn_duration
        self.match3.events.publish(PieceSpawned(position=position, piece_type=piece_type, duration=duration))
        await self.match3.pacer.wait(duration)

    async def pop_piece(
        self,
        position: Position,
        caused_by_special: bool = False,
        bypass_special_trigger: bool = False,
    ) -> Optional[PieceType]:
        """
        Empties a cell and reports the pop. Popping a special piece fires its
        trigger unless `bypass_special_trigger` is set. Returns the popped type,
        or None if the cell was already empty.
        """
        piece_type = self.grid.get(position)
        if piece_type == EMPTY:
            return None
        is_special = self.is_special(piece_type)
        self.grid.set(position, EMPTY)
        duration = self.match3.config.pop_duration
        self.match3.events.publish(PiecePopped(
            position=position,
            piece_type=piece_type,
            is_special=is_special,
            combo=self.match3.process.round,
            caused_by_special=caused_by_special,
            duration=duration,
        ))
        await self.match3.pacer.wait(duration)
        if is_special and not bypass_special_trigger:
            await self.match3.special.trigger(piece_type, position)
        return piece_type

    async def pop_pieces(
        self,
        positions: Iterable[Position],
        caused_by_special: bool = False,
        bypass_special_trigger: bool = False,
    ) -> List[Tuple[Position, PieceType]]:
        """Pops positions all together; returns (position, type) for every cell actually popped."""
        targets = unique_positions(positions)
        for position in targets:
            self.grid.check(position)
        results = await asyncio.gather(*(
            self.pop_piece(position, caused_by_special, bypass_special_trigger) for position in targets
        ))
        return [(position, t) for position, t in zip(targets, results) if t is not None]

    async def apply_gravity(self) -> List[Tuple[Position, Position]]:
        changes = apply_gravity(self.grid)
        logger.debug('Apply gravity - moved pieces: %d', len(changes))
        if changes:
            duration = self.match3.config.fall_duration
            self.match3.events.publish(PiecesFell(changes=tuple(changes), duration=duration))
            await self.match3.pacer.wait(duration)
        return changes

    async def refill(self) -> List[Position]:
        positions = fill_up(self.grid, self.common_types, self.rng)
        logger.debug('Refill grid - new pieces: %d', len(positions))
        if positions:
            duration = self.match3.config.fall_duration
            self.match3.events.publish(GridRefilled(positions=tuple(positions), duration=duration))
            await self.match3.pacer.wait(duration)
        return positions
