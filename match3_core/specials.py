from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Dict, List, Sequence, Type

from .grid import PieceType, Position
from .matches import Match, is_horizontal, is_vertical, middle_position
from .pieces import SPECIAL_BLAST, SPECIAL_COLOUR, SPECIAL_COLUMN, SPECIAL_ROW

if TYPE_CHECKING:
    from .session import Match3

logger = logging.getLogger(__name__)


class SpecialHandler:
    """
    A special piece strategy. `process` looks at a round's matches, pops the ones
    whose shape qualifies and spawns the special piece in their place. `trigger`
    releases the special's area effect when a piece of its type is detonated.
    """

    def __init__(self, match3: 'Match3', piece_type: PieceType) -> None:
        self.match3 = match3
        self.piece_type = piece_type

    async def process(self, matches: Sequence[Match]) -> List[Match]:
        """Returns the matches this handler consumed."""
        return []

    def affected_positions(self, position: Position) -> List[Position]:
        raise NotImplementedError

    async def trigger(self, piece_type: PieceType, position: Position) -> None:
        if piece_type != self.piece_type:
            return
        board = self.match3.board
        positions = [p for p in self.affected_positions(position) if board.in_bounds(p)]
        popped = await board.pop_pieces(positions, caused_by_special=True, bypass_special_trigger=True)
        # Specials caught in the area are detonated explicitly, each exactly once.
        chained = [(p, t) for p, t in popped if board.is_special(t)]
        if chained:
            await asyncio.gather(*(self.match3.special.trigger(t, p) for p, t in chained))


class _SpawnFromRun(SpecialHandler):
    """Spawns the special at the middle of every single run with a qualifying shape."""

    def qualifies(self, match: Match) -> bool:
        raise NotImplementedError

    async def process(self, matches: Sequence[Match]) -> List[Match]:
        board = self.match3.board
        consumed: List[Match] = []
        for match in reversed(matches):
            if not self.qualifies(match):
                continue
            origin = middle_position(match)
            await board.pop_pieces(match)
            await board.spawn_piece(origin, self.piece_type)
            consumed.append(match)
        return consumed


class SpecialBlast(SpecialHandler):
    """Spawned where matches cross; pops a diamond of 12 cells around itself."""

    async def process(self, matches: Sequence[Match]) -> List[Match]:
        per_position: Dict[Position, List[Match]] = {}
        for match in matches:
            for position in match:
                per_position.setdefault(position, []).append(match)

        crossings = [p for p, ms in per_position.items() if len(ms) >= 2]
        consumed: List[Match] = []
        for position in crossings:
            for match in per_position[position]:
                if match not in consumed:
                    consumed.append(match)
        if not consumed:
            return consumed

        board = self.match3.board
        await asyncio.gather(*(board.pop_pieces(m) for m in consumed))
        for position in crossings:
            await board.spawn_piece(position, self.piece_type)
        return consumed

    def affected_positions(self, position: Position) -> List[Position]:
        r, c = position
        return [
            (r - 2, c),
            (r - 1, c - 1), (r - 1, c), (r - 1, c + 1),
            (r, c - 2), (r, c - 1), (r, c + 1), (r, c + 2),
            (r + 1, c - 1), (r + 1, c), (r + 1, c + 1),
            (r + 2, c),
        ]


class SpecialRow(_SpawnFromRun):
    """Spawned by a vertical run of four; clears its whole row."""

    def qualifies(self, match: Match) -> bool:
        return len(match) == 4 and is_vertical(match)

    def affected_positions(self, position: Position) -> List[Position]:
        return [(position[0], c) for c in range(self.match3.board.columns)]


class SpecialColumn(_SpawnFromRun):
    """Spawned by a horizontal run of four; clears its whole column."""

    def qualifies(self, match: Match) -> bool:
        return len(match) == 4 and is_horizontal(match)

    def affected_positions(self, position: Position) -> List[Position]:
        return [(r, position[1]) for r in range(self.match3.board.rows)]


class SpecialColour(_SpawnFromRun):
    """Spawned by a run of five or more; clears every piece of the most numerous common type."""

    def qualifies(self, match: Match) -> bool:
        return len(match) >= 5

    def affected_positions(self, position: Position) -> List[Position]:
        board = self.match3.board
        counts: Dict[PieceType, int] = {}
        selected: PieceType = 0
        selected_count = 0
        for pos in board.grid.positions():
            piece_type = board.get_type(pos)
            if not board.is_common(piece_type):
                continue
            counts[piece_type] = counts.get(piece_type, 0) + 1
            # Strictly greater: on a tie the type that got there first keeps it.
            if counts[piece_type] > selected_count:
                selected_count = counts[piece_type]
                selected = piece_type
        if not selected:
            return []
        return [pos for pos in board.grid.positions() if board.get_type(pos) == selected]


AVAILABLE_SPECIALS: Dict[str, Type[SpecialHandler]] = {
    SPECIAL_BLAST: SpecialBlast,
    SPECIAL_ROW: SpecialRow,
    SPECIAL_COLUMN: SpecialColumn,
    SPECIAL_COLOUR: SpecialColour,
}


class SpecialRegistry:
    """Keeps one handler per special type registered for the session."""

    def __init__(self, match3: 'Match3') -> None:
        self.match3 = match3
        self.special_types: List[PieceType] = []
        self.handlers: List[SpecialHandler] = []

    def reset(self) -> None:
        self.special_types.clear()
        self.handlers.clear()

    def is_special_available(self, name: str) -> bool:
        return name in AVAILABLE_SPECIALS

    def add_handler(self, name: str, piece_type: PieceType) -> None:
        if not self.is_special_available(name):
            logger.warning('No handler for special %s', name)
            return
        self.special_types.append(piece_type)
        self.handlers.append(AVAILABLE_SPECIALS[name](self.match3, piece_type))

    def is_special(self, piece_type: PieceType) -> bool:
        return piece_type in self.special_types

    def handler_for(self, piece_type: PieceType) -> SpecialHandler:
        for handler in self.handlers:
            if handler.piece_type == piece_type:
                return handler
        raise KeyError(piece_type)

    async def process(self, matches: Sequence[Match]) -> List[Match]:
        """
        Lets every handler, in registration order, spawn specials out of the round's
        matches. A match consumed by one handler is not offered to the next ones.
        Returns every consumed match.
        """
        consumed: List[Match] = []
        for handler in self.handlers:
            pending = [m for m in matches if m not in consumed]
            if not pending:
                break
            taken = await handler.process(pending)
            if taken:
                logger.debug('%s consumed %d match(es)', type(handler).__name__, len(taken))
            consumed.extend(taken)
        return consumed

    async def trigger(self, piece_type: PieceType, position: Position) -> None:
        if not self.is_special(piece_type):
            return
        logger.debug('Trigger %s at %s', self.match3.board.types_map.get(piece_type), position)
        for handler in self.handlers:
            await handler.trigger(piece_type, position)
