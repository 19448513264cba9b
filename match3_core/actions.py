from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .events import MoveAttempted
from .grid import EMPTY, Position, is_adjacent
from .matches import find_matches

if TYPE_CHECKING:
    from .session import Match3

logger = logging.getLogger(__name__)


class Match3Actions:
    """
    The actions a player can take: swap two adjacent pieces, or tap a special
    piece. Rejected actions never change the grid; moves report the outcome
    through a MoveAttempted event.
    """

    def __init__(self, match3: 'Match3') -> None:
        self.match3 = match3
        self.free_moves = False
        self.busy = False

    def setup(self, free_moves: bool) -> None:
        self.free_moves = free_moves

    def can_act(self) -> bool:
        return self.match3.is_playing() and not self.busy and not self.match3.process.is_processing()

    def validate_move(self, from_position: Position, to_position: Position) -> bool:
        """Checks a swap without committing it."""
        board = self.match3.board
        if not self.can_act():
            return False
        if not (board.in_bounds(from_position) and board.in_bounds(to_position)):
            return False
        if not is_adjacent(from_position, to_position):
            return False
        type_from = board.get_type(from_position)
        type_to = board.get_type(to_position)
        if type_from == EMPTY or type_to == EMPTY:
            return False
        if self.free_moves:
            return True
        # Swapping a special piece always goes through, it detonates right after.
        if board.is_special(type_from) or board.is_special(type_to):
            return True
        # Swap in a scratch copy and look for runs through the two cells.
        scratch = board.grid.clone()
        scratch.swap(from_position, to_position)
        return len(find_matches(scratch, board.is_common, [from_position, to_position])) >= 1

    async def move(self, from_position: Position, to_position: Position) -> bool:
        """
        Swaps two pieces and resolves the board. Invalid moves (busy board, out of
        bounds, not adjacent, or no match created while free moves is off) leave
        the grid untouched. Returns True if the move was accepted.
        """
        valid = self.validate_move(from_position, to_position)
        self.match3.events.publish(MoveAttempted(
            from_position=from_position,
            to_position=to_position,
            valid=valid,
        ))
        if not valid:
            logger.debug('Rejected move %s -> %s', from_position, to_position)
            return False

        board = self.match3.board
        logger.debug('ACTION! Move: %s to %s', from_position, to_position)
        self.busy = True
        try:
            board.swap(from_position, to_position)
            await self.match3.pacer.wait(self.match3.config.swap_duration)
        finally:
            self.busy = False

        detonate = None
        for position in (from_position, to_position):
            if board.is_special(board.get_type(position)):
                detonate = position
                break
        if detonate is None:
            await self.match3.process.start()
        else:
            await self.match3.process.start(lambda: self.detonate(detonate))
        return True

    async def tap_special(self, position: Position) -> bool:
        """Fires the special piece at `position` in place, then resolves the board."""
        board = self.match3.board
        if not self.can_act() or not board.in_bounds(position):
            return False
        if not board.is_special(board.get_type(position)):
            return False
        logger.debug('ACTION! Tap: %s', position)
        await self.match3.process.start(lambda: self.detonate(position))
        return True

    async def detonate(self, position: Position) -> None:
        """Pops the special piece at `position` and releases its effect."""
        board = self.match3.board
        piece_type = board.get_type(position)
        await board.pop_piece(position, bypass_special_trigger=True)
        await self.match3.special.trigger(piece_type, position)
