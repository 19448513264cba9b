from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional

from .events import MatchFound, ProcessingComplete, ProcessingStarted
from .matches import Match

if TYPE_CHECKING:
    from .session import Match3

logger = logging.getLogger(__name__)

Opening = Callable[[], Awaitable[None]]


class Match3Process:
    """
    Resolves the board after a player action. Work is organised in rounds:
    find matches, let specials take their shapes, pop the rest, drop pieces and
    refill. Rounds repeat until one finds no match, which leaves the grid settled.

    The combo counter starts at 0 on every run and is bumped at the start of each
    round that has something to resolve, so the first round reports combo 1.
    """

    def __init__(self, match3: 'Match3') -> None:
        self.match3 = match3
        self.processing = False
        self.round = 0

    def is_processing(self) -> bool:
        return self.processing

    def get_process_round(self) -> int:
        return self.round

    def reset(self) -> None:
        self.processing = False
        self.round = 0

    async def start(self, opening: Optional[Opening] = None) -> bool:
        """
        Runs the cascade until the grid is settled. `opening` is an extra first
        round (a special detonation) that is resolved before looking for matches.
        Returns False without doing anything if a run is already active or the
        game is not being played.
        """
        if self.processing or not self.match3.is_playing():
            return False
        self.processing = True
        self.round = 0
        events = self.match3.events
        events.publish(ProcessingStarted())
        logger.debug('======= PROCESSING START ==========')
        try:
            if opening is not None:
                await self._run_opening_round(opening)
            while await self._run_round():
                pass
        finally:
            self.processing = False
        logger.debug('Sequence rounds: %d', self.round)
        logger.debug('Grid:\n%s', self.match3.board.grid.pretty())
        logger.debug('======= PROCESSING COMPLETE =======')
        events.publish(ProcessingComplete(combo=self.round))
        return True

    async def _run_opening_round(self, opening: Opening) -> None:
        await self.match3.pacer.wait()
        self.round += 1
        logger.debug('-- OPENING ROUND #%d START', self.round)
        await opening()
        await self._settle()
        logger.debug('-- OPENING ROUND #%d FINISH', self.round)

    async def _run_round(self) -> bool:
        await self.match3.pacer.wait()
        board = self.match3.board
        matches = board.find_matches()
        if not matches:
            logger.debug('Checkpoint - nothing left to do')
            return False

        self.round += 1
        logger.debug('-- SEQUENCE ROUND #%d START - matches: %d', self.round, len(matches))
        self.match3.events.publish(MatchFound(matches=tuple(matches), combo=self.round))

        consumed = await self.match3.special.process(matches)
        await self.match3.pacer.wait()
        remaining: List[Match] = [m for m in matches if m not in consumed]
        if remaining:
            await asyncio.gather(*(board.pop_pieces(m) for m in remaining))

        await self._settle()
        logger.debug('-- SEQUENCE ROUND #%d FINISH', self.round)
        return True

    async def _settle(self) -> None:
        await self.match3.pacer.wait()
        await self.match3.board.apply_gravity()
        await self.match3.board.refill()
