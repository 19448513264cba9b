from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from .events import TimeExpired

if TYPE_CHECKING:
    from .session import Match3

logger = logging.getLogger(__name__)


class Match3Timer:
    """Counts gameplay time, in milliseconds, from 0 up to the session duration."""

    def __init__(self, match3: 'Match3') -> None:
        self.match3 = match3
        self.time = 0.0
        self.duration = 0.0
        self.paused = False
        self.running = False  # stays True while paused

    def reset(self) -> None:
        self.time = 0.0
        self.duration = 0.0
        self.running = False
        self.paused = False

    def setup(self, duration: float) -> None:
        self.reset()
        self.duration = float(int(duration))

    def start(self) -> None:
        self.running = True
        self.paused = False
        self.time = 0.0

    def stop(self) -> None:
        self.running = False
        self.paused = False
        self.time = self.duration

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def update(self, delta: float) -> None:
        """Advances the clock; publishes TimeExpired once the duration is reached."""
        if not math.isfinite(delta):
            raise ValueError(f"Timer delta must be finite, got {delta!r}")
        if not self.running or self.paused:
            return
        self.time += delta
        if self.time >= self.duration:
            self.stop()
            logger.info('Time is up')
            self.match3.events.publish(TimeExpired())

    def get_time(self) -> float:
        return self.time

    def get_time_remaining(self) -> float:
        return self.duration - self.time
