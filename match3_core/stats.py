from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict

from .events import MatchFound, PiecePopped

if TYPE_CHECKING:
    from .session import Match3

AVG_POINTS_PER_SECOND = 8


@dataclass
class StatsData:
    score: int = 0
    matches: int = 0
    pops: int = 0
    specials: int = 0
    grade: int = 0


def calculate_grade(score: int, play_time: float) -> int:
    """Grade from 0 (worst) to 3 (best) for a score made in `play_time` milliseconds."""
    seconds = play_time / 1000
    if seconds <= 0:
        return 0
    points_per_second = score / seconds
    if points_per_second > AVG_POINTS_PER_SECOND * 2:
        return 3
    if points_per_second > AVG_POINTS_PER_SECOND:
        return 2
    if points_per_second > AVG_POINTS_PER_SECOND * 0.1:
        return 1
    return 0


class Match3Stats:
    """Scores the session by listening to match and pop events."""

    def __init__(self, match3: 'Match3') -> None:
        self.match3 = match3
        self.data = StatsData()
        match3.events.subscribe(MatchFound, self.register_match)
        match3.events.subscribe(PiecePopped, self.register_pop)

    def reset(self) -> None:
        self.data = StatsData()

    def register_pop(self, event: PiecePopped) -> None:
        self.data.score += 3 if event.caused_by_special else 1
        self.data.pops += 1
        if event.is_special:
            self.data.specials += 1

    def register_match(self, event: MatchFound) -> None:
        for match in event.matches:
            self.data.score += len(match) + len(event.matches) * event.combo
            self.data.matches += 1

    def get_score(self) -> int:
        return self.data.score

    def performance(self) -> Dict[str, Any]:
        out = asdict(self.data)
        out['grade'] = calculate_grade(self.data.score, self.match3.timer.get_time())
        return out
