from typing import Dict, List, Optional, Sequence, Tuple

from game import Match3, MatchFound, ProcessingComplete, get_config

# Normal mode numbering: commons 1..5, then the specials.
DRAGON, FROG, NEWT, SNAKE, SPIDER = 1, 2, 3, 4, 5
BLAST, ROW, COLUMN, COLOUR = 6, 7, 8, 9


def checker_rows(rows: int, columns: int, overrides: Optional[Dict[Tuple[int, int], int]] = None) -> List[List[int]]:
    """SNAKE/SPIDER checkerboard: equal types are never orthogonal neighbours, so it holds no run."""
    grid = [[SNAKE if (r + c) % 2 == 0 else SPIDER for c in range(columns)] for r in range(rows)]
    for (r, c), t in (overrides or {}).items():
        grid[r][c] = t
    return grid


def make_game(rows: Sequence[Sequence[int]], mode: str = 'normal', free_moves: bool = False, seed: int = 7) -> Match3:
    config = get_config(
        rows=len(rows),
        columns=len(rows[0]),
        mode=mode,
        free_moves=free_moves,
        seed=seed,
    )
    match3 = Match3(config)
    match3.setup(rows=rows)
    match3.start_playing()
    return match3


class Recorder:
    """Collects every event a session publishes."""

    def __init__(self, match3: Match3) -> None:
        self.events: list = []
        match3.events.subscribe_all(self.events.append)

    def of(self, event_type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]

    def first_round(self, event_type) -> list:
        """Events of a type published between the first MatchFound and the next MatchFound/ProcessingComplete."""
        out = []
        inside = False
        for e in self.events:
            if isinstance(e, MatchFound):
                if inside:
                    break
                inside = True
                continue
            if isinstance(e, ProcessingComplete):
                if inside:
                    break
                continue
            if inside and isinstance(e, event_type):
                out.append(e)
        return out
