from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .grid import EMPTY, Grid, PieceType, Position

Match = Tuple[Position, ...]  # ordered run of same-type positions along one axis

MATCH_SIZE = 3


def _scan(grid: Grid, horizontal: bool, matchable: Callable[[PieceType], bool], size: int) -> List[Match]:
    matches: List[Match] = []
    primary = grid.rows if horizontal else grid.columns
    secondary = grid.columns if horizontal else grid.rows
    for p in range(primary):
        run: List[Position] = []
        last: PieceType = EMPTY
        for s in range(secondary):
            r, c = (p, s) if horizontal else (s, p)
            piece_type = grid.cells[r][c]
            if piece_type != EMPTY and piece_type == last and matchable(piece_type):
                run.append((r, c))
                continue
            if len(run) >= size:
                matches.append(tuple(run))
            run = [(r, c)]
            last = piece_type
        if len(run) >= size:
            matches.append(tuple(run))
    return matches


def find_matches(
    grid: Grid,
    matchable: Optional[Callable[[PieceType], bool]] = None,
    filter_positions: Optional[Iterable[Position]] = None,
    size: int = MATCH_SIZE,
) -> List[Match]:
    """
    Finds every maximal run of `size` or more same-typed pieces, scanning rows and
    then columns in a single pass each. A horizontal and a vertical run sharing
    cells are reported as two separate matches.

    `matchable` restricts which types can form runs (defaults to any non-empty type).
    When `filter_positions` is given, only matches containing one of them are kept.
    """
    accept = matchable or (lambda t: t != EMPTY)
    found = _scan(grid, True, accept, size) + _scan(grid, False, accept, size)
    if filter_positions is None:
        return found
    wanted = set(filter_positions)
    return [m for m in found if any(p in wanted for p in m)]


def is_vertical(match: Sequence[Position]) -> bool:
    return len(match) >= 2 and match[0][1] == match[1][1]


def is_horizontal(match: Sequence[Position]) -> bool:
    return len(match) >= 2 and match[0][0] == match[1][0]


def middle_position(match: Sequence[Position]) -> Position:
    return match[len(match) // 2]


def unique_positions(positions: Iterable[Position]) -> List[Position]:
    """Drops repeated positions, keeping first-seen order."""
    return list(dict.fromkeys(positions))
