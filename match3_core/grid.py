from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import NotAdjacentError, OutOfBoundsError

PieceType = int  # 0 is an empty cell, common and special types are > 0
Position = Tuple[int, int]  # (row, column), row 0 is the top of the board

EMPTY: PieceType = 0


def is_adjacent(a: Position, b: Position) -> bool:
    """True if the two positions differ by exactly one step along exactly one axis."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


@dataclass
class Grid:
    """Mutable rows x columns matrix of piece types."""
    rows: int
    columns: int
    cells: List[List[PieceType]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[EMPTY] * self.columns for _ in range(self.rows)]
        if len(self.cells) != self.rows or any(len(row) != self.columns for row in self.cells):
            raise ValueError(f"Cells do not describe a {self.rows}x{self.columns} grid")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[PieceType]]) -> 'Grid':
        """Builds a grid from a list of rows, copying the values."""
        cells = [list(row) for row in rows]
        return cls(rows=len(cells), columns=len(cells[0]) if cells else 0, cells=cells)

    def in_bounds(self, position: Position) -> bool:
        r, c = position
        return 0 <= r < self.rows and 0 <= c < self.columns

    def check(self, position: Position) -> None:
        if not self.in_bounds(position):
            raise OutOfBoundsError(position, self.rows, self.columns)

    def get(self, position: Position) -> PieceType:
        self.check(position)
        return self.cells[position[0]][position[1]]

    def set(self, position: Position, piece_type: PieceType) -> None:
        self.check(position)
        self.cells[position[0]][position[1]] = piece_type

    def swap(self, a: Position, b: Position) -> None:
        """Exchanges the types of two adjacent positions."""
        self.check(a)
        self.check(b)
        if not is_adjacent(a, b):
            raise NotAdjacentError(a, b)
        self._exchange(a, b)

    def _exchange(self, a: Position, b: Position) -> None:
        (ar, ac), (br, bc) = a, b
        self.cells[ar][ac], self.cells[br][bc] = self.cells[br][bc], self.cells[ar][ac]

    def positions(self) -> Iterator[Position]:
        """Iterates over all positions, row-major."""
        for r in range(self.rows):
            for c in range(self.columns):
                yield (r, c)

    def for_each(self, fn: Callable[[Position, PieceType], None]) -> None:
        for r in range(self.rows):
            for c in range(self.columns):
                fn((r, c), self.cells[r][c])

    def empty_positions(self) -> List[Position]:
        return [(r, c) for (r, c) in self.positions() if self.cells[r][c] == EMPTY]

    def clone(self) -> 'Grid':
        return Grid(rows=self.rows, columns=self.columns, cells=[row[:] for row in self.cells])

    def to_rows(self) -> List[List[PieceType]]:
        return [row[:] for row in self.cells]

    def pretty(self) -> str:
        """Two-digit-per-cell rendering, handy in logs and the terminal."""
        lines: List[str] = []
        for row in self.cells:
            lines.append('|' + '|'.join(str(t).rjust(2, '0') for t in row) + '|')
        return "\n".join(lines)


def random_type(rng: random.Random, types: Sequence[PieceType], exclude: Iterable[PieceType] = ()) -> PieceType:
    """Picks a random type, skipping excluded ones. Falls back to the full list if all are excluded."""
    excluded = set(exclude)
    candidates = [t for t in types if t not in excluded] or list(types)
    return rng.choice(candidates)


def _completes_run(grid: Grid, r: int, c: int, piece_type: PieceType) -> bool:
    # Only the two cells to the left and the two above are filled at this point.
    cells = grid.cells
    horizontal = c >= 2 and cells[r][c - 1] == piece_type and cells[r][c - 2] == piece_type
    vertical = r >= 2 and cells[r - 1][c] == piece_type and cells[r - 2][c] == piece_type
    return horizontal or vertical


def create_grid(rows: int, columns: int, types: Sequence[PieceType], rng: Optional[random.Random] = None) -> Grid:
    """
    Creates a grid filled with random types that contains no run of three.
    Each cell is rerolled, excluding rejected types, while it would complete a run
    with the previous cells of its row or column.
    """
    if not types:
        raise ValueError('At least one piece type is required')
    rng = rng or random.Random()
    grid = Grid(rows=rows, columns=columns)
    for r in range(rows):
        for c in range(columns):
            rejected: List[PieceType] = []
            piece_type = random_type(rng, types)
            while _completes_run(grid, r, c, piece_type) and len(rejected) < len(types):
                rejected.append(piece_type)
                piece_type = random_type(rng, types, rejected)
            grid.cells[r][c] = piece_type
    return grid


def apply_gravity(grid: Grid) -> List[Tuple[Position, Position]]:
    """
    Drops every piece down its column into empty cells below it, keeping the
    relative order of the pieces. Empty cells end up at the top.
    Returns the moves as (from, to) pairs.
    """
    changes: List[Tuple[Position, Position]] = []
    for c in range(grid.columns):
        target = grid.rows - 1
        for r in range(grid.rows - 1, -1, -1):
            piece_type = grid.cells[r][c]
            if piece_type == EMPTY:
                continue
            if r != target:
                grid.cells[target][c] = piece_type
                grid.cells[r][c] = EMPTY
                changes.append(((r, c), (target, c)))
            target -= 1
    return changes


def fill_up(grid: Grid, types: Sequence[PieceType], rng: Optional[random.Random] = None) -> List[Position]:
    """
    Fills every empty cell with a random type. Types come from a fresh match-free
    grid of the same size so the new pieces avoid pre-made runs among themselves.
    Returns the filled positions, bottom-up.
    """
    source = create_grid(grid.rows, grid.columns, types, rng)
    filled: List[Position] = []
    for r, c in grid.positions():
        if grid.cells[r][c] == EMPTY:
            grid.cells[r][c] = source.cells[r][c]
            filled.append((r, c))
    filled.reverse()
    return filled
