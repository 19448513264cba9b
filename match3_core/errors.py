from __future__ import annotations


class Match3Error(Exception):
    """Base class for every error raised by the match3 core."""


class OutOfBoundsError(Match3Error, IndexError):
    """A position lies outside the grid extents."""

    def __init__(self, position, rows: int, columns: int) -> None:
        super().__init__(f"Position {position} is outside a {rows}x{columns} grid")
        self.position = position


class NotAdjacentError(Match3Error, ValueError):
    """Two positions are not orthogonal neighbours."""

    def __init__(self, a, b) -> None:
        super().__init__(f"Positions {a} and {b} are not adjacent")
        self.positions = (a, b)


class InvalidStateError(Match3Error, ValueError):
    """An operation that requires an idle board was invoked while processing."""


class ConfigError(Match3Error, ValueError):
    """Invalid game configuration."""
