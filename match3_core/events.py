from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List, Tuple, Type

from .grid import PieceType, Position


@dataclass(frozen=True)
class MoveAttempted:
    from_position: Position
    to_position: Position
    valid: bool


@dataclass(frozen=True)
class MatchFound:
    matches: Tuple[Tuple[Position, ...], ...]
    combo: int


@dataclass(frozen=True)
class PiecePopped:
    position: Position
    piece_type: PieceType
    is_special: bool
    combo: int
    caused_by_special: bool
    duration: float = 0.0


@dataclass(frozen=True)
class PieceSpawned:
    position: Position
    piece_type: PieceType
    duration: float = 0.0


@dataclass(frozen=True)
class PiecesFell:
    changes: Tuple[Tuple[Position, Position], ...]  # (from, to)
    duration: float = 0.0


@dataclass(frozen=True)
class GridRefilled:
    positions: Tuple[Position, ...]
    duration: float = 0.0


@dataclass(frozen=True)
class ProcessingStarted:
    pass


@dataclass(frozen=True)
class ProcessingComplete:
    combo: int = 0


@dataclass(frozen=True)
class TimeExpired:
    pass


Handler = Callable[[Any], None]


class EventBus:
    """
    Fire-and-forget notifications from the core to its collaborators.
    Handlers run synchronously, in subscription order, as events are published.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[type, List[Handler]] = defaultdict(list)
        self._catch_all: List[Handler] = []

    def subscribe(self, event_type: Type[Any], handler: Handler) -> Callable[[], None]:
        """Registers a handler for one event type. Returns a function that unsubscribes it."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        self._catch_all.append(handler)

        def unsubscribe() -> None:
            if handler in self._catch_all:
                self._catch_all.remove(handler)

        return unsubscribe

    def publish(self, event: Any) -> None:
        for handler in list(self._handlers.get(type(event), ())):
            handler(event)
        for handler in list(self._catch_all):
            handler(event)
