from __future__ import annotations

# Facade module that re-exports the match3 core.
# Single-responsibility modules live under match3_core/*.

from match3_core.actions import Match3Actions
from match3_core.board import Board
from match3_core.config import Match3Config, config_from_env, get_config, validate_config
from match3_core.errors import (
    ConfigError,
    InvalidStateError,
    Match3Error,
    NotAdjacentError,
    OutOfBoundsError,
)
from match3_core.events import (
    EventBus,
    GridRefilled,
    MatchFound,
    MoveAttempted,
    PiecePopped,
    PieceSpawned,
    PiecesFell,
    ProcessingComplete,
    ProcessingStarted,
    TimeExpired,
)
from match3_core.grid import (
    EMPTY,
    Grid,
    PieceType,
    Position,
    apply_gravity,
    create_grid,
    fill_up,
    is_adjacent,
)
from match3_core.matches import Match, find_matches, middle_position, unique_positions
from match3_core.pacing import Pacer
from match3_core.pieces import (
    COMMON_PIECES,
    SPECIAL_BLAST,
    SPECIAL_COLOUR,
    SPECIAL_COLUMN,
    SPECIAL_PIECES,
    SPECIAL_ROW,
    VALID_MODES,
    pieces_for_mode,
)
from match3_core.process import Match3Process
from match3_core.session import Match3
from match3_core.specials import (
    SpecialBlast,
    SpecialColour,
    SpecialColumn,
    SpecialHandler,
    SpecialRegistry,
    SpecialRow,
)
from match3_core.stats import Match3Stats, calculate_grade
from match3_core.timer import Match3Timer


def new_game(config: Match3Config | None = None, **overrides) -> Match3:
    """Builds, sets up and starts a session in one go."""
    match3 = Match3(config if config is not None else get_config(**overrides))
    match3.setup()
    match3.start_playing()
    return match3


def main() -> None:
    # CLI driver delegated to match3_core.cli
    from match3_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
