from __future__ import annotations

from typing import Dict, List, Tuple

# Common pieces, in the order difficulty modes pick them up.
COMMON_PIECES: Tuple[str, ...] = (
    'piece-dragon',
    'piece-frog',
    'piece-newt',
    'piece-snake',
    'piece-spider',
    'piece-yeti',
)

SPECIAL_BLAST = 'special-blast'
SPECIAL_ROW = 'special-row'
SPECIAL_COLUMN = 'special-column'
SPECIAL_COLOUR = 'special-colour'

# Added to the game regardless of the mode. The order is also the order
# special handlers get to process a round's matches.
SPECIAL_PIECES: Tuple[str, ...] = (SPECIAL_BLAST, SPECIAL_ROW, SPECIAL_COLUMN, SPECIAL_COLOUR)

# Number of common pieces available on each difficulty mode.
MODE_PIECE_COUNT: Dict[str, int] = {
    'test': 3,
    'easy': 4,
    'normal': 5,
    'hard': 6,
}

VALID_MODES: Tuple[str, ...] = tuple(MODE_PIECE_COUNT)


def is_special_name(name: str) -> bool:
    return name in SPECIAL_PIECES


def pieces_for_mode(mode: str) -> List[str]:
    """Lists every piece name used in a game of the given mode: the mode's commons, then all specials."""
    if mode not in MODE_PIECE_COUNT:
        raise ValueError(f"Unknown mode {mode!r}; expected one of {', '.join(VALID_MODES)}")
    return list(COMMON_PIECES[:MODE_PIECE_COUNT[mode]]) + list(SPECIAL_PIECES)


def types_map_for_mode(mode: str) -> Dict[int, str]:
    """Piece type numbers are 1-based positions in the mode's piece list (0 is empty)."""
    return {i + 1: name for i, name in enumerate(pieces_for_mode(mode))}
