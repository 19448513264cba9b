from __future__ import annotations

import argparse
import asyncio
import logging
import time
from typing import List, Optional, Tuple, Union

from .config import config_from_env
from .errors import ConfigError
from .events import MatchFound, MoveAttempted, TimeExpired
from .grid import Position
from .pieces import VALID_MODES
from .session import Match3

Command = Union[Tuple[str, Position, Position], Tuple[str, Position], Tuple[str]]


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def parse_command(text: str) -> Optional[Command]:
    """
    Parses one line of player input:
    'r c r c' (or 'r,c r,c') swaps two cells, 'tap r c' fires a special, 'q' quits.
    Returns None when the line cannot be understood.
    """
    text = text.strip().lower()
    if text in ('q', 'quit', 'exit'):
        return ('quit',)
    tap = text.startswith('tap')
    if tap:
        text = text[3:]
    parts = [t for t in text.replace(',', ' ').split(' ') if t != '']
    try:
        nums = [int(t) for t in parts]
    except ValueError:
        return None
    if tap and len(nums) == 2:
        return ('tap', (nums[0], nums[1]))
    if not tap and len(nums) == 4:
        return ('move', (nums[0], nums[1]), (nums[2], nums[3]))
    return None


def render(match3: Match3) -> str:
    board = match3.board
    header = '    ' + ' '.join(str(c).rjust(2) for c in range(board.columns))
    lines: List[str] = [header]
    for r in range(board.rows):
        cells = []
        for c in range(board.columns):
            t = board.get_type((r, c))
            cells.append(str(t).rjust(2) + ('*' if board.is_special(t) else ' '))
        lines.append(str(r).rjust(2) + '  ' + ''.join(cells))
    legend = ', '.join(f"{t}={name}" for t, name in board.types_map.items())
    lines.append(legend)
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Match3 puzzle in the terminal')
    parser.add_argument('--rows', type=int, default=None, help='Number of rows')
    parser.add_argument('--columns', type=int, default=None, help='Number of columns')
    parser.add_argument('--mode', choices=list(VALID_MODES), default=None, help='Difficulty mode')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the board')
    parser.add_argument('--duration', type=float, default=None, help='Gameplay duration in seconds')
    parser.add_argument('--free-moves', action='store_true', help='Accept swaps that create no match')
    parser.add_argument('--verbose', action='store_true', help='Log pipeline rounds')
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = config_from_env(
            rows=args.rows,
            columns=args.columns,
            mode=args.mode,
            seed=args.seed,
            duration=args.duration,
            free_moves=True if args.free_moves else None,
        )
    except ConfigError as e:
        parser.error(str(e))
        return

    match3 = Match3(config)
    match3.setup()

    def on_move(event: MoveAttempted) -> None:
        if not event.valid:
            print('Invalid move. Try again.')

    def on_match(event: MatchFound) -> None:
        if event.combo > 1:
            print(f"Combo x{event.combo}!")

    match3.events.subscribe(MoveAttempted, on_move)
    match3.events.subscribe(MatchFound, on_match)
    match3.events.subscribe(TimeExpired, lambda _e: print("Time's up!"))

    print(render(match3))
    match3.start_playing()
    last = time.monotonic()
    while match3.is_playing():
        remaining = match3.timer.get_time_remaining() / 1000
        try:
            text = input(f"[{remaining:.0f}s, score {match3.stats.get_score()}] move (r c r c | tap r c | q): ")
        except EOFError:
            # Ctrl-D quits like 'q'
            print()
            text = 'q'
        now = time.monotonic()
        match3.update((now - last) * 1000)
        last = now
        if not match3.is_playing():
            break
        command = parse_command(text)
        if command is None:
            print('Could not parse. Try again.')
            continue
        if command[0] == 'quit':
            match3.stop_playing()
            break
        if command[0] == 'tap':
            if not asyncio.run(match3.tap(command[1])):
                print('No special piece there.')
        else:
            asyncio.run(match3.move(command[1], command[2]))
        print(render(match3))

    perf = match3.stats.performance()
    print(f"Score: {perf['score']}  matches: {perf['matches']}  pops: {perf['pops']}  "
          f"specials: {perf['specials']}  grade: {perf['grade']}/3")


if __name__ == '__main__':
    main()
