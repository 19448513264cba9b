"""
Match3 core Python package.

This package holds the board state machine and the match/cascade/special
resolution pipeline. Presentation (terminal, HTTP) lives outside it and only
talks to the core through the Match3 session and its events.
Modules:
- grid.py: Grid, Position, grid helpers
- pieces.py, config.py: piece catalogue, difficulty modes, Match3Config
- matches.py: match finder
- board.py: Board
- specials.py: special pieces and their registry
- process.py: cascade pipeline
- actions.py: player moves and taps
- timer.py, stats.py: session clock, score and grade
- session.py: Match3 session context
- cli.py: terminal front-end
"""
