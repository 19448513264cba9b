from __future__ import annotations

import asyncio
import dataclasses
import logging
import math
import os
import uuid
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from match3_core.config import Match3Config, config_from_env
from match3_core.errors import ConfigError
from match3_core.grid import Position
from match3_core.pieces import VALID_MODES
from match3_core.session import Match3

logger = logging.getLogger(__name__)

MAX_GAMES = int(os.getenv("MATCH3_MAX_GAMES", "256"))

app = Flask(__name__)

# In-process sessions keyed by game id; nothing is persisted.
_games: Dict[str, Match3] = {}


def _event_to_json(event: Any) -> Dict[str, Any]:
    return {"event": type(event).__name__, **dataclasses.asdict(event)}


def state_to_json(match3: Match3) -> Dict[str, Any]:
    board = match3.board
    return {
        "rows": board.rows,
        "columns": board.columns,
        "tileSize": board.tile_size,
        "grid": board.grid.to_rows(),
        "types": {str(t): name for t, name in board.types_map.items()},
        "specialTypes": list(board.special_types),
        "playing": match3.is_playing(),
        "processing": match3.process.is_processing(),
        "score": match3.stats.get_score(),
        "timeRemaining": match3.timer.get_time_remaining(),
    }


def _parse_position(value: Any) -> Position:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError("position must be [row, column]")
    return (int(value[0]), int(value[1]))


def _config_from_body(body: Dict[str, Any]) -> Match3Config:
    keys = {
        "rows": "rows",
        "columns": "columns",
        "mode": "mode",
        "seed": "seed",
        "duration": "duration",
        "freeMoves": "free_moves",
        "tileSize": "tile_size",
    }
    overrides = {attr: body[key] for key, attr in keys.items() if key in body}
    return config_from_env(**overrides)


def _get_game(game_id: str) -> Optional[Match3]:
    return _games.get(game_id)


def _run_recorded(match3: Match3, coro_fn, *args) -> Tuple[Any, List[Dict[str, Any]]]:
    """Runs a session coroutine to completion, collecting every event it publishes."""
    recorded: List[Dict[str, Any]] = []
    unsubscribe = match3.events.subscribe_all(lambda e: recorded.append(_event_to_json(e)))
    try:
        result = asyncio.run(coro_fn(*args))
    finally:
        unsubscribe()
    return result, recorded


@app.get("/api/config")
def api_config() -> Any:
    defaults = dataclasses.asdict(Match3Config())
    return jsonify({"ok": True, "defaults": defaults, "modes": list(VALID_MODES)})


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        config = _config_from_body(body)
    except (ConfigError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad config: {e}"}), 400
    if len(_games) >= MAX_GAMES:
        # Drop the oldest session
        _games.pop(next(iter(_games)))
    match3 = Match3(config)
    match3.setup()
    match3.start_playing()
    game_id = uuid.uuid4().hex
    _games[game_id] = match3
    logger.info("New game %s (%dx%d, %s)", game_id, config.rows, config.columns, config.mode)
    return jsonify({"ok": True, "id": game_id, "state": state_to_json(match3)})


@app.get("/api/game/<game_id>")
def api_game(game_id: str) -> Any:
    match3 = _get_game(game_id)
    if match3 is None:
        return jsonify({"ok": False, "error": "unknown game"}), 404
    return jsonify({"ok": True, "state": state_to_json(match3)})


@app.post("/api/game/<game_id>/move")
def api_move(game_id: str) -> Any:
    match3 = _get_game(game_id)
    if match3 is None:
        return jsonify({"ok": False, "error": "unknown game"}), 404
    body = request.get_json(force=True, silent=True) or {}
    try:
        from_position = _parse_position(body.get("from"))
        to_position = _parse_position(body.get("to"))
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad move: {e}"}), 400
    valid, events = _run_recorded(match3, match3.move, from_position, to_position)
    return jsonify({"ok": True, "valid": bool(valid), "events": events, "state": state_to_json(match3)})


@app.post("/api/game/<game_id>/tap")
def api_tap(game_id: str) -> Any:
    match3 = _get_game(game_id)
    if match3 is None:
        return jsonify({"ok": False, "error": "unknown game"}), 404
    body = request.get_json(force=True, silent=True) or {}
    try:
        position = _parse_position(body.get("position"))
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad position: {e}"}), 400
    fired, events = _run_recorded(match3, match3.tap, position)
    return jsonify({"ok": True, "fired": bool(fired), "events": events, "state": state_to_json(match3)})


@app.post("/api/game/<game_id>/tick")
def api_tick(game_id: str) -> Any:
    match3 = _get_game(game_id)
    if match3 is None:
        return jsonify({"ok": False, "error": "unknown game"}), 404
    body = request.get_json(force=True, silent=True) or {}
    try:
        delta = float(body.get("delta", 0))
    except (TypeError, ValueError):
        return jsonify({"ok": False, "error": "delta must be a number of milliseconds"}), 400
    if not math.isfinite(delta):
        return jsonify({"ok": False, "error": "delta must be finite"}), 400
    if delta < 0:
        return jsonify({"ok": False, "error": "delta cannot be negative"}), 400
    match3.update(delta)
    return jsonify({"ok": True, "state": state_to_json(match3)})


@app.get("/api/game/<game_id>/stats")
def api_stats(game_id: str) -> Any:
    match3 = _get_game(game_id)
    if match3 is None:
        return jsonify({"ok": False, "error": "unknown game"}), 404
    return jsonify({"ok": True, "stats": match3.stats.performance()})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=debug)
