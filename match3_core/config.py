from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from .errors import ConfigError
from .pieces import VALID_MODES


@dataclass(frozen=True)
class Match3Config:
    """Settings consumed once at game setup."""
    rows: int = 9
    columns: int = 7
    tile_size: int = 50  # presentation only, passed through
    free_moves: bool = False  # accept every adjacent swap, matching or not
    duration: float = 60  # gameplay duration, in seconds
    mode: str = 'normal'
    seed: Optional[int] = None
    # Pacing carried on events, in seconds. time_scale turns them into real
    # delays; 0 keeps the core purely logical.
    swap_duration: float = 0.2
    pop_duration: float = 0.3
    spawn_duration: float = 0.3
    fall_duration: float = 0.4
    time_scale: float = 0.0


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return (_is_int(value) or isinstance(value, float)) and math.isfinite(value)


def validate_config(config: Match3Config) -> Match3Config:
    for name in ('rows', 'columns', 'tile_size'):
        if not _is_int(getattr(config, name)):
            raise ConfigError(f"{name} must be an integer, got {getattr(config, name)!r}")
    for name in ('duration', 'time_scale', 'swap_duration', 'pop_duration', 'spawn_duration', 'fall_duration'):
        if not _is_number(getattr(config, name)):
            raise ConfigError(f"{name} must be a finite number, got {getattr(config, name)!r}")
    if not isinstance(config.free_moves, bool):
        raise ConfigError(f"free_moves must be true or false, got {config.free_moves!r}")
    if config.seed is not None and not _is_int(config.seed):
        raise ConfigError(f"seed must be an integer, got {config.seed!r}")
    if config.rows < 3 or config.columns < 3:
        raise ConfigError(f"Board must be at least 3x3, got {config.rows}x{config.columns}")
    if config.mode not in VALID_MODES:
        raise ConfigError(f"Unknown mode {config.mode!r}; expected one of {', '.join(VALID_MODES)}")
    if config.duration <= 0:
        raise ConfigError('Duration must be positive')
    if config.time_scale < 0:
        raise ConfigError('time_scale cannot be negative')
    return config


def get_config(**overrides: Any) -> Match3Config:
    """Builds a config from the defaults, overriding the given values."""
    known = {f.name for f in fields(Match3Config)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return validate_config(replace(Match3Config(), **overrides))


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def config_from_env(environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> Match3Config:
    """Reads MATCH3_* environment variables; explicit overrides win."""
    env = os.environ if environ is None else environ
    values: dict = {}
    try:
        if env.get('MATCH3_ROWS'):
            values['rows'] = int(env['MATCH3_ROWS'])
        if env.get('MATCH3_COLUMNS'):
            values['columns'] = int(env['MATCH3_COLUMNS'])
        if env.get('MATCH3_DURATION'):
            values['duration'] = float(env['MATCH3_DURATION'])
        if env.get('MATCH3_SEED'):
            values['seed'] = int(env['MATCH3_SEED'])
    except ValueError as e:
        raise ConfigError(f"Bad MATCH3_* environment value: {e}") from e
    if env.get('MATCH3_MODE'):
        values['mode'] = env['MATCH3_MODE'].strip().lower()
    if env.get('MATCH3_FREE_MOVES'):
        values['free_moves'] = _env_bool(env['MATCH3_FREE_MOVES'])
    values.update({k: v for k, v in overrides.items() if v is not None})
    return get_config(**values)
