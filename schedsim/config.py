from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidInput

# Round-Robin quantum used when the CLI is not given one.
DEFAULT_QUANTUM = 2
# Seconds between trace lines in --step mode.
DEFAULT_STEP_DELAY = 0.3
# Upper bound on simulated time for a single run.
MAX_TICKS = 1_000_000
DEFAULT_LOG_LEVEL = "WARNING"

ENV_PREFIX = "SCHEDSIM_"


@dataclass(frozen=True)
class SimulationConfig:
    quantum: int = DEFAULT_QUANTUM
    step_delay: float = DEFAULT_STEP_DELAY
    max_ticks: int = MAX_TICKS
    log_level: str = DEFAULT_LOG_LEVEL


def _read(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise InvalidInput(f"{ENV_PREFIX}{name}={raw!r} is not a valid {cast.__name__}") from exc


def load_config(env: Optional[Mapping[str, str]] = None) -> SimulationConfig:
    """
    Build the run configuration from ``SCHEDSIM_*`` environment variables,
    falling back to the module defaults.
    """
    if env is None:
        env = os.environ

    quantum = _read(env, "QUANTUM", int, DEFAULT_QUANTUM)
    step_delay = _read(env, "STEP_DELAY", float, DEFAULT_STEP_DELAY)
    max_ticks = _read(env, "MAX_TICKS", int, MAX_TICKS)
    log_level = _read(env, "LOG_LEVEL", str, DEFAULT_LOG_LEVEL).upper()

    if quantum <= 0:
        raise InvalidInput(f"{ENV_PREFIX}QUANTUM must be positive, got {quantum}")
    if step_delay < 0:
        raise InvalidInput(f"{ENV_PREFIX}STEP_DELAY must not be negative, got {step_delay}")
    if max_ticks <= 0:
        raise InvalidInput(f"{ENV_PREFIX}MAX_TICKS must be positive, got {max_ticks}")
    if not isinstance(logging.getLevelName(log_level), int):
        raise InvalidInput(f"{ENV_PREFIX}LOG_LEVEL {log_level!r} is not a logging level")

    return SimulationConfig(
        quantum=quantum,
        step_delay=step_delay,
        max_ticks=max_ticks,
        log_level=log_level,
    )
