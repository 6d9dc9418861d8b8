"""Runtime configuration read from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL = 16.0
DEFAULT_MAX_TICKS = 10000


@dataclass(frozen=True)
class SimulatorConfig:
    """Settings for the run harness and the CLI."""
    frame_interval: float = DEFAULT_FRAME_INTERVAL
    max_ticks: int = DEFAULT_MAX_TICKS
    log_dir: Optional[str] = None


def _read_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid %s", name, raw, cast.__name__)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must be non-negative", name, raw)
        return default
    return value


def load_config() -> SimulatorConfig:
    """Build a config from EVENTLOOP_* environment variables.

    EVENTLOOP_FRAME_INTERVAL  frame interval in logical time units (default 16)
    EVENTLOOP_MAX_TICKS       tick budget for run_simulation (default 10000)
    EVENTLOOP_LOG_DIR         base directory for NDJSON traces (default: none)
    """
    return SimulatorConfig(
        frame_interval=_read_number("EVENTLOOP_FRAME_INTERVAL", DEFAULT_FRAME_INTERVAL, float),
        max_ticks=_read_number("EVENTLOOP_MAX_TICKS", DEFAULT_MAX_TICKS, int),
        log_dir=os.getenv("EVENTLOOP_LOG_DIR") or None,
    )


__all__ = ["SimulatorConfig", "load_config", "DEFAULT_FRAME_INTERVAL", "DEFAULT_MAX_TICKS"]
