"""Simulator state for eventloop-py."""

from .models import (
    FrozenDict,
    LogType,
    WebApiType,
    Frame,
    DeferredOperation,
    LogEntry,
    SimulatorState,
    QUEUE_FIELDS,
    create_initial_state,
    append_log,
    format_time,
)
from . import queues

__all__ = [
    # Models
    "FrozenDict",
    "LogType",
    "WebApiType",
    "Frame",
    "DeferredOperation",
    "LogEntry",
    "SimulatorState",
    "QUEUE_FIELDS",
    # Helpers
    "create_initial_state",
    "append_log",
    "format_time",
    # Queue/stack primitives
    "queues",
]
