"""Serialization of simulator states."""

from .snapshot import (
    state_to_dict,
    state_from_dict,
    state_to_json,
    state_from_json,
    save_snapshot,
    load_snapshot,
    snapshots_equal,
    format_state,
)

__all__ = [
    "state_to_dict",
    "state_from_dict",
    "state_to_json",
    "state_from_json",
    "save_snapshot",
    "load_snapshot",
    "snapshots_equal",
    "format_state",
]
