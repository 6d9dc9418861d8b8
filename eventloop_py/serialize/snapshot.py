"""Snapshot serialization for simulator states.

States are frozen pydantic models, so a snapshot is just their JSON dump.
Restoring validates the full tree again, including the task and effect
discriminated unions. Any validation failure is reported as SnapshotError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from ..errors import SnapshotError
from ..state.models import SimulatorState, format_time


def state_to_dict(state: SimulatorState) -> Dict[str, Any]:
    """Convert a state to JSON-compatible primitives."""
    return state.model_dump(mode="json")


def state_from_dict(data: Dict[str, Any]) -> SimulatorState:
    """Rebuild a state from ``state_to_dict`` output.

    Raises:
        SnapshotError: if the data does not describe a valid state
    """
    try:
        return SimulatorState.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(_summarize(e)) from e


def state_to_json(state: SimulatorState, indent: Union[int, None] = None) -> str:
    """Serialize a state to a JSON string."""
    return state.model_dump_json(indent=indent)


def state_from_json(text: Union[str, bytes]) -> SimulatorState:
    """Rebuild a state from ``state_to_json`` output.

    Raises:
        SnapshotError: on malformed JSON or an invalid state
    """
    try:
        return SimulatorState.model_validate_json(text)
    except ValidationError as e:
        raise SnapshotError(_summarize(e)) from e


def save_snapshot(state: SimulatorState, path: Union[str, Path]) -> Path:
    """Write a state to ``path`` as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(state_to_json(state, indent=2), encoding="utf-8")
    return path


def load_snapshot(path: Union[str, Path]) -> SimulatorState:
    """Read a state written by ``save_snapshot``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"cannot read file: {e.strerror or e}", source=str(path)) from e
    try:
        return SimulatorState.model_validate_json(text)
    except ValidationError as e:
        raise SnapshotError(_summarize(e), source=str(path)) from e


def snapshots_equal(a: SimulatorState, b: SimulatorState) -> bool:
    """Structural equality of two states.

    The registry compares as a mapping, queues and the log as ordered
    sequences.
    """
    return state_to_dict(a) == state_to_dict(b)


def _summarize(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {first.get('msg', 'invalid value')}{more}"


def _task_names(tasks) -> str:
    if not tasks:
        return "-"
    return ", ".join(t.label for t in tasks)


def format_state(state: SimulatorState) -> str:
    """Compact multi-line text view of a state."""
    lines: List[str] = [
        f"now={format_time(state.now)} step={state.step_index} "
        f"frames={state.frame_counter} render_pending={state.render_pending}",
    ]

    if state.call_stack:
        frames = ", ".join(
            f"{f.task.label} ({f.steps_remaining} left)" for f in reversed(state.call_stack)
        )
    else:
        frames = "-"
    lines.append(f"  stack: {frames}")
    lines.append(f"  micro: {_task_names(state.micro_queue)}")
    lines.append(f"  macro: {_task_names(state.macro_queue)}")
    lines.append(f"  raf:   {_task_names(state.raf_queue)}")

    if state.web_apis:
        ops = sorted(state.web_apis.values(), key=lambda op: (op.ready_at, op.payload_task.enqueue_seq or 0))
        pending = ", ".join(
            f"{op.id}@{format_time(op.ready_at)} ({op.type.value})" for op in ops
        )
    else:
        pending = "-"
    lines.append(f"  web apis: {pending}")
    return "\n".join(lines)


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
