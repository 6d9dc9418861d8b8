"""Simulator state models.

The whole simulator state is a tree of frozen pydantic models holding
tuples and read-only dicts. Transitions never mutate a state; they build a
new one with ``model_copy(update=...)`` and fresh containers for every field
they change.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from ..tasks import QueueKind, Task


class FrozenDict(dict):
    """A dict whose mutating methods raise TypeError.

    Used for the mapping fields of frozen models so that states sharing a
    mapping cannot change each other.
    """

    def _readonly(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__} is read-only")

    __setitem__ = _readonly
    __delitem__ = _readonly
    __ior__ = _readonly
    clear = _readonly
    pop = _readonly
    popitem = _readonly
    setdefault = _readonly
    update = _readonly

    def __reduce__(self):
        return (type(self), (dict(self),))


class LogType(str, Enum):
    """Category tag of a log entry."""
    TASK_START = "task-start"
    TASK_COMPLETE = "task-complete"
    ENQUEUE = "enqueue"
    RENDER = "render"
    USER = "user"


class WebApiType(str, Enum):
    """Kind of pending Web API operation."""
    TIMER = "timer"
    INTERVAL = "interval"
    FETCH = "fetch"
    DOM_EVENT = "dom-event"
    RAF = "raf"


class Frame(BaseModel):
    """A call stack frame holding the currently running task."""

    task: Task
    started_at: float
    steps_remaining: int = Field(..., ge=0)

    model_config = {"frozen": True, "extra": "forbid"}


class DeferredOperation(BaseModel):
    """Pending work registered with a Web API.

    Becomes eligible for its target queue once logical time reaches
    ``ready_at``.
    """

    id: str
    type: WebApiType
    payload_task: Task
    ready_at: float
    target_queue: QueueKind = QueueKind.MACRO
    recurring: bool = False

    model_config = {"frozen": True, "extra": "forbid"}


class LogEntry(BaseModel):
    """A single entry of the simulation log."""

    timestamp: float
    type: LogType
    message: str
    task_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("metadata")
    @classmethod
    def freeze_metadata(cls, v):
        return None if v is None else FrozenDict(v)


class SimulatorState(BaseModel):
    """Complete state of the event loop simulator."""

    # Core structures
    call_stack: Tuple[Frame, ...] = ()
    web_apis: Dict[str, DeferredOperation] = Field(default_factory=FrozenDict)
    macro_queue: Tuple[Task, ...] = ()
    micro_queue: Tuple[Task, ...] = ()
    raf_queue: Tuple[Task, ...] = ()

    # Time and sequencing
    now: float = Field(default=0, ge=0)
    step_index: int = 0
    enqueue_counter: int = 0

    # Frame timing
    frame_interval: float = Field(default=16, ge=0)
    frame_counter: int = 0
    render_pending: bool = False
    last_frame_at: float = 0

    log: Tuple[LogEntry, ...] = ()

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("web_apis")
    @classmethod
    def freeze_registry(cls, v):
        """Registry snapshots are read-only."""
        return FrozenDict(v)

    def queue(self, kind: QueueKind) -> Tuple[Task, ...]:
        """Return the queue for a queue kind."""
        kind = QueueKind(kind)
        if kind == QueueKind.MICRO:
            return self.micro_queue
        if kind == QueueKind.RAF:
            return self.raf_queue
        return self.macro_queue

    @property
    def current_frame(self) -> Optional[Frame]:
        """The running frame, if any."""
        return self.call_stack[-1] if self.call_stack else None

    @property
    def is_idle(self) -> bool:
        """True when nothing is running and every queue is empty."""
        return not (self.call_stack or self.micro_queue or self.macro_queue or self.raf_queue)


QUEUE_FIELDS = {
    QueueKind.MACRO: "macro_queue",
    QueueKind.MICRO: "micro_queue",
    QueueKind.RAF: "raf_queue",
}


def create_initial_state(
    frame_interval: float = 16,
    now: float = 0,
    render_pending: bool = False,
) -> SimulatorState:
    """Create a fresh simulator state.

    All containers are empty and counters at zero. The default frame
    interval of 16 models a 60fps display.
    """
    return SimulatorState(
        frame_interval=frame_interval,
        now=now,
        render_pending=render_pending,
    )


def append_log(
    state: SimulatorState,
    entry_type: LogType,
    message: str,
    task_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> SimulatorState:
    """Return a new state with one log entry appended at the current time."""
    entry = LogEntry(
        timestamp=state.now,
        type=entry_type,
        message=message,
        task_id=task_id,
        metadata=metadata,
    )
    return state.model_copy(update={"log": state.log + (entry,)})


def format_time(value: float) -> str:
    """Render a logical time without a trailing '.0'."""
    return f"{value:g}"


__all__ = [
    "FrozenDict",
    "LogType",
    "WebApiType",
    "Frame",
    "DeferredOperation",
    "LogEntry",
    "SimulatorState",
    "QUEUE_FIELDS",
    "create_initial_state",
    "append_log",
    "format_time",
]
