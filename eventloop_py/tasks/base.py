"""Base classes for event loop task models."""

from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from . import Effect


# Origin sentinel for tasks seeded from outside the simulation.
EXTERNAL_ORIGIN = "external"


class TaskType(str, Enum):
    """Discriminant for task variants."""
    SYNC = "sync"
    TIMER = "timer"
    INTERVAL = "interval"
    MICROTASK = "microtask"
    PROMISE = "promise"
    ASYNC_CONTINUATION = "async-continuation"
    FETCH = "fetch"
    DOM_EVENT = "dom-event"
    RAF = "raf"


class TaskState(str, Enum):
    """Lifecycle state of a task."""
    CREATED = "created"
    WAITING_WEBAPI = "waiting-webapi"
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELED = "canceled"


class QueueKind(str, Enum):
    """Queues a task can be placed into."""
    MACRO = "macro"
    MICRO = "micro"
    RAF = "raf"


class TaskBase(BaseModel):
    """Base class for all task variants.

    Tasks are frozen values. Any change of lifecycle state or sequence number
    produces a new task via ``model_copy``, so states taken earlier in a run
    never observe later changes.
    """

    type: str
    id: str = Field(..., description="Unique task identifier")
    label: str = Field(..., description="Human-readable label")
    created_at: float = Field(default=0, description="Logical time the task was created")
    enqueue_seq: Optional[int] = Field(
        default=None,
        description="Sequence number stamped when the task is placed into a queue or registry"
    )
    origin: str = Field(
        default=EXTERNAL_ORIGIN,
        description="Parent task id, or the external sentinel for seeded tasks"
    )
    state: TaskState = TaskState.CREATED
    duration_steps: int = Field(default=1, ge=1, description="Ticks needed to run to completion")
    effects: Tuple["Effect", ...] = Field(default=(), description="Effects run on completion")

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_string(cls, v):
        """Convert numeric ids to strings for consistent registry keys."""
        if v is None:
            return v
        return str(v)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }


__all__ = ["EXTERNAL_ORIGIN", "TaskType", "TaskState", "QueueKind", "TaskBase"]
