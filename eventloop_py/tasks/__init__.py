"""Task and effect models with discriminated union support."""

from typing import Annotated, Union
from pydantic import Field, TypeAdapter

from .base import EXTERNAL_ORIGIN, TaskBase, TaskState, TaskType, QueueKind
from .kinds import (
    SyncTask,
    TimerTask,
    IntervalTask,
    MicrotaskTask,
    PromiseTask,
    AsyncContinuationTask,
    FetchTask,
    DomEventTask,
    RafTask,
)
from .effects import (
    EffectBase,
    SpawnTaskEffect,
    LogEffect,
    RequestRenderEffect,
    CancelWebApiEffect,
)

Task = Annotated[
    Union[
        SyncTask,
        TimerTask,
        IntervalTask,
        MicrotaskTask,
        PromiseTask,
        AsyncContinuationTask,
        FetchTask,
        DomEventTask,
        RafTask,
    ],
    Field(discriminator="type"),
]

Effect = Annotated[
    Union[
        SpawnTaskEffect,
        LogEffect,
        RequestRenderEffect,
        CancelWebApiEffect,
    ],
    Field(discriminator="type"),
]

# Resolve the Task <-> Effect forward references
TaskBase.model_rebuild()
SyncTask.model_rebuild()
TimerTask.model_rebuild()
IntervalTask.model_rebuild()
MicrotaskTask.model_rebuild()
PromiseTask.model_rebuild()
AsyncContinuationTask.model_rebuild()
FetchTask.model_rebuild()
DomEventTask.model_rebuild()
RafTask.model_rebuild()
SpawnTaskEffect.model_rebuild()

_task_adapter = TypeAdapter(Task)

# Kinds that land in the microtask queue when enqueued directly
MICROTASK_TYPES = frozenset({
    TaskType.MICROTASK.value,
    TaskType.PROMISE.value,
    TaskType.ASYNC_CONTINUATION.value,
})


def parse_task(data) -> Task:
    """Validate a plain dict into the matching task variant."""
    return _task_adapter.validate_python(data)


__all__ = [
    # Enums and constants
    "EXTERNAL_ORIGIN",
    "TaskType",
    "TaskState",
    "QueueKind",
    "MICROTASK_TYPES",
    # Base class
    "TaskBase",
    # Union types
    "Task",
    "Effect",
    "parse_task",
    # Task variants
    "SyncTask",
    "TimerTask",
    "IntervalTask",
    "MicrotaskTask",
    "PromiseTask",
    "AsyncContinuationTask",
    "FetchTask",
    "DomEventTask",
    "RafTask",
    # Effects
    "EffectBase",
    "SpawnTaskEffect",
    "LogEffect",
    "RequestRenderEffect",
    "CancelWebApiEffect",
]
