"""Effects a task produces when it completes.

The vocabulary is fixed: spawn a task, append a log entry, request a render,
cancel a pending Web API operation. Effects are interpreted in list order by
``eventloop_py.engine.effects.process_task_effects``.
"""

from typing import TYPE_CHECKING, Literal
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from . import Task


class EffectBase(BaseModel):
    """Base class for all effect variants."""

    type: str

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }


class SpawnTaskEffect(EffectBase):
    """Place a new task into one of the queues.

    The queue name is kept as a plain string: an unknown name is a malformed
    payload that the effect processor skips with a warning instead of
    failing validation when the parent task is built.
    """

    type: Literal["enqueue-task"] = "enqueue-task"
    task: "Task" = Field(..., description="Task to spawn")
    queue: str = Field(default="macro", description="Target queue: macro, micro or raf")
    defer: bool = Field(
        default=False,
        description="Route timer, interval and fetch children through the Web API registry"
    )


class LogEffect(EffectBase):
    """Append a user log entry."""

    type: Literal["log"] = "log"
    message: str


class RequestRenderEffect(EffectBase):
    """Mark a render as pending."""

    type: Literal["invalidate-render"] = "invalidate-render"


class CancelWebApiEffect(EffectBase):
    """Remove a pending Web API operation (clearTimeout / clearInterval)."""

    type: Literal["cancel-webapi"] = "cancel-webapi"
    operation_id: str


__all__ = [
    "EffectBase",
    "SpawnTaskEffect",
    "LogEffect",
    "RequestRenderEffect",
    "CancelWebApiEffect",
]
