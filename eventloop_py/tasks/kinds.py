"""Task variants, one class per task source."""

from typing import Literal
from pydantic import Field, model_validator

from .base import TaskBase


class SyncTask(TaskBase):
    """Plain synchronous call."""

    type: Literal["sync"] = "sync"


class TimerTask(TaskBase):
    """setTimeout callback.

    Waits in the Web API registry for ``delay`` logical time units, then
    lands in the macrotask queue.
    """

    type: Literal["timer"] = "timer"
    delay: float = Field(default=0, ge=0, description="Delay before the callback is queued")


class IntervalTask(TaskBase):
    """setInterval callback.

    Re-registered with the same id every time it is released, until a
    cancel-webapi effect removes it.
    """

    type: Literal["interval"] = "interval"
    delay: float = Field(default=0, ge=0, description="Interval between releases")
    interval_id: str = Field(..., description="Handle used to cancel the interval")

    @model_validator(mode="before")
    @classmethod
    def default_interval_id(cls, data):
        """The interval handle defaults to the task id."""
        if isinstance(data, dict) and data.get("interval_id") is None and "id" in data:
            data = {**data, "interval_id": str(data["id"])}
        return data


class MicrotaskTask(TaskBase):
    """Promise.then / queueMicrotask callback."""

    type: Literal["microtask"] = "microtask"


class PromiseTask(TaskBase):
    """Promise settlement reaction."""

    type: Literal["promise"] = "promise"


class AsyncContinuationTask(TaskBase):
    """Continuation of an async function after an await."""

    type: Literal["async-continuation"] = "async-continuation"


class FetchTask(TaskBase):
    """fetch completion callback, released after simulated latency."""

    type: Literal["fetch"] = "fetch"
    url: str = Field(..., description="Resource being fetched")
    latency: float = Field(default=0, ge=0, description="Simulated network latency")


class DomEventTask(TaskBase):
    """DOM event handler (click, input, load, ...)."""

    type: Literal["dom-event"] = "dom-event"
    event_type: str = Field(..., description="Event kind, e.g. 'click'")


class RafTask(TaskBase):
    """requestAnimationFrame callback."""

    type: Literal["raf"] = "raf"


__all__ = [
    "SyncTask",
    "TimerTask",
    "IntervalTask",
    "MicrotaskTask",
    "PromiseTask",
    "AsyncContinuationTask",
    "FetchTask",
    "DomEventTask",
    "RafTask",
]
