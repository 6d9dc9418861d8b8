"""Enqueue rules for every task source.

Each function takes the current state plus the task and returns a new
state. The task is stamped with the next enqueue sequence number at the
moment it is placed, either directly into a queue or into the Web API
registry. A delay of 0 still goes through the registry.
"""

from typing import Optional

from ..state.models import LogType, QUEUE_FIELDS, SimulatorState, WebApiType, append_log
from ..state import queues
from ..tasks import (
    DomEventTask,
    FetchTask,
    IntervalTask,
    QueueKind,
    Task,
    TaskState,
    TimerTask,
)
from .deferred import create_deferred_operation, register_operation


def _stamp(state: SimulatorState, task: Task, lifecycle: TaskState, **extra) -> Task:
    """Copy of ``task`` carrying the next sequence number and lifecycle state."""
    update = {"enqueue_seq": state.enqueue_counter, "state": lifecycle}
    update.update(extra)
    return task.model_copy(update=update)


def enqueue_to_queue(
    state: SimulatorState,
    task: Task,
    queue: QueueKind,
    source: str = "external",
) -> SimulatorState:
    """Append ``task`` directly to a queue, bypassing the registry."""
    kind = QueueKind(queue)
    queued = _stamp(state, task, TaskState.QUEUED)
    field = QUEUE_FIELDS[kind]
    new_state = state.model_copy(update={
        field: queues.enqueue(getattr(state, field), queued),
        "enqueue_counter": state.enqueue_counter + 1,
    })
    return append_log(
        new_state,
        LogType.ENQUEUE,
        f"{queued.label} -> {kind.value} queue",
        task_id=queued.id,
        metadata={"seq": queued.enqueue_seq, "source": source},
    )


def _register(
    state: SimulatorState,
    task: Task,
    op_type: WebApiType,
    offset: float,
    target_queue: QueueKind = QueueKind.MACRO,
    recurring: bool = False,
    **extra,
) -> SimulatorState:
    """Place ``task`` in the registry, ready ``offset`` units from now."""
    if offset < 0:
        raise ValueError(f"delay must be non-negative, got {offset}")
    waiting = _stamp(state, task, TaskState.WAITING_WEBAPI, **extra)
    operation = create_deferred_operation(
        op_id=waiting.id,
        op_type=op_type,
        payload_task=waiting,
        ready_at=state.now + offset,
        target_queue=target_queue,
        recurring=recurring,
    )
    new_state = register_operation(state, operation)
    new_state = new_state.model_copy(update={"enqueue_counter": state.enqueue_counter + 1})
    return append_log(
        new_state,
        LogType.ENQUEUE,
        f"{waiting.label} -> Web API ({op_type.value}, ready at {operation.ready_at:g})",
        task_id=waiting.id,
        metadata={"seq": waiting.enqueue_seq, "ready_at": operation.ready_at},
    )


def enqueue_timer(
    state: SimulatorState,
    task: TimerTask,
    delay: Optional[float] = None,
) -> SimulatorState:
    """setTimeout: register with ready_at = now + delay, then macrotask queue.

    ``delay`` overrides the task's own delay when given.
    """
    if delay is None:
        delay = getattr(task, "delay", 0)
    extra = {"delay": delay} if isinstance(task, TimerTask) else {}
    return _register(state, task, WebApiType.TIMER, offset=delay, **extra)


def enqueue_interval(
    state: SimulatorState,
    task: IntervalTask,
    delay: Optional[float] = None,
) -> SimulatorState:
    """setInterval: like a timer, but re-registered after every release."""
    if not isinstance(task, IntervalTask):
        raise TypeError(f"enqueue_interval expects an IntervalTask, got {task.type!r}")
    if delay is None:
        delay = task.delay
    return _register(state, task, WebApiType.INTERVAL, offset=delay, recurring=True, delay=delay)


def enqueue_microtask(state: SimulatorState, task: Task) -> SimulatorState:
    """queueMicrotask / Promise.then: straight into the microtask queue."""
    return enqueue_to_queue(state, task, QueueKind.MICRO)


def enqueue_promise(state: SimulatorState, task: Task) -> SimulatorState:
    """Promise settlement reactions are microtasks."""
    return enqueue_to_queue(state, task, QueueKind.MICRO)


def enqueue_async_continuation(state: SimulatorState, task: Task) -> SimulatorState:
    """Each await resumes its async function as a microtask."""
    return enqueue_to_queue(state, task, QueueKind.MICRO)


def enqueue_fetch(
    state: SimulatorState,
    task: FetchTask,
    latency: Optional[float] = None,
) -> SimulatorState:
    """fetch: register with ready_at = now + latency, then macrotask queue."""
    if latency is None:
        latency = getattr(task, "latency", 0)
    extra = {"latency": latency} if isinstance(task, FetchTask) else {}
    return _register(state, task, WebApiType.FETCH, latency, **extra)


def enqueue_dom_event(
    state: SimulatorState,
    task: DomEventTask,
    immediate: bool = True,
    delay: float = 0,
) -> SimulatorState:
    """DOM event handler.

    Immediate events (a user click) go straight to the macrotask queue.
    Otherwise the event goes through the registry and is released ``delay``
    units from now.
    """
    if immediate:
        return enqueue_to_queue(state, task, QueueKind.MACRO)
    return _register(state, task, WebApiType.DOM_EVENT, delay)


def enqueue_raf(state: SimulatorState, task: Task) -> SimulatorState:
    """requestAnimationFrame: into the rAF queue, run at the next frame boundary."""
    return enqueue_to_queue(state, task, QueueKind.RAF)


def schedule_deferred(
    state: SimulatorState,
    task: Task,
    target_queue: QueueKind = QueueKind.MACRO,
) -> Optional[SimulatorState]:
    """Register a timed task with its own delay or latency.

    Returns None for task kinds that carry no delay, leaving the choice of
    fallback to the caller.
    """
    if isinstance(task, IntervalTask):
        return _register(
            state, task, WebApiType.INTERVAL, task.delay,
            target_queue=target_queue, recurring=True,
        )
    if isinstance(task, TimerTask):
        return _register(state, task, WebApiType.TIMER, task.delay, target_queue=target_queue)
    if isinstance(task, FetchTask):
        return _register(state, task, WebApiType.FETCH, task.latency, target_queue=target_queue)
    return None


__all__ = [
    "enqueue_to_queue",
    "enqueue_timer",
    "enqueue_interval",
    "enqueue_microtask",
    "enqueue_promise",
    "enqueue_async_continuation",
    "enqueue_fetch",
    "enqueue_dom_event",
    "enqueue_raf",
    "schedule_deferred",
]
