"""
Effect processing.

When a task completes, its effects are applied in list order against the
state produced right after the frame was popped. Each handler returns a new
state; malformed payloads are skipped with a warning so a single bad effect
does not abort the tick.
"""

import logging
from typing import Any, Callable, Dict

from ..state.models import LogType, SimulatorState, append_log
from ..tasks import (
    EXTERNAL_ORIGIN,
    CancelWebApiEffect,
    LogEffect,
    QueueKind,
    RequestRenderEffect,
    SpawnTaskEffect,
    Task,
)
from .deferred import cancel_operation
from .enqueue import enqueue_to_queue, schedule_deferred
from .render import request_render

logger = logging.getLogger(__name__)


def _spawn(state: SimulatorState, parent: Task, effect: SpawnTaskEffect) -> SimulatorState:
    try:
        queue = QueueKind(effect.queue)
    except ValueError:
        logger.warning(
            "Task %s spawned %s into unknown queue %r, skipping",
            parent.id, effect.task.id, effect.queue,
        )
        return state

    child = effect.task
    update: Dict[str, Any] = {"created_at": state.now}
    if child.origin == EXTERNAL_ORIGIN:
        update["origin"] = parent.id
    child = child.model_copy(update=update)

    if effect.defer:
        deferred = schedule_deferred(state, child, target_queue=queue)
        if deferred is not None:
            return deferred
        logger.debug("defer ignored for %s task %s", child.type, child.id)

    return enqueue_to_queue(state, child, queue, source=parent.id)


def _log(state: SimulatorState, parent: Task, effect: LogEffect) -> SimulatorState:
    return append_log(state, LogType.USER, effect.message, task_id=parent.id)


def _request_render(state: SimulatorState, parent: Task, effect: RequestRenderEffect) -> SimulatorState:
    return request_render(state)


def _cancel(state: SimulatorState, parent: Task, effect: CancelWebApiEffect) -> SimulatorState:
    return cancel_operation(state, effect.operation_id)


EffectHandler = Callable[[SimulatorState, Task, Any], SimulatorState]

EFFECT_HANDLERS: Dict[str, EffectHandler] = {
    "enqueue-task": _spawn,
    "log": _log,
    "invalidate-render": _request_render,
    "cancel-webapi": _cancel,
}


def process_task_effects(state: SimulatorState, task: Task) -> SimulatorState:
    """Apply every effect of a completed ``task`` in order."""
    for effect in task.effects:
        effect_type = getattr(effect, "type", None)
        handler = EFFECT_HANDLERS.get(effect_type)
        if handler is None:
            logger.warning("Task %s has unknown effect type %r, skipping", task.id, effect_type)
            continue
        state = handler(state, task, effect)
    return state


__all__ = ["process_task_effects", "EFFECT_HANDLERS"]
