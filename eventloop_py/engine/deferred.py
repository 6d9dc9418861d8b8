"""Web API registry: pending operations and their release into queues.

Operations are kept in a plain dict keyed by operation id. Release scans
every entry that is ready at the current time and orders them by the
payload task's enqueue sequence number, so operations that become ready at
the same instant keep their original scheduling order.
"""

import logging
from typing import Dict, List, Optional

from ..state.models import (
    DeferredOperation,
    FrozenDict,
    LogType,
    QUEUE_FIELDS,
    SimulatorState,
    WebApiType,
    append_log,
)
from ..state import queues
from ..tasks import IntervalTask, QueueKind, Task, TaskState

logger = logging.getLogger(__name__)


def create_deferred_operation(
    op_id: str,
    op_type: WebApiType,
    payload_task: Task,
    ready_at: float,
    target_queue: QueueKind = QueueKind.MACRO,
    recurring: bool = False,
) -> DeferredOperation:
    """Build a Web API operation that releases ``payload_task`` at ``ready_at``."""
    return DeferredOperation(
        id=op_id,
        type=op_type,
        payload_task=payload_task,
        ready_at=ready_at,
        target_queue=target_queue,
        recurring=recurring,
    )


def is_operation_ready(operation: DeferredOperation, now: float) -> bool:
    """An operation is ready once logical time reaches its ready_at."""
    return now >= operation.ready_at


def find_earliest_ready_at(operations: Dict[str, DeferredOperation]) -> Optional[float]:
    """Earliest ready_at across all operations, or None when there are none."""
    if not operations:
        return None
    return min(op.ready_at for op in operations.values())


def get_ready_operations(
    operations: Dict[str, DeferredOperation],
    now: float,
) -> List[DeferredOperation]:
    """All operations ready at ``now``, sorted by payload enqueue_seq.

    Unstamped payloads sort last.
    """
    ready = [op for op in operations.values() if is_operation_ready(op, now)]
    ready.sort(key=lambda op: (
        op.payload_task.enqueue_seq is None,
        op.payload_task.enqueue_seq or 0,
    ))
    return ready


def register_operation(state: SimulatorState, operation: DeferredOperation) -> SimulatorState:
    """Return a new state with ``operation`` added to the registry.

    A payload without a sequence number is stamped with the next one.
    """
    if operation.id in state.web_apis:
        logger.warning(
            "Web API operation %s replaced an existing registration", operation.id
        )
    counter = state.enqueue_counter
    if operation.payload_task.enqueue_seq is None:
        stamped = operation.payload_task.model_copy(update={"enqueue_seq": counter})
        operation = operation.model_copy(update={"payload_task": stamped})
        counter += 1
    web_apis = dict(state.web_apis)
    web_apis[operation.id] = operation
    return state.model_copy(update={
        "web_apis": FrozenDict(web_apis),
        "enqueue_counter": counter,
    })


def cancel_operation(state: SimulatorState, operation_id: str) -> SimulatorState:
    """Remove an operation by id.

    Cancelling an id that is not registered (already released, never
    scheduled) leaves the state untouched.
    """
    if operation_id not in state.web_apis:
        logger.debug("cancel of unknown Web API operation %s ignored", operation_id)
        return state
    web_apis = dict(state.web_apis)
    del web_apis[operation_id]
    return state.model_copy(update={"web_apis": FrozenDict(web_apis)})


def release_ready_operations(state: SimulatorState) -> SimulatorState:
    """Move every operation ready at ``state.now`` into its target queue.

    Non-recurring operations leave the registry. Recurring ones (intervals)
    are registered again under the same id, ready one interval from now,
    with a fresh sequence number.
    """
    ready_ops = get_ready_operations(state.web_apis, state.now)
    if not ready_ops:
        return state

    web_apis = dict(state.web_apis)
    pending = {kind: state.queue(kind) for kind in QueueKind}
    counter = state.enqueue_counter
    released = []

    for op in ready_ops:
        queued_task = op.payload_task.model_copy(update={"state": TaskState.QUEUED})
        target = QueueKind(op.target_queue)
        pending[target] = queues.enqueue(pending[target], queued_task)
        released.append((op, queued_task))

        if op.recurring:
            delay = op.payload_task.delay if isinstance(op.payload_task, IntervalTask) else 0
            next_task = op.payload_task.model_copy(
                update={"state": TaskState.WAITING_WEBAPI, "enqueue_seq": counter}
            )
            counter += 1
            web_apis[op.id] = create_deferred_operation(
                op_id=op.id,
                op_type=op.type,
                payload_task=next_task,
                ready_at=state.now + delay,
                target_queue=op.target_queue,
                recurring=True,
            )
        else:
            del web_apis[op.id]

    update = {QUEUE_FIELDS[kind]: items for kind, items in pending.items()}
    update["web_apis"] = FrozenDict(web_apis)
    update["enqueue_counter"] = counter
    new_state = state.model_copy(update=update)

    for op, task in released:
        new_state = append_log(
            new_state,
            LogType.ENQUEUE,
            f"{task.label} ready -> {QueueKind(op.target_queue).value} queue",
            task_id=task.id,
            metadata={"operation": op.id, "recurring": op.recurring},
        )
    return new_state


__all__ = [
    "create_deferred_operation",
    "is_operation_ready",
    "find_earliest_ready_at",
    "get_ready_operations",
    "register_operation",
    "cancel_operation",
    "release_ready_operations",
]
