"""
Tick: the single state transition of the event loop.

Each tick evaluates the priority rules in order and applies the action of
the first rule that holds. Every tick returns a new state and increments
``step_index`` by exactly one. A state where no rule holds is a caller bug
and raises ``InvalidStateError`` without applying anything.
"""

from typing import Callable, Dict, Tuple

from ..errors import InvalidStateError
from ..state.models import Frame, FrozenDict, LogType, QUEUE_FIELDS, SimulatorState, append_log, format_time
from ..state import queues
from ..tasks import QueueKind, TaskState
from .deferred import find_earliest_ready_at, release_ready_operations
from .effects import process_task_effects
from .render import execute_render_step, is_frame_boundary
from .rules import Rule, select_rule


def execute_call_stack_frame(state: SimulatorState) -> SimulatorState:
    """Rule 1: run one step of the current frame.

    When the frame runs out of steps it is popped, the task is marked
    completed and its effects are processed against the popped state.
    """
    frame = queues.top(state.call_stack)
    remaining = frame.steps_remaining - 1

    if remaining > 0:
        updated = frame.model_copy(update={"steps_remaining": remaining})
        return state.model_copy(update={
            "call_stack": queues.replace_top(state.call_stack, updated),
        })

    _, call_stack = queues.pop(state.call_stack)
    completed = frame.task.model_copy(update={"state": TaskState.COMPLETED})
    new_state = state.model_copy(update={"call_stack": call_stack})
    new_state = append_log(
        new_state,
        LogType.TASK_COMPLETE,
        f"Task completed: {completed.label}",
        task_id=completed.id,
        metadata={"rule": 1},
    )
    return process_task_effects(new_state, completed)


def _start_next(
    state: SimulatorState,
    queue: QueueKind,
    message: str,
    rule: int,
) -> SimulatorState:
    """Dequeue the front task of ``queue`` and push it as the running frame."""
    field = QUEUE_FIELDS[queue]
    task, rest = queues.dequeue(getattr(state, field))
    running = task.model_copy(update={"state": TaskState.RUNNING})
    frame = Frame(task=running, started_at=state.now, steps_remaining=running.duration_steps)
    new_state = state.model_copy(update={
        "call_stack": queues.push(state.call_stack, frame),
        field: rest,
    })
    return append_log(
        new_state,
        LogType.TASK_START,
        f"{message}: {running.label}",
        task_id=running.id,
        metadata={"rule": rule, "seq": running.enqueue_seq},
    )


def run_next_microtask(state: SimulatorState) -> SimulatorState:
    """Rule 2: move one microtask onto the call stack."""
    return _start_next(state, QueueKind.MICRO, "Microtask started", 2)


def run_next_raf(state: SimulatorState) -> SimulatorState:
    """Rule 4: move one rAF callback onto the call stack."""
    return _start_next(state, QueueKind.RAF, "rAF callback started", 4)


def run_next_macrotask(state: SimulatorState) -> SimulatorState:
    """Rule 5: move one macrotask onto the call stack."""
    return _start_next(state, QueueKind.MACRO, "Macrotask started", 5)


def advance_time(state: SimulatorState) -> SimulatorState:
    """Rule 6: jump to the earliest ready_at and release what is ready."""
    earliest = find_earliest_ready_at(state.web_apis)
    if earliest is None:
        raise InvalidStateError("no Web API operations found when advancing time")

    previous = state.now
    new_now = max(previous, earliest)
    new_state = release_ready_operations(state.model_copy(update={"now": new_now}))
    return append_log(
        new_state,
        LogType.USER,
        f"Time advanced to {format_time(new_now)}",
        metadata={"rule": 6, "from": previous},
    )


def mark_simulation_complete(state: SimulatorState) -> SimulatorState:
    """Rule 7: terminal state. Only appends a log entry."""
    return append_log(state, LogType.USER, "Simulation complete", metadata={"rule": 7})


_ACTIONS: Dict[int, Callable[[SimulatorState], SimulatorState]] = {
    1: execute_call_stack_frame,
    2: run_next_microtask,
    3: execute_render_step,
    4: run_next_raf,
    5: run_next_macrotask,
    6: advance_time,
    7: mark_simulation_complete,
}


def apply_rule(state: SimulatorState, rule: Rule) -> SimulatorState:
    """Apply one rule's action and count the step.

    The result always carries its own registry mapping.
    """
    new_state = _ACTIONS[rule.number](state)
    return new_state.model_copy(update={
        "step_index": state.step_index + 1,
        "web_apis": FrozenDict(new_state.web_apis),
    })


def _diagnose(state: SimulatorState) -> str:
    """Best-effort explanation of why no rule applies."""
    frame = state.current_frame
    if frame is not None and frame.steps_remaining <= 0:
        return f"frame for {frame.task.id} is on the stack with no remaining steps"
    if len(state.call_stack) > 1:
        return f"call stack holds {len(state.call_stack)} frames"
    if state.raf_queue and not is_frame_boundary(state):
        return (
            f"{len(state.raf_queue)} rAF callback(s) waiting for the frame boundary at "
            f"{format_time(state.last_frame_at + state.frame_interval)} with nothing else to run"
        )
    return "state violates scheduler invariants"


def step(state: SimulatorState) -> Tuple[Rule, SimulatorState]:
    """Advance the simulation by one tick, reporting which rule fired."""
    rule = select_rule(state)
    if rule is None:
        raise InvalidStateError(_diagnose(state))
    return rule, apply_rule(state, rule)


def tick(state: SimulatorState) -> SimulatorState:
    """Advance the simulation by one tick.

    Example:
        state = create_initial_state()
        state = enqueue_microtask(state, MicrotaskTask(id="m1", label="then"))
        state = tick(state)  # rule 2: microtask pushed onto the stack
        state = tick(state)  # rule 1: microtask completes
    """
    return step(state)[1]


__all__ = [
    "tick",
    "step",
    "apply_rule",
    "execute_call_stack_frame",
    "run_next_microtask",
    "run_next_raf",
    "run_next_macrotask",
    "advance_time",
    "mark_simulation_complete",
]
