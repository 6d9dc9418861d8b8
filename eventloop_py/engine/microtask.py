"""
Microtask checkpoint.

Draining runs the microtask queue to exhaustion, including microtasks that
are enqueued by microtasks completing during the drain. It is built from the
same rule actions ``tick`` uses, so every step it takes is counted and
logged exactly as if ``tick`` had been called repeatedly.
"""

from ..errors import InvalidStateError
from ..state.models import SimulatorState
from .rules import DRAIN_MICROTASK, EXECUTE_STACK, should_drain_microtask, should_execute_call_stack
from .tick import apply_rule


def drain_microtask_queue(state: SimulatorState) -> SimulatorState:
    """Run rules 1 and 2 until the call stack and microtask queue are empty.

    There is no cycle guard: a microtask that always spawns another one
    never returns. Bound such runs with ``run_simulation(max_ticks=...)``.

    Raises:
        InvalidStateError: if a frame is stuck on the stack with no steps left.
    """
    while state.call_stack or state.micro_queue:
        if should_execute_call_stack(state):
            state = apply_rule(state, EXECUTE_STACK)
        elif should_drain_microtask(state):
            state = apply_rule(state, DRAIN_MICROTASK)
        else:
            raise InvalidStateError("microtask drain blocked by a finished frame on the call stack")
    return state


def microtask_count(state: SimulatorState) -> int:
    """Number of microtasks waiting."""
    return len(state.micro_queue)


__all__ = ["drain_microtask_queue", "microtask_count"]
