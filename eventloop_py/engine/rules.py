"""
Priority rules for the event loop.

Each predicate tests whether one rule can fire. ``tick`` evaluates them in
the order of ``RULE_ORDER`` and applies the first that holds:

1. Execute the current call stack frame
2. Drain one microtask
3. Render at a frame boundary
4. Run one rAF callback at a frame boundary
5. Run one macrotask
6. Advance time to the next Web API operation
7. Simulation complete
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..state.models import SimulatorState
from .render import is_frame_boundary


@dataclass(frozen=True)
class Rule:
    """Description of one event loop rule."""
    number: int
    name: str
    description: str
    condition: str


EXECUTE_STACK = Rule(
    number=1,
    name="execute-stack",
    description="A running task finishes its declared cost before anything else happens.",
    condition="call stack non-empty AND top frame has remaining steps",
)
DRAIN_MICROTASK = Rule(
    number=2,
    name="drain-microtask",
    description="Microtasks run to completion before rendering or any other task class.",
    condition="call stack empty AND microtask queue non-empty",
)
RENDER = Rule(
    number=3,
    name="render",
    description="A requested render happens once a frame boundary is reached.",
    condition="stack and microtasks empty AND render pending AND now >= last_frame_at + frame_interval",
)
RUN_ANIMATION_FRAME = Rule(
    number=4,
    name="run-animation-frame",
    description="rAF callbacks run once the frame boundary is crossed.",
    condition="stack and microtasks empty AND now >= last_frame_at + frame_interval AND rAF queue non-empty",
)
EXECUTE_MACROTASK = Rule(
    number=5,
    name="execute-macrotask",
    description="Timers, events and fetch callbacks run one per turn.",
    condition="stack and microtasks empty AND macrotask queue non-empty",
)
ADVANCE_TIME = Rule(
    number=6,
    name="advance-time",
    description="When nothing is ready, jump forward to the next Web API operation.",
    condition="stack and all queues empty AND Web API registry non-empty",
)
COMPLETE = Rule(
    number=7,
    name="complete",
    description="All work is done.",
    condition="stack, all queues and Web API registry empty",
)

RULES: Dict[int, Rule] = {
    rule.number: rule
    for rule in (
        EXECUTE_STACK,
        DRAIN_MICROTASK,
        RENDER,
        RUN_ANIMATION_FRAME,
        EXECUTE_MACROTASK,
        ADVANCE_TIME,
        COMPLETE,
    )
}


def should_execute_call_stack(state: SimulatorState) -> bool:
    """Rule 1: a frame is running and has steps left."""
    frame = state.current_frame
    return frame is not None and frame.steps_remaining > 0


def should_drain_microtask(state: SimulatorState) -> bool:
    """Rule 2: the stack is empty and a microtask is waiting."""
    return not state.call_stack and len(state.micro_queue) > 0


def should_render(state: SimulatorState) -> bool:
    """Rule 3: render requested and frame boundary reached, nothing running."""
    return (
        not state.call_stack
        and not state.micro_queue
        and state.render_pending
        and is_frame_boundary(state)
    )


def should_execute_raf(state: SimulatorState) -> bool:
    """Rule 4: frame boundary reached and a rAF callback is waiting.

    Independent of whether a render was requested.
    """
    return (
        not state.call_stack
        and not state.micro_queue
        and is_frame_boundary(state)
        and len(state.raf_queue) > 0
    )


def should_execute_macrotask(state: SimulatorState) -> bool:
    """Rule 5: nothing running, no microtasks, a macrotask is waiting."""
    return not state.call_stack and not state.micro_queue and len(state.macro_queue) > 0


def should_advance_time(state: SimulatorState) -> bool:
    """Rule 6: every queue empty but Web API operations are pending."""
    return state.is_idle and len(state.web_apis) > 0


def is_simulation_complete(state: SimulatorState) -> bool:
    """Rule 7: nothing running, queued or pending."""
    return state.is_idle and not state.web_apis


RULE_ORDER: List[Tuple[Rule, Callable[[SimulatorState], bool]]] = [
    (EXECUTE_STACK, should_execute_call_stack),
    (DRAIN_MICROTASK, should_drain_microtask),
    (RENDER, should_render),
    (RUN_ANIMATION_FRAME, should_execute_raf),
    (EXECUTE_MACROTASK, should_execute_macrotask),
    (ADVANCE_TIME, should_advance_time),
    (COMPLETE, is_simulation_complete),
]


def select_rule(state: SimulatorState) -> Optional[Rule]:
    """The first rule whose condition holds, or None for an invalid state."""
    for rule, predicate in RULE_ORDER:
        if predicate(state):
            return rule
    return None


__all__ = [
    "Rule",
    "RULES",
    "RULE_ORDER",
    "EXECUTE_STACK",
    "DRAIN_MICROTASK",
    "RENDER",
    "RUN_ANIMATION_FRAME",
    "EXECUTE_MACROTASK",
    "ADVANCE_TIME",
    "COMPLETE",
    "should_execute_call_stack",
    "should_drain_microtask",
    "should_render",
    "should_execute_raf",
    "should_execute_macrotask",
    "should_advance_time",
    "is_simulation_complete",
    "select_rule",
]
