"""Event loop engine: enqueue rules, priority rules, tick and run harness."""

from .deferred import (
    create_deferred_operation,
    is_operation_ready,
    find_earliest_ready_at,
    get_ready_operations,
    register_operation,
    cancel_operation,
    release_ready_operations,
)
from .enqueue import (
    enqueue_to_queue,
    enqueue_timer,
    enqueue_interval,
    enqueue_microtask,
    enqueue_promise,
    enqueue_async_continuation,
    enqueue_fetch,
    enqueue_dom_event,
    enqueue_raf,
    schedule_deferred,
)
from .render import is_frame_boundary, execute_render_step, request_render
from .rules import (
    Rule,
    RULES,
    RULE_ORDER,
    EXECUTE_STACK,
    DRAIN_MICROTASK,
    RENDER,
    RUN_ANIMATION_FRAME,
    EXECUTE_MACROTASK,
    ADVANCE_TIME,
    COMPLETE,
    should_execute_call_stack,
    should_drain_microtask,
    should_render,
    should_execute_raf,
    should_execute_macrotask,
    should_advance_time,
    is_simulation_complete,
    select_rule,
)
from .effects import process_task_effects
from .tick import tick, step, apply_rule
from .microtask import drain_microtask_queue, microtask_count
from .loop import TraceStep, RunResult, SimulationLoop, run_simulation

__all__ = [
    # Web API registry
    "create_deferred_operation",
    "is_operation_ready",
    "find_earliest_ready_at",
    "get_ready_operations",
    "register_operation",
    "cancel_operation",
    "release_ready_operations",
    # Enqueue
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
    # Render
    "is_frame_boundary",
    "execute_render_step",
    "request_render",
    # Rules
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
    # Tick
    "process_task_effects",
    "tick",
    "step",
    "apply_rule",
    "drain_microtask_queue",
    "microtask_count",
    # Harness
    "TraceStep",
    "RunResult",
    "SimulationLoop",
    "run_simulation",
]
