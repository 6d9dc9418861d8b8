"""
eventloop_py

A deterministic, step-by-step simulator of the browser event loop: call
stack, microtask queue, macrotask queue, animation-frame queue, Web API
registry and render steps, advanced one tick at a time on a logical clock.
"""

__version__ = "0.1.0"

# Tasks and effects
from .tasks import (
    EXTERNAL_ORIGIN,
    TaskType,
    TaskState,
    QueueKind,
    TaskBase,
    Task,
    Effect,
    parse_task,
    SyncTask,
    TimerTask,
    IntervalTask,
    MicrotaskTask,
    PromiseTask,
    AsyncContinuationTask,
    FetchTask,
    DomEventTask,
    RafTask,
    SpawnTaskEffect,
    LogEffect,
    RequestRenderEffect,
    CancelWebApiEffect,
)

# State
from .state import (
    LogType,
    WebApiType,
    Frame,
    DeferredOperation,
    LogEntry,
    SimulatorState,
    create_initial_state,
)

# Engine
from .engine import (
    enqueue_timer,
    enqueue_interval,
    enqueue_microtask,
    enqueue_promise,
    enqueue_async_continuation,
    enqueue_fetch,
    enqueue_dom_event,
    enqueue_raf,
    Rule,
    RULES,
    select_rule,
    tick,
    step,
    drain_microtask_queue,
    TraceStep,
    RunResult,
    SimulationLoop,
    run_simulation,
)

# Serialization
from .serialize import (
    state_to_dict,
    state_from_dict,
    state_to_json,
    state_from_json,
    snapshots_equal,
    format_state,
)

# Errors
from .errors import EventLoopError, InvalidStateError, TickBudgetExceeded, SnapshotError

# Config and demos
from .config import SimulatorConfig, load_config
from .demos import DEMOS, get_demo

__all__ = [
    "__version__",
    # Tasks and effects
    "EXTERNAL_ORIGIN",
    "TaskType",
    "TaskState",
    "QueueKind",
    "TaskBase",
    "Task",
    "Effect",
    "parse_task",
    "SyncTask",
    "TimerTask",
    "IntervalTask",
    "MicrotaskTask",
    "PromiseTask",
    "AsyncContinuationTask",
    "FetchTask",
    "DomEventTask",
    "RafTask",
    "SpawnTaskEffect",
    "LogEffect",
    "RequestRenderEffect",
    "CancelWebApiEffect",
    # State
    "LogType",
    "WebApiType",
    "Frame",
    "DeferredOperation",
    "LogEntry",
    "SimulatorState",
    "create_initial_state",
    # Engine
    "enqueue_timer",
    "enqueue_interval",
    "enqueue_microtask",
    "enqueue_promise",
    "enqueue_async_continuation",
    "enqueue_fetch",
    "enqueue_dom_event",
    "enqueue_raf",
    "Rule",
    "RULES",
    "select_rule",
    "tick",
    "step",
    "drain_microtask_queue",
    "TraceStep",
    "RunResult",
    "SimulationLoop",
    "run_simulation",
    # Serialization
    "state_to_dict",
    "state_from_dict",
    "state_to_json",
    "state_from_json",
    "snapshots_equal",
    "format_state",
    # Errors
    "EventLoopError",
    "InvalidStateError",
    "TickBudgetExceeded",
    "SnapshotError",
    # Config and demos
    "SimulatorConfig",
    "load_config",
    "DEMOS",
    "get_demo",
]
