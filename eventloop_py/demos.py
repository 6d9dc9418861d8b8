"""
Built-in demo scenarios.

Each demo seeds an initial state through the public enqueue functions.
Demos that involve requestAnimationFrame start one frame interval into the
timeline so the first frame boundary is already reached when the rAF
callback is queued.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from .engine import (
    enqueue_interval,
    enqueue_microtask,
    enqueue_promise,
    enqueue_raf,
    enqueue_timer,
)
from .state import SimulatorState, create_initial_state
from .tasks import (
    CancelWebApiEffect,
    IntervalTask,
    LogEffect,
    MicrotaskTask,
    PromiseTask,
    RafTask,
    RequestRenderEffect,
    SpawnTaskEffect,
    TimerTask,
)


@dataclass(frozen=True)
class Demo:
    """A named, seeded starting state."""
    name: str
    title: str
    description: str
    build: Callable[[float], SimulatorState]

    def create(self, frame_interval: float = 16) -> SimulatorState:
        return self.build(frame_interval)


def basic_macro(frame_interval: float = 16) -> SimulatorState:
    state = create_initial_state(frame_interval=frame_interval)
    return enqueue_timer(
        state,
        TimerTask(id="macro-1", label="setTimeout(() => { ... }, 0)", duration_steps=2, delay=0),
    )


def microtask_priority(frame_interval: float = 16) -> SimulatorState:
    state = create_initial_state(frame_interval=frame_interval)
    state = enqueue_timer(
        state,
        TimerTask(id="macro-1", label="setTimeout (queued first)", duration_steps=2, delay=0),
    )
    return enqueue_microtask(
        state,
        MicrotaskTask(id="micro-1", label="Promise.resolve() (queued second)"),
    )


def promise_chain(frame_interval: float = 16) -> SimulatorState:
    third = PromiseTask(id="promise-3", label=".then(...) continuation")
    second = PromiseTask(
        id="promise-2",
        label=".then(...) continuation",
        effects=(SpawnTaskEffect(task=third, queue="micro"),),
    )
    first = PromiseTask(
        id="promise-1",
        label="Promise.resolve().then(...)",
        effects=(SpawnTaskEffect(task=second, queue="micro"),),
    )

    state = create_initial_state(frame_interval=frame_interval)
    state = enqueue_timer(state, TimerTask(id="macro-1", label="setTimeout", duration_steps=2))
    return enqueue_promise(state, first)


def render_timing(frame_interval: float = 16) -> SimulatorState:
    state = create_initial_state(frame_interval=frame_interval, now=frame_interval)
    state = enqueue_timer(
        state,
        TimerTask(id="macro-1", label="setTimeout (macro task)", duration_steps=2),
    )
    state = enqueue_raf(
        state,
        RafTask(
            id="raf-1",
            label="requestAnimationFrame",
            duration_steps=2,
            effects=(RequestRenderEffect(),),
        ),
    )
    return enqueue_timer(
        state,
        TimerTask(
            id="macro-2",
            label="setTimeout (next frame)",
            duration_steps=2,
            delay=frame_interval,
        ),
    )


def nested_timers(frame_interval: float = 16) -> SimulatorState:
    outer = TimerTask(
        id="outer-timer",
        label="setTimeout (outer)",
        duration_steps=2,
        effects=(
            SpawnTaskEffect(
                task=TimerTask(id="inner-timer-1", label="setTimeout (nested)", duration_steps=2, delay=10),
                defer=True,
            ),
            SpawnTaskEffect(
                task=TimerTask(id="inner-timer-2", label="setTimeout (another nested)", duration_steps=2, delay=20),
                defer=True,
            ),
        ),
    )
    state = create_initial_state(frame_interval=frame_interval)
    return enqueue_timer(state, outer)


def mixed_queues(frame_interval: float = 16) -> SimulatorState:
    state = create_initial_state(frame_interval=frame_interval, now=frame_interval)
    state = enqueue_timer(
        state,
        TimerTask(
            id="macro-1",
            label="setTimeout #1",
            duration_steps=2,
            effects=(
                SpawnTaskEffect(
                    task=PromiseTask(id="micro-1", label="Promise in timeout #1"),
                    queue="micro",
                ),
            ),
        ),
    )
    state = enqueue_promise(
        state,
        PromiseTask(
            id="micro-2",
            label="Promise.resolve()",
            effects=(
                SpawnTaskEffect(
                    task=PromiseTask(id="micro-3", label=".then() continuation"),
                    queue="micro",
                ),
            ),
        ),
    )
    state = enqueue_raf(state, RafTask(id="raf-1", label="requestAnimationFrame", duration_steps=2))
    return enqueue_timer(
        state,
        TimerTask(
            id="macro-2",
            label="setTimeout #2",
            duration_steps=2,
            delay=frame_interval,
            effects=(
                SpawnTaskEffect(
                    task=PromiseTask(id="micro-4", label="Promise in timeout #2"),
                    queue="micro",
                ),
            ),
        ),
    )


def interval_cancel(frame_interval: float = 16) -> SimulatorState:
    state = create_initial_state(frame_interval=frame_interval)
    state = enqueue_interval(
        state,
        IntervalTask(
            id="interval-1",
            label="setInterval tick",
            delay=10,
            effects=(LogEffect(message="tick"),),
        ),
    )
    return enqueue_timer(
        state,
        TimerTask(
            id="stop-timer",
            label="clearInterval after 35",
            delay=35,
            effects=(CancelWebApiEffect(operation_id="interval-1"),),
        ),
    )


DEMOS: Dict[str, Demo] = {
    demo.name: demo
    for demo in (
        Demo(
            "basic-macro",
            "Basic Macro Task",
            "A setTimeout(0) waits in the Web API registry, then runs as a macrotask.",
            basic_macro,
        ),
        Demo(
            "microtask-priority",
            "Microtask Priority",
            "A microtask queued after a timer still runs first.",
            microtask_priority,
        ),
        Demo(
            "promise-chain",
            "Promise Chain",
            "Chained .then() callbacks drain completely before the next macrotask.",
            promise_chain,
        ),
        Demo(
            "render-timing",
            "Render Timing",
            "A rAF callback runs at the frame boundary and its render follows it.",
            render_timing,
        ),
        Demo(
            "nested-timers",
            "Nested Timers",
            "A timer schedules two more timers that wait for their own delays.",
            nested_timers,
        ),
        Demo(
            "mixed-queues",
            "Mixed Queues",
            "Timers, promises and rAF interleaving across two frames.",
            mixed_queues,
        ),
        Demo(
            "interval-cancel",
            "Interval Cancel",
            "A setInterval fires every 10 units until a later timer clears it.",
            interval_cancel,
        ),
    )
}


def list_demos() -> List[Demo]:
    """All demos in registration order."""
    return list(DEMOS.values())


def get_demo(name: str) -> Demo:
    """Look up a demo by name.

    Raises:
        KeyError: if no demo has that name
    """
    try:
        return DEMOS[name]
    except KeyError:
        known = ", ".join(DEMOS)
        raise KeyError(f"Unknown demo {name!r}. Known demos: {known}") from None


__all__ = ["Demo", "DEMOS", "list_demos", "get_demo"]
