"""Tests for the built-in demos."""

import pytest

from eventloop_py.demos import DEMOS, get_demo, list_demos
from eventloop_py.engine import run_simulation
from eventloop_py.state import LogType


def _run(name, frame_interval=16):
    return run_simulation(get_demo(name).create(frame_interval), max_ticks=500).final_state


def _started(state):
    return [e.task_id for e in state.log if e.type == LogType.TASK_START]


class TestRegistry:
    """Tests for the demo registry."""

    def test_names(self):
        assert list(DEMOS) == [
            "basic-macro",
            "microtask-priority",
            "promise-chain",
            "render-timing",
            "nested-timers",
            "mixed-queues",
            "interval-cancel",
        ]
        assert [d.name for d in list_demos()] == list(DEMOS)

    def test_unknown_demo(self):
        with pytest.raises(KeyError) as exc_info:
            get_demo("nope")
        assert "basic-macro" in str(exc_info.value)

    @pytest.mark.parametrize("name", list(DEMOS))
    def test_every_demo_completes(self, name):
        result = run_simulation(get_demo(name).create(), max_ticks=500)
        assert result.completed


class TestDemoOrdering:
    """Each demo shows the ordering it is named after."""

    def test_basic_macro(self):
        assert _started(_run("basic-macro")) == ["macro-1"]

    def test_microtask_priority(self):
        assert _started(_run("microtask-priority")) == ["micro-1", "macro-1"]

    def test_promise_chain(self):
        assert _started(_run("promise-chain")) == ["promise-1", "promise-2", "promise-3", "macro-1"]

    def test_render_timing(self):
        state = _run("render-timing")
        kinds = [
            (e.type, e.task_id) for e in state.log
            if e.type in (LogType.TASK_START, LogType.RENDER)
        ]
        assert kinds == [
            (LogType.TASK_START, "raf-1"),
            (LogType.RENDER, None),
            (LogType.TASK_START, "macro-1"),
            (LogType.TASK_START, "macro-2"),
        ]
        assert state.frame_counter == 1
        assert state.now == 32

    def test_nested_timers(self):
        state = _run("nested-timers")
        assert _started(state) == ["outer-timer", "inner-timer-1", "inner-timer-2"]
        starts = {e.task_id: e.timestamp for e in state.log if e.type == LogType.TASK_START}
        assert starts["inner-timer-1"] == 10
        assert starts["inner-timer-2"] == 20

    def test_mixed_queues(self):
        assert _started(_run("mixed-queues")) == [
            "micro-2", "micro-3", "raf-1", "macro-1", "micro-1", "macro-2", "micro-4",
        ]

    def test_interval_cancel(self):
        state = _run("interval-cancel")
        ticks = [e.timestamp for e in state.log if e.message == "tick"]
        assert ticks == [10, 20, 30]
        assert state.web_apis == {}
        assert state.now == 35

    def test_custom_frame_interval(self):
        state = _run("render-timing", frame_interval=20)
        assert state.now == 40
