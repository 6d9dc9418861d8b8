"""Tests for the run loop harness."""

import json
from pathlib import Path

import pytest

from eventloop_py.engine.enqueue import enqueue_interval, enqueue_microtask, enqueue_timer
from eventloop_py.engine.loop import SimulationLoop, run_simulation
from eventloop_py.errors import TickBudgetExceeded
from eventloop_py.logs import NDJSONLogger
from eventloop_py.state import create_initial_state
from eventloop_py.tasks import IntervalTask, MicrotaskTask, TimerTask


@pytest.fixture
def timer_state():
    state = create_initial_state()
    state = enqueue_timer(state, TimerTask(id="t", label="timeout", delay=10))
    return enqueue_microtask(state, MicrotaskTask(id="m", label="then"))


class TestRunSimulation:
    """Tests for run_simulation."""

    def test_runs_to_completion(self, timer_state):
        result = run_simulation(timer_state, max_ticks=100)
        assert result.completed is True
        assert result.reason == "complete"
        assert result.rules_fired == [2, 1, 6, 5, 1, 7]
        assert result.final_state.now == 10
        assert result.ticks == 6

    def test_trace_steps(self, timer_state):
        result = run_simulation(timer_state, max_ticks=100)
        assert [s.step_index for s in result.steps] == [1, 2, 3, 4, 5, 6]
        assert result.steps[-1].state is result.final_state
        assert result.snapshots[0] is timer_state
        assert len(result.snapshots) == result.ticks + 1

    def test_budget_exceeded(self):
        state = enqueue_interval(create_initial_state(), IntervalTask(id="iv", label="tick", delay=5))
        with pytest.raises(TickBudgetExceeded) as exc_info:
            run_simulation(state, max_ticks=20)
        err = exc_info.value
        assert err.max_ticks == 20
        assert err.result.ticks == 20
        assert err.result.completed is False
        assert err.result.reason == "max-ticks"

    def test_interval_releases_evenly(self):
        state = enqueue_interval(create_initial_state(), IntervalTask(id="iv", label="tick", delay=5))
        with pytest.raises(TickBudgetExceeded) as exc_info:
            run_simulation(state, max_ticks=30)
        result = exc_info.value.result
        advance_times = [s.state.now for s in result.steps if s.rule.number == 6]
        assert advance_times == [5 * (k + 1) for k in range(len(advance_times))]
        for snapshot in result.snapshots:
            assert list(snapshot.web_apis) == ["iv"]

    def test_keep_ticking_after_complete(self):
        result = run_simulation(create_initial_state(), max_ticks=3, stop_on_complete=False)
        assert result.completed is True
        assert result.rules_fired == [7, 7, 7]
        assert result.reason == "max-ticks"

    def test_zero_budget(self):
        with pytest.raises(TickBudgetExceeded):
            run_simulation(create_initial_state(), max_ticks=0)

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            SimulationLoop(create_initial_state(), max_ticks=-1)

    def test_default_budget_from_environment(self, monkeypatch):
        monkeypatch.setenv("EVENTLOOP_MAX_TICKS", "42")
        loop = SimulationLoop(create_initial_state())
        assert loop.max_ticks == 42


class TestTraceLogging:
    """Tests for NDJSON trace output."""

    def test_writes_trace(self, timer_state, tmp_path):
        trace_logger = NDJSONLogger("run-1", base_dir=str(tmp_path))
        run_simulation(timer_state, max_ticks=100, trace_logger=trace_logger)
        trace_logger.close()

        log_path = Path(tmp_path) / "runs" / "run-1" / "logs" / "stream.ndjson"
        events = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert events[0]["type"] == "run.start"
        assert events[-1]["type"] == "run.end"
        assert events[-1]["payload"]["completed"] is True

        starts = [e for e in events if e["type"] == "task.start"]
        assert [e["task"] for e in starts] == ["m", "t"]
        assert starts[0]["rule"] == 2
        assert starts[1]["ts"] == 10

        summary = json.loads((log_path.parent / "stream.summary.json").read_text())
        assert summary["event_counts"]["task.complete"] == 2
        assert summary["last_timestamp"] == 10

    def test_budget_warning_traced(self, tmp_path):
        state = enqueue_interval(create_initial_state(), IntervalTask(id="iv", label="tick", delay=5))
        trace_logger = NDJSONLogger("run-2", base_dir=str(tmp_path))
        with pytest.raises(TickBudgetExceeded):
            run_simulation(state, max_ticks=5, trace_logger=trace_logger)
        trace_logger.close()
        assert trace_logger.get_summary().warnings == 1
