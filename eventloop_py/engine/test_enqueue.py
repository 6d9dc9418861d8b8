"""Tests for enqueue rules."""

import pytest

from eventloop_py.engine.enqueue import (
    enqueue_async_continuation,
    enqueue_dom_event,
    enqueue_fetch,
    enqueue_interval,
    enqueue_microtask,
    enqueue_promise,
    enqueue_raf,
    enqueue_timer,
    enqueue_to_queue,
    schedule_deferred,
)
from eventloop_py.state import LogType, WebApiType, create_initial_state
from eventloop_py.tasks import (
    AsyncContinuationTask,
    DomEventTask,
    FetchTask,
    IntervalTask,
    MicrotaskTask,
    PromiseTask,
    QueueKind,
    RafTask,
    SyncTask,
    TaskState,
    TimerTask,
)


@pytest.fixture
def state():
    return create_initial_state(now=100)


class TestEnqueueTimer:
    """Tests for setTimeout."""

    def test_registers_with_ready_at(self, state):
        new_state = enqueue_timer(state, TimerTask(id="t1", label="timeout", delay=50))
        op = new_state.web_apis["t1"]
        assert op.type == WebApiType.TIMER
        assert op.ready_at == 150
        assert op.target_queue == QueueKind.MACRO
        assert op.recurring is False
        assert op.payload_task.state == TaskState.WAITING_WEBAPI
        assert op.payload_task.enqueue_seq == 0
        assert new_state.macro_queue == ()
        assert new_state.enqueue_counter == 1

    def test_zero_delay_still_uses_registry(self, state):
        new_state = enqueue_timer(state, TimerTask(id="t1", label="timeout"))
        assert "t1" in new_state.web_apis
        assert new_state.web_apis["t1"].ready_at == 100
        assert new_state.macro_queue == ()

    def test_delay_override(self, state):
        new_state = enqueue_timer(state, TimerTask(id="t1", label="timeout", delay=5), delay=20)
        op = new_state.web_apis["t1"]
        assert op.ready_at == 120
        assert op.payload_task.delay == 20

    def test_negative_delay_rejected(self, state):
        with pytest.raises(ValueError):
            enqueue_timer(state, TimerTask(id="t1", label="timeout"), delay=-1)

    def test_input_state_untouched(self, state):
        enqueue_timer(state, TimerTask(id="t1", label="timeout", delay=50))
        assert state.web_apis == {}
        assert state.enqueue_counter == 0
        assert state.log == ()

    def test_logs_enqueue(self, state):
        new_state = enqueue_timer(state, TimerTask(id="t1", label="timeout", delay=50))
        entry = new_state.log[-1]
        assert entry.type == LogType.ENQUEUE
        assert entry.task_id == "t1"
        assert entry.timestamp == 100


class TestEnqueueInterval:
    """Tests for setInterval."""

    def test_registers_recurring(self, state):
        new_state = enqueue_interval(state, IntervalTask(id="iv", label="tick", delay=10))
        op = new_state.web_apis["iv"]
        assert op.type == WebApiType.INTERVAL
        assert op.recurring is True
        assert op.ready_at == 110

    def test_delay_override(self, state):
        new_state = enqueue_interval(state, IntervalTask(id="iv", label="tick", delay=10), delay=25)
        op = new_state.web_apis["iv"]
        assert op.ready_at == 125
        assert op.payload_task.delay == 25
        assert op.payload_task.enqueue_seq == 0

    def test_rejects_non_interval(self, state):
        with pytest.raises(TypeError):
            enqueue_interval(state, TimerTask(id="t1", label="timeout"))


class TestEnqueueMicrotasks:
    """Microtask sources go straight to the microtask queue."""

    @pytest.mark.parametrize("enqueue, task", [
        (enqueue_microtask, MicrotaskTask(id="m1", label="queueMicrotask")),
        (enqueue_promise, PromiseTask(id="m1", label="then")),
        (enqueue_async_continuation, AsyncContinuationTask(id="m1", label="await")),
    ])
    def test_direct_to_micro_queue(self, state, enqueue, task):
        new_state = enqueue(state, task)
        assert [t.id for t in new_state.micro_queue] == ["m1"]
        assert new_state.micro_queue[0].state == TaskState.QUEUED
        assert new_state.micro_queue[0].enqueue_seq == 0
        assert new_state.web_apis == {}

    def test_fifo_order(self, state):
        state = enqueue_microtask(state, MicrotaskTask(id="a", label="a"))
        state = enqueue_microtask(state, MicrotaskTask(id="b", label="b"))
        assert [t.id for t in state.micro_queue] == ["a", "b"]
        assert [t.enqueue_seq for t in state.micro_queue] == [0, 1]


class TestEnqueueOther:
    """Tests for fetch, DOM events and rAF."""

    def test_fetch_uses_latency(self, state):
        new_state = enqueue_fetch(state, FetchTask(id="f1", label="GET /api", url="/api", latency=300))
        op = new_state.web_apis["f1"]
        assert op.type == WebApiType.FETCH
        assert op.ready_at == 400

    def test_fetch_latency_override(self, state):
        new_state = enqueue_fetch(state, FetchTask(id="f1", label="GET", url="/"), latency=7)
        assert new_state.web_apis["f1"].ready_at == 107

    def test_immediate_dom_event(self, state):
        new_state = enqueue_dom_event(state, DomEventTask(id="d1", label="onClick", event_type="click"))
        assert [t.id for t in new_state.macro_queue] == ["d1"]
        assert new_state.web_apis == {}

    def test_delayed_dom_event(self, state):
        new_state = enqueue_dom_event(
            state,
            DomEventTask(id="d1", label="onLoad", event_type="load"),
            immediate=False,
            delay=25,
        )
        op = new_state.web_apis["d1"]
        assert op.type == WebApiType.DOM_EVENT
        assert op.ready_at == 125

    def test_raf(self, state):
        new_state = enqueue_raf(state, RafTask(id="r1", label="frame"))
        assert [t.id for t in new_state.raf_queue] == ["r1"]

    def test_enqueue_to_queue_by_name(self, state):
        new_state = enqueue_to_queue(state, SyncTask(id="s1", label="s"), "macro")
        assert [t.id for t in new_state.macro_queue] == ["s1"]


class TestSequenceNumbers:
    """Every placement takes the next sequence number."""

    def test_strictly_increasing_across_sources(self, state):
        state = enqueue_timer(state, TimerTask(id="t1", label="t", delay=5))
        state = enqueue_microtask(state, MicrotaskTask(id="m1", label="m"))
        state = enqueue_raf(state, RafTask(id="r1", label="r"))
        state = enqueue_fetch(state, FetchTask(id="f1", label="f", url="/"))
        seqs = [
            state.web_apis["t1"].payload_task.enqueue_seq,
            state.micro_queue[0].enqueue_seq,
            state.raf_queue[0].enqueue_seq,
            state.web_apis["f1"].payload_task.enqueue_seq,
        ]
        assert seqs == [0, 1, 2, 3]
        assert state.enqueue_counter == 4


class TestScheduleDeferred:
    """Tests for schedule_deferred."""

    def test_timer(self, state):
        new_state = schedule_deferred(state, TimerTask(id="t1", label="t", delay=10))
        assert new_state.web_apis["t1"].ready_at == 110

    def test_interval_is_recurring(self, state):
        new_state = schedule_deferred(state, IntervalTask(id="iv", label="i", delay=10))
        assert new_state.web_apis["iv"].recurring is True

    def test_target_queue(self, state):
        new_state = schedule_deferred(state, TimerTask(id="t1", label="t"), target_queue=QueueKind.MICRO)
        assert new_state.web_apis["t1"].target_queue == QueueKind.MICRO

    def test_untimed_kinds_return_none(self, state):
        assert schedule_deferred(state, MicrotaskTask(id="m", label="m")) is None
