"""Tests for render steps and frame boundaries."""

from eventloop_py.engine.render import execute_render_step, is_frame_boundary, request_render
from eventloop_py.state import LogType, create_initial_state


class TestFrameBoundary:
    """Tests for is_frame_boundary."""

    def test_before_boundary(self):
        assert not is_frame_boundary(create_initial_state(now=15))

    def test_at_boundary(self):
        assert is_frame_boundary(create_initial_state(now=16))

    def test_relative_to_last_frame(self):
        state = create_initial_state(now=40).model_copy(update={"last_frame_at": 30})
        assert not is_frame_boundary(state)
        assert is_frame_boundary(state.model_copy(update={"now": 46}))

    def test_zero_interval_always_boundary(self):
        assert is_frame_boundary(create_initial_state(frame_interval=0))


class TestRenderStep:
    """Tests for execute_render_step."""

    def test_render_updates_frame_state(self):
        state = create_initial_state(now=20, render_pending=True)
        new_state = execute_render_step(state)
        assert new_state.render_pending is False
        assert new_state.last_frame_at == 20
        assert new_state.frame_counter == 1
        assert state.render_pending is True

    def test_render_logged(self):
        new_state = execute_render_step(create_initial_state(now=16, render_pending=True))
        entry = new_state.log[-1]
        assert entry.type == LogType.RENDER
        assert entry.timestamp == 16
        assert entry.metadata["frame"] == 1

    def test_render_does_not_count_step(self):
        new_state = execute_render_step(create_initial_state(now=16, render_pending=True))
        assert new_state.step_index == 0


class TestRequestRender:
    """Tests for request_render."""

    def test_sets_pending(self):
        assert request_render(create_initial_state()).render_pending is True

    def test_already_pending_returns_same_state(self):
        state = create_initial_state(render_pending=True)
        assert request_render(state) is state
