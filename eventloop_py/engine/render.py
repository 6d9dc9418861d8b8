"""Render step and frame boundary detection.

A render is only ever requested explicitly (``request_render`` or the
invalidate-render effect). Whether a frame boundary has been reached is a
pure function of ``now``, ``last_frame_at`` and ``frame_interval``; rules 3
and 4 share it.
"""

from ..state.models import LogType, SimulatorState, append_log


def is_frame_boundary(state: SimulatorState) -> bool:
    """True once a full frame interval has passed since the last render."""
    return state.now >= state.last_frame_at + state.frame_interval


def execute_render_step(state: SimulatorState) -> SimulatorState:
    """Perform the render: clear the request and start a new frame at ``now``.

    ``last_frame_at`` moves to the current time, not to the boundary that
    was crossed, so renders are at least one interval apart but not pinned
    to a fixed grid.
    """
    new_state = state.model_copy(update={
        "render_pending": False,
        "last_frame_at": state.now,
        "frame_counter": state.frame_counter + 1,
    })
    return append_log(
        new_state,
        LogType.RENDER,
        "Render (style/layout/paint)",
        metadata={"rule": 3, "frame": new_state.frame_counter},
    )


def request_render(state: SimulatorState) -> SimulatorState:
    """Mark a render as pending."""
    if state.render_pending:
        return state
    return state.model_copy(update={"render_pending": True})


__all__ = ["is_frame_boundary", "execute_render_step", "request_render"]
