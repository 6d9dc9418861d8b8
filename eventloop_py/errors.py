"""Custom error types for eventloop-py."""


class EventLoopError(Exception):
    """Base error for all eventloop errors."""
    pass


class InvalidStateError(EventLoopError):
    """Raised when tick() is called on a state where no rule applies."""

    def __init__(self, detail: str = None):
        msg = "Invalid simulation state - no rule applies"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class TickBudgetExceeded(EventLoopError):
    """Raised by the run loop when max_ticks is reached before completion.

    The partial run is kept on ``result`` so callers can inspect the trace
    up to the point the budget ran out.
    """

    def __init__(self, max_ticks: int, result=None):
        self.max_ticks = max_ticks
        self.result = result
        super().__init__(
            f"Tick budget exhausted after {max_ticks} ticks without reaching completion"
        )


class SnapshotError(EventLoopError):
    """Raised when a persisted state snapshot cannot be restored."""

    def __init__(self, reason: str, source: str = None):
        msg = f"Invalid state snapshot: {reason}"
        if source:
            msg += f" ({source})"
        super().__init__(msg)
