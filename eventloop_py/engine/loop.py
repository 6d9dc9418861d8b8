"""
Run loop harness.

Drives a state through repeated ``step`` calls until the simulation
completes or a tick budget runs out, keeping one trace entry per tick. The
core ``tick`` has no cycle guard; this is where runs get bounded.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..config import load_config
from ..errors import TickBudgetExceeded
from ..logs import NDJSONLogger
from ..state.models import SimulatorState
from .rules import COMPLETE, Rule
from .tick import step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceStep:
    """The rule applied by one tick and the state it produced."""
    step_index: int
    rule: Rule
    state: SimulatorState


@dataclass
class RunResult:
    """Outcome of a bounded run."""
    initial_state: SimulatorState
    final_state: SimulatorState
    steps: List[TraceStep] = field(default_factory=list)
    completed: bool = False
    reason: str = "running"

    @property
    def ticks(self) -> int:
        return len(self.steps)

    @property
    def rules_fired(self) -> List[int]:
        return [s.rule.number for s in self.steps]

    @property
    def snapshots(self) -> List[SimulatorState]:
        """Every state of the run, starting with the initial one."""
        return [self.initial_state] + [s.state for s in self.steps]


class SimulationLoop:
    """
    Bounded driver around ``step``.

    Stops when rule 7 fires (unless ``stop_on_complete`` is off) or after
    ``max_ticks`` ticks. Reaching the budget without ever completing raises
    ``TickBudgetExceeded`` carrying the partial result.
    """

    def __init__(
        self,
        state: SimulatorState,
        max_ticks: Optional[int] = None,
        stop_on_complete: bool = True,
        trace_logger: Optional[NDJSONLogger] = None,
    ):
        if max_ticks is None:
            max_ticks = load_config().max_ticks
        if max_ticks < 0:
            raise ValueError(f"max_ticks must be non-negative, got {max_ticks}")

        self.state = state
        self.max_ticks = max_ticks
        self.stop_on_complete = stop_on_complete
        self.trace_logger = trace_logger
        self.result = RunResult(initial_state=state, final_state=state)

    def _trace(self, before: SimulatorState, rule: Rule, after: SimulatorState) -> None:
        if self.trace_logger is None:
            return
        for entry in after.log[len(before.log):]:
            self.trace_logger.log_entry(entry, step=after.step_index, rule=rule.number)

    def _finish(self, completed: bool, reason: str) -> RunResult:
        self.result.final_state = self.state
        self.result.completed = completed
        self.result.reason = reason
        if self.trace_logger is not None:
            self.trace_logger.run_end(self.state.now, self.state.step_index, completed, reason)
        logger.debug(
            "Run finished after %d ticks: %s (now=%s)",
            self.result.ticks, reason, self.state.now,
        )
        return self.result

    def run(self) -> RunResult:
        """Tick until completion or until the budget is spent."""
        if self.trace_logger is not None:
            self.trace_logger.run_start(self.state.now, {
                "max_ticks": self.max_ticks,
                "frame_interval": self.state.frame_interval,
            })

        seen_complete = False
        while self.result.ticks < self.max_ticks:
            before = self.state
            rule, self.state = step(before)
            self.result.steps.append(
                TraceStep(step_index=self.state.step_index, rule=rule, state=self.state)
            )
            self._trace(before, rule, self.state)

            if rule.number == COMPLETE.number:
                seen_complete = True
                if self.stop_on_complete:
                    return self._finish(True, "complete")

        if seen_complete:
            return self._finish(True, "max-ticks")

        logger.warning("Tick budget of %d exhausted at now=%s", self.max_ticks, self.state.now)
        if self.trace_logger is not None:
            self.trace_logger.warning(
                "tick budget exhausted",
                {"max_ticks": self.max_ticks},
                now=self.state.now,
            )
        result = self._finish(False, "max-ticks")
        raise TickBudgetExceeded(self.max_ticks, result=result)


def run_simulation(
    state: SimulatorState,
    max_ticks: Optional[int] = None,
    stop_on_complete: bool = True,
    trace_logger: Optional[NDJSONLogger] = None,
) -> RunResult:
    """Run ``state`` to completion, bounded by ``max_ticks``.

    ``max_ticks`` defaults to the configured budget (EVENTLOOP_MAX_TICKS).
    """
    return SimulationLoop(
        state,
        max_ticks=max_ticks,
        stop_on_complete=stop_on_complete,
        trace_logger=trace_logger,
    ).run()


__all__ = ["TraceStep", "RunResult", "SimulationLoop", "run_simulation"]
