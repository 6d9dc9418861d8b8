"""NDJSON trace logging for simulation runs.

Provides structured NDJSON event logging with:
- Per-run log files
- Logical (simulated) timestamps instead of wall-clock time
- Event type tracking and counts
- Stream and file output modes
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO
from enum import Enum

from ..state.models import LogEntry


class EventType(str, Enum):
    """Event types written to the trace."""
    RUN_START = "run.start"
    RUN_END = "run.end"
    TASK_START = "task.start"
    TASK_COMPLETE = "task.complete"
    ENQUEUE = "enqueue"
    RENDER = "render"
    USER = "user"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# Simulator log categories mapped onto trace event types
LOG_ENTRY_EVENTS = {
    "task-start": EventType.TASK_START,
    "task-complete": EventType.TASK_COMPLETE,
    "enqueue": EventType.ENQUEUE,
    "render": EventType.RENDER,
    "user": EventType.USER,
}


@dataclass
class LogEvent:
    """A single trace event."""
    timestamp: float
    event_type: str
    run_id: str
    payload: Dict[str, Any]
    step: Optional[int] = None
    task_id: Optional[str] = None
    rule: Optional[int] = None

    def to_ndjson(self) -> str:
        """Serialize to NDJSON line."""
        data = {
            "ts": self.timestamp,
            "type": self.event_type,
            "run": self.run_id,
            "payload": self.payload,
        }
        if self.step is not None:
            data["step"] = self.step
        if self.task_id:
            data["task"] = self.task_id
        if self.rule is not None:
            data["rule"] = self.rule
        return json.dumps(data, separators=(',', ':'))


@dataclass
class LogSummary:
    """Summary statistics for a trace file."""
    run_id: str
    total_events: int = 0
    event_counts: Dict[str, int] = field(default_factory=dict)
    first_timestamp: Optional[float] = None
    last_timestamp: Optional[float] = None
    total_renders: int = 0
    errors: int = 0
    warnings: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "total_events": self.total_events,
            "event_counts": self.event_counts,
            "first_timestamp": self.first_timestamp,
            "last_timestamp": self.last_timestamp,
            "total_renders": self.total_renders,
            "errors": self.errors,
            "warnings": self.warnings,
        }


@dataclass
class SummarizationConfig:
    """Configuration for trace summarization and truncation.

    After ``max_events_before_summary`` events, events outside
    ``keep_events`` are written with only their message. After
    ``truncate_after_events`` they are dropped from the stream entirely.
    The summary file always counts every event.
    """
    max_events_before_summary: int = 10000
    truncate_after_events: int = 50000
    keep_events: List[str] = field(default_factory=lambda: [
        EventType.RUN_START,
        EventType.RUN_END,
        EventType.RENDER,
        EventType.ERROR,
        EventType.WARNING,
    ])


class NDJSONLogger:
    """NDJSON trace logger for simulation runs.

    Writes events to:
    - {base_dir}/runs/{run_id}/logs/stream.ndjson
    - {base_dir}/runs/{run_id}/logs/stream.summary.json
    """

    def __init__(
        self,
        run_id: str,
        base_dir: str = ".eventloop",
        config: Optional[SummarizationConfig] = None,
        stream: Optional[TextIO] = None,
    ):
        self.run_id = run_id
        self.base_dir = Path(base_dir)
        self.config = config or SummarizationConfig()
        self.stream = stream

        # Tracking
        self.summary = LogSummary(run_id=run_id)
        self._file: Optional[TextIO] = None
        self._summarizing = False

        self._init_log_dir()

    def _init_log_dir(self) -> None:
        """Create log directory structure."""
        log_dir = self.base_dir / "runs" / self.run_id / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = log_dir / "stream.ndjson"
        self.summary_path = log_dir / "stream.summary.json"

    def _open_file(self) -> TextIO:
        """Open log file for appending."""
        if self._file is None:
            self._file = open(self.log_path, 'a', encoding='utf-8')
        return self._file

    def log(
        self,
        event_type: str,
        payload: Dict[str, Any],
        timestamp: float = 0,
        step: Optional[int] = None,
        task_id: Optional[str] = None,
        rule: Optional[int] = None,
    ) -> None:
        """Log an event at a logical timestamp."""
        event = LogEvent(
            timestamp=timestamp,
            event_type=str(getattr(event_type, "value", event_type)),
            run_id=self.run_id,
            payload=payload,
            step=step,
            task_id=task_id,
            rule=rule,
        )

        self._update_summary(event)

        if self.summary.total_events >= self.config.truncate_after_events:
            if event.event_type not in self.config.keep_events:
                return  # Drop verbose events
        elif self._summarizing and event.event_type not in self.config.keep_events:
            # Summarized events keep only their message
            event.payload = {k: v for k, v in event.payload.items() if k == "message"}

        line = event.to_ndjson() + "\n"

        if self.stream:
            self.stream.write(line)
            self.stream.flush()

        f = self._open_file()
        f.write(line)
        f.flush()

    def _update_summary(self, event: LogEvent) -> None:
        """Update summary statistics."""
        self.summary.total_events += 1

        self.summary.event_counts[event.event_type] = (
            self.summary.event_counts.get(event.event_type, 0) + 1
        )

        if self.summary.first_timestamp is None:
            self.summary.first_timestamp = event.timestamp
        self.summary.last_timestamp = event.timestamp

        if event.event_type == EventType.RENDER:
            self.summary.total_renders += 1

        if event.event_type == EventType.ERROR:
            self.summary.errors += 1
        elif event.event_type == EventType.WARNING:
            self.summary.warnings += 1

        if (not self._summarizing and
            self.summary.total_events >= self.config.max_events_before_summary):
            self._summarizing = True
            self.log(
                EventType.INFO,
                {"message": f"Log summarization active after {self.summary.total_events} events"},
                timestamp=event.timestamp,
            )

    def run_start(self, now: float, details: Optional[Dict[str, Any]] = None) -> None:
        """Log the start of a run."""
        self.log(EventType.RUN_START, dict(details or {}), timestamp=now, step=0)

    def run_end(self, now: float, step: int, completed: bool, reason: str) -> None:
        """Log the end of a run."""
        self.log(
            EventType.RUN_END,
            {"completed": completed, "reason": reason},
            timestamp=now,
            step=step,
        )

    def log_entry(self, entry: LogEntry, step: int, rule: Optional[int] = None) -> None:
        """Forward one simulator log entry to the trace."""
        entry_type = getattr(entry.type, "value", entry.type)
        payload: Dict[str, Any] = {"message": entry.message}
        if entry.metadata:
            payload["metadata"] = self._safe_serialize(entry.metadata)
        self.log(
            LOG_ENTRY_EVENTS.get(entry_type, EventType.INFO),
            payload,
            timestamp=entry.timestamp,
            step=step,
            task_id=entry.task_id,
            rule=rule,
        )

    def error(self, message: str, details: Optional[Dict[str, Any]] = None, now: float = 0) -> None:
        """Log error."""
        payload = {"message": message}
        if details:
            payload["details"] = details
        self.log(EventType.ERROR, payload, timestamp=now)

    def warning(self, message: str, details: Optional[Dict[str, Any]] = None, now: float = 0) -> None:
        """Log warning."""
        payload = {"message": message}
        if details:
            payload["details"] = details
        self.log(EventType.WARNING, payload, timestamp=now)

    def _safe_serialize(self, value: Any) -> Any:
        """Safely serialize a value for logging."""
        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)

    def get_summary(self) -> LogSummary:
        """Get current summary."""
        return self.summary

    def write_summary(self) -> None:
        """Write summary file."""
        with open(self.summary_path, 'w', encoding='utf-8') as f:
            json.dump(self.summary.to_dict(), f, indent=2)

    def close(self) -> None:
        """Close logger and write final summary."""
        self.write_summary()
        if self._file:
            self._file.close()
            self._file = None


def create_logger(
    run_id: str,
    base_dir: str = ".eventloop",
    stream: Optional[TextIO] = None,
) -> NDJSONLogger:
    """Create a trace logger for a run."""
    return NDJSONLogger(run_id, base_dir, stream=stream)
