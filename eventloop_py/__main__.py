#!/usr/bin/env python3
"""
eventloop_py CLI Entry Point

Runs built-in demos or persisted snapshots through the simulator and prints
one line per tick.
"""

import sys
import argparse
import logging
import uuid
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import load_config
from .demos import get_demo, list_demos
from .engine import RunResult, run_simulation
from .errors import EventLoopError, TickBudgetExceeded
from .logs import create_logger
from .serialize import format_state, load_snapshot, save_snapshot
from .state import SimulatorState, format_time

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Pretty Printing Helpers
# ─────────────────────────────────────────────────────────────────────────────

def format_tick_lines(result: RunResult) -> List[str]:
    """One line per tick: step, logical time, rule and what happened."""
    lines = []
    previous = result.initial_state
    for trace in result.steps:
        new_entries = trace.state.log[len(previous.log):]
        message = "; ".join(entry.message for entry in new_entries) or "-"
        lines.append(
            f"  {trace.step_index:>4}  t={format_time(trace.state.now):<6} "
            f"[{trace.rule.number}] {trace.rule.name:<20} {message}"
        )
        previous = trace.state
    return lines


def print_result(result: RunResult) -> None:
    for line in format_tick_lines(result):
        print(line)
    print()
    print(format_state(result.final_state))


def simulate(
    state: SimulatorState,
    label: str,
    max_ticks: int,
    log_dir: Optional[str],
    snapshot_out: Optional[str],
) -> int:
    """Run ``state`` to completion and print the trace.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    trace_logger = None
    if log_dir:
        run_id = f"{label}-{uuid.uuid4().hex[:8]}"
        trace_logger = create_logger(run_id, base_dir=log_dir)

    try:
        result = run_simulation(state, max_ticks=max_ticks, trace_logger=trace_logger)
    except TickBudgetExceeded as e:
        if e.result is not None:
            print_result(e.result)
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except EventLoopError as e:
        if trace_logger is not None:
            trace_logger.error(str(e), now=state.now)
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        if trace_logger is not None:
            trace_logger.close()

    print_result(result)

    if trace_logger is not None:
        print(f"✓ Trace written to {trace_logger.log_path}")
    if snapshot_out:
        path = save_snapshot(result.final_state, snapshot_out)
        print(f"✓ Final state written to {path}")
    return 0


def cmd_demos(args) -> int:
    """List built-in demos."""
    for demo in list_demos():
        print(f"  {demo.name:<20} {demo.description}")
    return 0


def cmd_run(args) -> int:
    """Run a built-in demo."""
    config = load_config()
    try:
        demo = get_demo(args.demo)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1

    frame_interval = args.frame_interval if args.frame_interval is not None else config.frame_interval
    if frame_interval < 0:
        print("Error: --frame-interval must be non-negative", file=sys.stderr)
        return 1

    print(f"🚀 Running demo: {demo.title}")
    return simulate(
        demo.create(frame_interval),
        label=demo.name,
        max_ticks=args.max_ticks if args.max_ticks is not None else config.max_ticks,
        log_dir=args.log_dir or config.log_dir,
        snapshot_out=args.snapshot_out,
    )


def cmd_replay(args) -> int:
    """Run a persisted snapshot to completion."""
    config = load_config()
    try:
        state = load_snapshot(args.snapshot)
    except EventLoopError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"🚀 Replaying snapshot: {args.snapshot}")
    return simulate(
        state,
        label=Path(args.snapshot).stem,
        max_ticks=args.max_ticks if args.max_ticks is not None else config.max_ticks,
        log_dir=args.log_dir or config.log_dir,
        snapshot_out=args.snapshot_out,
    )


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Deterministic browser event loop simulator",
        prog="eventloop_py"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # demos command
    subparsers.add_parser("demos", help="List built-in demos")

    # run command
    run_parser = subparsers.add_parser("run", help="Run a built-in demo")
    run_parser.add_argument("demo", help="Demo name (see 'demos')")
    run_parser.add_argument("--frame-interval", type=float, help="Frame interval (default: 16)")

    # replay command
    replay_parser = subparsers.add_parser("replay", help="Run a saved state snapshot to completion")
    replay_parser.add_argument("snapshot", help="Snapshot JSON file")

    for sub in (run_parser, replay_parser):
        sub.add_argument("--max-ticks", type=int, help="Tick budget (default: 10000)")
        sub.add_argument("--log-dir", help="Write an NDJSON trace under this directory")
        sub.add_argument("--snapshot-out", help="Write the final state as JSON to this file")

    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if getattr(args, "max_ticks", None) is not None and args.max_ticks < 0:
        print("Error: --max-ticks must be non-negative", file=sys.stderr)
        return 1

    # Execute command
    if args.command == "demos":
        return cmd_demos(args)

    elif args.command == "run":
        return cmd_run(args)

    elif args.command == "replay":
        return cmd_replay(args)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
