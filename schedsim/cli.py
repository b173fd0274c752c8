from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import SimulationConfig, load_config
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt, slices_from_trace
from .metrics import summarize
from .models import SimulationResult, TraceRecord
from .policies import make_policy, policy_names
from .report import (
    comparison_table,
    format_header,
    format_summary,
    format_trace_line,
    process_table,
    system_table,
)
from .simulation import compare, simulate
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser(config: SimulationConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Tick-by-tick CPU scheduling simulator (FCFS, SJF, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log scheduling decisions (dispatches, completions, idle ticks).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate one scheduling policy on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Policy to simulate (fcfs, sjf, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or P<id>,<burst> text workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum, required for rr and ignored by fcfs and sjf.",
    )
    run_parser.add_argument(
        "--no-trace",
        dest="trace",
        action="store_false",
        help="Skip the per-tick trace and only print the summary.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print plain text instead of tables.",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Pause between trace lines so the simulation can be followed live.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=config.step_delay,
        help=f"Seconds to wait between ticks when --step is used (default: {config.step_delay}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several policies on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or P<id>,<burst> text workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=policy_names(),
        help=f"Policies to compare (default: {' '.join(policy_names())}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=config.quantum,
        help=f"Time quantum used for rr when included (default: {config.quantum}).",
    )
    compare_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of simulations to run in parallel (default: one per policy).",
    )

    return parser


def _configure_logging(level: str) -> None:
    root = logging.getLogger("schedsim")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _print_result(result: SimulationResult, console: Console, plain: bool) -> None:
    summary = summarize(result.processes)
    slices = slices_from_trace(result.trace)

    if plain:
        print(format_summary(summary))
        print()
        print(render_gantt(slices))
        return

    console.print()
    panel, time_marks = build_rich_gantt(slices)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()
    console.print(process_table(summary))
    console.print()
    console.print(system_table(summary))


def _run(args: argparse.Namespace, config: SimulationConfig, console: Console) -> int:
    policy = make_policy(args.algorithm, quantum=args.quantum)
    processes = load_workload(Path(args.workload))

    header = format_header(policy.name, policy.quantum)
    if args.plain:
        print(header)
    else:
        console.print(f"[bold]Algorithm:[/bold] {header}")

    def on_tick(record: TraceRecord) -> None:
        if not args.trace:
            return
        line = format_trace_line(record)
        if args.plain:
            print(line, flush=True)
        else:
            console.print(line, highlight=False)
        if args.step:
            time.sleep(args.step_delay)

    try:
        result = simulate(policy, processes, on_tick=on_tick, max_ticks=config.max_ticks)
    except KeyboardInterrupt:
        console.print("[yellow]Simulation interrupted.[/yellow]")
        return 130

    _print_result(result, console, plain=args.plain)
    return 0


def _compare(args: argparse.Namespace, config: SimulationConfig, console: Console) -> int:
    workload_path = Path(args.workload)
    processes = load_workload(workload_path)

    results = compare(
        processes,
        policies=args.algorithms,
        quantum=args.quantum,
        max_workers=args.workers,
        max_ticks=config.max_ticks,
    )
    summaries = [summarize(r.processes) for r in results]
    console.print(comparison_table(results, summaries, title=f"Algorithm comparison: {workload_path}"))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    err_console = Console(stderr=True)
    try:
        config = load_config()
    except SchedulerError as exc:
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser = build_parser(config)
    args = parser.parse_args(argv)

    _configure_logging("DEBUG" if args.verbose else config.log_level)
    console = Console()

    try:
        if args.command == "run":
            return _run(args, config, console)
        if args.command == "compare":
            return _compare(args, config, console)
    except SchedulerError as exc:
        logger.debug("Run aborted", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2
    except OSError as exc:
        err_console.print(f"[red]Cannot read workload: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
