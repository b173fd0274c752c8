from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.table import Table

from .models import SimulationResult, SimulationSummary, TraceRecord


def format_header(policy: str, quantum: Optional[int]) -> str:
    if quantum is None:
        return policy
    return f"{policy} with Quantum {quantum}"


def format_trace_line(record: TraceRecord) -> str:
    """
    One line per tick, columns padded to three digits:

        T3   : P2   - Burst left   0, Wait time   0, Turnaround time   3
    """
    if record.idle:
        return f"T{record.time:<3} : idle"
    return (
        f"T{record.time:<3} : P{record.pid:<3} - "
        f"Burst left {record.remaining_burst:>3}, "
        f"Wait time {record.wait_time:>3}, "
        f"Turnaround time {record.turnaround_time:>3}"
    )


def format_summary(summary: SimulationSummary) -> str:
    lines: List[str] = []
    for p in summary.processes:
        lines.append("")
        lines.append(f"P{p.pid}")
        lines.append(f"        Waiting time:         {p.waiting_time:>3}")
        lines.append(f"        Turnaround time:      {p.turnaround_time:>3}")

    lines.append("")
    lines.append(f"Total average waiting time:     {summary.average_wait_time:.1f}")
    lines.append(f"Total average turnaround time:  {summary.average_turnaround_time:.1f}")
    return "\n".join(lines)


def process_table(summary: SimulationSummary) -> Table:
    headers = ["PID", "Arrive", "Burst", "Start", "Complete", "Wait", "Turnaround", "Response"]

    table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        table.add_column(h, justify="center" if h == "PID" else "right")

    for p in summary.processes:
        table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )
    return table


def system_table(summary: SimulationSummary) -> Table:
    table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    table.add_row("Avg waiting", f"{summary.average_wait_time:.2f}")
    table.add_row("Avg turnaround", f"{summary.average_turnaround_time:.2f}")
    table.add_row("Avg response", f"{summary.average_response_time:.2f}")
    table.add_row("Makespan", str(summary.makespan))
    table.add_row("Throughput (proc/time)", f"{summary.throughput:.3f}")
    table.add_row("CPU utilization", f"{summary.cpu_utilization*100:.1f}%")
    return table


def comparison_table(
    results: Sequence[SimulationResult],
    summaries: Sequence[SimulationSummary],
    title: str = "Algorithm comparison",
) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    table.add_column("Quantum", justify="right")
    table.add_column("Avg waiting", justify="right")
    table.add_column("Avg turnaround", justify="right")
    table.add_column("Avg response", justify="right")
    table.add_column("Makespan", justify="right")

    for result, summary in zip(results, summaries):
        table.add_row(
            result.policy,
            "" if result.quantum is None else str(result.quantum),
            f"{summary.average_wait_time:.2f}",
            f"{summary.average_turnaround_time:.2f}",
            f"{summary.average_response_time:.2f}",
            str(summary.makespan),
        )
    return table
