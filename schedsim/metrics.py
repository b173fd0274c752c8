from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidInput
from .models import Process, ProcessSummary, SimulationSummary


def _process_summary(p: Process) -> ProcessSummary:
    if not p.done or p.start_time is None or p.completion_time is None:
        raise InvalidInput(f"P{p.pid} has not completed (remaining burst {p.remaining_burst})")

    return ProcessSummary(
        pid=p.pid,
        arrival_time=p.arrival_index,
        burst_time=p.total_burst,
        start_time=p.start_time,
        completion_time=p.completion_time,
        waiting_time=p.wait_time,
        turnaround_time=p.turnaround_time,
        response_time=p.start_time - p.arrival_index,
    )


def summarize(processes: Sequence[Process]) -> SimulationSummary:
    """
    Final per-process waiting/turnaround times and their averages, plus
    throughput and CPU utilization over the whole run.
    """
    if not processes:
        raise InvalidInput("Cannot summarize an empty process table")

    per_process: List[ProcessSummary] = [_process_summary(p) for p in processes]
    n = len(per_process)

    makespan = max(p.completion_time for p in per_process)
    cpu_busy_time = sum(p.burst_time for p in per_process)

    throughput = n / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SimulationSummary(
        processes=per_process,
        average_wait_time=sum(p.waiting_time for p in per_process) / n,
        average_turnaround_time=sum(p.turnaround_time for p in per_process) / n,
        average_response_time=sum(p.response_time for p in per_process) / n,
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
