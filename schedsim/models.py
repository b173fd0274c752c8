from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Process:
    """
    Identity and run-state of one process. Only the simulation driver
    mutates the counters.
    """

    pid: int
    arrival_index: int
    total_burst: int
    remaining_burst: int = field(init=False)
    wait_time: int = field(default=0, init=False)
    turnaround_time: int = field(default=0, init=False)
    start_time: Optional[int] = field(default=None, init=False)
    completion_time: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.remaining_burst = self.total_burst

    @property
    def executed(self) -> int:
        return self.total_burst - self.remaining_burst

    @property
    def done(self) -> bool:
        return self.remaining_burst == 0

    def is_eligible(self, time_elapsed: int) -> bool:
        return self.arrival_index <= time_elapsed and self.remaining_burst > 0


@dataclass(frozen=True)
class Selection:
    """Index into the process table and how many ticks it may run."""

    index: int
    run_length: int


@dataclass(frozen=True)
class TraceRecord:
    """
    State of the active process after one tick. ``pid`` is None for an idle
    tick, in which case the counters are None as well.
    """

    time: int
    pid: Optional[int]
    remaining_burst: Optional[int] = None
    wait_time: Optional[int] = None
    turnaround_time: Optional[int] = None

    @property
    def idle(self) -> bool:
        return self.pid is None


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of the Gantt chart. ``pid`` is None while the CPU
    sits idle.
    """

    pid: Optional[int]
    start_time: int
    end_time: int

    @property
    def idle(self) -> bool:
        return self.pid is None

    @property
    def width(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessSummary:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int


@dataclass
class SimulationSummary:
    processes: List[ProcessSummary]
    average_wait_time: float
    average_turnaround_time: float
    average_response_time: float
    makespan: int
    cpu_busy_time: int
    throughput: float
    cpu_utilization: float


@dataclass
class SimulationResult:
    policy: str
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    trace: List[TraceRecord] = field(default_factory=list)
