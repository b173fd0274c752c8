"""
Tick-driven CPU scheduling simulator.

Replays FCFS, preemptive SJF and fixed-order Round-Robin one time unit at a
time, emitting a trace record per tick and summarising waiting and
turnaround times once every process has finished.
"""

from .errors import InvalidInput, PolicyMisconfiguration, SchedulerError, SimulationFault
from .metrics import summarize
from .simulation import compare, simulate

__all__ = [
    "InvalidInput",
    "PolicyMisconfiguration",
    "SchedulerError",
    "SimulationFault",
    "compare",
    "simulate",
    "summarize",
    "cli",
]
