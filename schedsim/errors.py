from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidInput(SchedulerError, ValueError):
    """
    The workload or run parameters cannot be simulated: empty process list,
    non-positive burst or quantum, duplicate pids, malformed workload files.
    """


class PolicyMisconfiguration(SchedulerError, ValueError):
    """An unknown policy was requested, or Round-Robin without a quantum."""


class SimulationFault(SchedulerError, RuntimeError):
    """
    An invariant broke while the clock was running. Bad input is rejected
    before the first tick, so this always points at a driver or policy defect.
    """
