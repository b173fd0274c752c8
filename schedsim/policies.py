from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Type

from .errors import InvalidInput, PolicyMisconfiguration
from .models import Process, Selection

logger = logging.getLogger(__name__)


class Policy:
    """
    Picks the process to run next and for how many ticks.

    ``select`` returns None when no process is eligible at ``time_elapsed``;
    the driver then records an idle tick.
    """

    name = "policy"
    key = ""

    def reset(self) -> None:
        """Forget any state carried over from a previous run."""

    def select(self, time_elapsed: int, processes: Sequence[Process]) -> Optional[Selection]:
        raise NotImplementedError

    @property
    def quantum(self) -> Optional[int]:
        return None


class FCFS(Policy):
    """
    First-Come First-Served (non-preemptive).

    The incomplete process with the lowest arrival index keeps the CPU until
    its burst is exhausted. Re-evaluating every tick always lands on the same
    process, so a run is never interrupted.
    """

    name = "First Come First Served"
    key = "fcfs"

    def select(self, time_elapsed: int, processes: Sequence[Process]) -> Optional[Selection]:
        for idx, p in enumerate(processes):
            if p.done:
                continue
            # Later processes cannot overtake one that has not arrived yet.
            if p.arrival_index > time_elapsed:
                return None
            return Selection(index=idx, run_length=1)
        return None


class SJF(Policy):
    """
    Shortest Job First, preemptive on arrival.

    Every tick, among processes that have arrived and are not finished, pick
    the one with the smallest remaining burst; ties go to the earliest
    arrival. A newly arrived shorter job therefore preempts immediately.
    """

    name = "Shortest Job First"
    key = "sjf"

    def select(self, time_elapsed: int, processes: Sequence[Process]) -> Optional[Selection]:
        best: Optional[int] = None
        for idx, p in enumerate(processes):
            if not p.is_eligible(time_elapsed):
                continue
            if best is None:
                best = idx
                continue
            current = processes[best]
            if (p.remaining_burst, p.arrival_index) < (current.remaining_burst, current.arrival_index):
                best = idx

        if best is None:
            return None
        return Selection(index=best, run_length=1)


class RoundRobin(Policy):
    """
    Round Robin with a fixed visiting order.

    Processes are swept in arrival order. Each eligible process runs for
    ``min(remaining_burst, quantum)`` ticks, then the sweep moves on to the
    next position and wraps back to the first process after the last one.
    A preempted process is not requeued; it simply waits for the next sweep.
    """

    name = "Round Robin"
    key = "rr"

    def __init__(self, quantum: Optional[int]) -> None:
        if quantum is None:
            raise PolicyMisconfiguration("Round Robin requires a quantum (use --quantum)")
        if isinstance(quantum, bool) or not isinstance(quantum, int):
            raise InvalidInput(f"Round Robin quantum must be an integer, got {quantum!r}")
        if quantum <= 0:
            raise InvalidInput(f"Round Robin quantum must be positive, got {quantum}")
        self._quantum = quantum
        self._cursor = 0

    @property
    def quantum(self) -> Optional[int]:
        return self._quantum

    def reset(self) -> None:
        self._cursor = 0

    def select(self, time_elapsed: int, processes: Sequence[Process]) -> Optional[Selection]:
        n = len(processes)
        for offset in range(n):
            idx = (self._cursor + offset) % n
            p = processes[idx]
            if p.is_eligible(time_elapsed):
                self._cursor = (idx + 1) % n
                return Selection(index=idx, run_length=min(p.remaining_burst, self._quantum))
        return None


POLICIES: Dict[str, Type[Policy]] = {
    "fcfs": FCFS,
    "sjf": SJF,
    "rr": RoundRobin,
}

_ALIASES: Dict[str, str] = {
    "-f": "fcfs",
    "-s": "sjf",
    "-r": "rr",
    "first-come-first-served": "fcfs",
    "shortest-job-first": "sjf",
    "round-robin": "rr",
    "roundrobin": "rr",
}


def policy_names() -> List[str]:
    return list(POLICIES.keys())


def resolve_name(name: str) -> str:
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    if key not in POLICIES:
        raise PolicyMisconfiguration(
            f"Unknown scheduling policy '{name}' (choose from {', '.join(POLICIES)})"
        )
    return key


def make_policy(name: str, quantum: Optional[int] = None) -> Policy:
    """
    Build a fresh policy object. The quantum is only consulted by Round
    Robin; the other policies ignore it.
    """
    key = resolve_name(name)
    if key == "rr":
        policy: Policy = RoundRobin(quantum)
    else:
        policy = POLICIES[key]()
    logger.debug("Built policy %s (quantum=%s)", policy.name, policy.quantum)
    return policy
