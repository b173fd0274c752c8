from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Union

from .config import MAX_TICKS
from .errors import InvalidInput, PolicyMisconfiguration, SimulationFault
from .models import Process, Selection, SimulationResult, TraceRecord
from .policies import Policy, make_policy

logger = logging.getLogger(__name__)

PolicyLike = Union[str, Policy]
TickCallback = Callable[[TraceRecord], None]


class SimulationState(Enum):
    RUNNING = "running"
    DONE = "done"


def _as_int(value, what: str, entry) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{what} must be an integer in process entry {entry!r}")
    return value


def build_table(processes: Iterable) -> List[Process]:
    """
    Turn an ordered workload into a fresh process table.

    Entries may be ``(pid, burst)`` pairs, ``(pid, burst, arrival)`` triples
    or existing ``Process`` records (only their identity is reused). Without
    an explicit arrival, an entry's position is its arrival time.
    """
    table: List[Process] = []
    seen: set[int] = set()
    last_arrival = 0

    for position, entry in enumerate(processes):
        if isinstance(entry, Process):
            pid, burst, arrival = entry.pid, entry.total_burst, entry.arrival_index
        else:
            try:
                fields = tuple(entry)
            except TypeError as exc:
                raise InvalidInput(f"Invalid process entry: {entry!r}") from exc
            if len(fields) == 2:
                pid, burst = fields
                arrival = position
            elif len(fields) == 3:
                pid, burst, arrival = fields
            else:
                raise InvalidInput(f"Invalid process entry: {entry!r}")

        pid = _as_int(pid, "pid", entry)
        burst = _as_int(burst, "burst time", entry)
        arrival = _as_int(arrival, "arrival time", entry)

        if burst <= 0:
            raise InvalidInput(f"Process P{pid} has non-positive burst time {burst}")
        if arrival < 0:
            raise InvalidInput(f"Process P{pid} has negative arrival time {arrival}")
        if arrival < last_arrival:
            raise InvalidInput(
                f"Process P{pid} arrives at {arrival}, before the previous process ({last_arrival})"
            )
        if pid in seen:
            raise InvalidInput(f"Duplicate process id P{pid}")

        seen.add(pid)
        last_arrival = arrival
        table.append(Process(pid=pid, arrival_index=arrival, total_burst=burst))

    if not table:
        raise InvalidInput("Process list is empty")
    return table


class Simulation:
    """
    Discrete clock over one process table.

    Each call to ``step`` simulates exactly one time unit: the policy is
    consulted when no slot is in progress, the chosen process runs for one
    tick, every other eligible process waits, and a ``TraceRecord`` for the
    active process is returned.
    """

    def __init__(self, policy: Policy, processes: List[Process], max_ticks: int = MAX_TICKS) -> None:
        self.policy = policy
        self.processes = processes
        self.max_ticks = max_ticks
        self.time = 0
        self._active: Optional[int] = None
        self._slot_left = 0

        policy.reset()
        self.state = SimulationState.DONE if self._all_done() else SimulationState.RUNNING

    def _all_done(self) -> bool:
        return all(p.done for p in self.processes)

    def _choose(self) -> Optional[int]:
        if self._active is not None and self._slot_left > 0 and not self.processes[self._active].done:
            return self._active

        selection: Optional[Selection] = self.policy.select(self.time, self.processes)
        if selection is None:
            self._active = None
            self._slot_left = 0
            logger.debug("t=%d: no eligible process, CPU idle", self.time)
            return None

        if not 0 <= selection.index < len(self.processes):
            raise SimulationFault(f"{self.policy.name} selected index {selection.index} out of range")
        chosen = self.processes[selection.index]
        if not chosen.is_eligible(self.time):
            raise SimulationFault(f"{self.policy.name} selected P{chosen.pid}, which is not eligible at t={self.time}")
        if selection.run_length < 1:
            raise SimulationFault(f"{self.policy.name} granted a run length of {selection.run_length}")

        if selection.index != self._active:
            logger.debug("t=%d: dispatch P%d for up to %d tick(s)", self.time, chosen.pid, selection.run_length)
        self._active = selection.index
        self._slot_left = selection.run_length
        return self._active

    def _apply(self, active: Optional[int]) -> None:
        for idx, p in enumerate(self.processes):
            if not p.is_eligible(self.time):
                continue
            p.turnaround_time += 1
            if idx != active:
                p.wait_time += 1

        if active is None:
            return

        p = self.processes[active]
        if p.start_time is None:
            p.start_time = self.time
        p.remaining_burst -= 1
        self._slot_left -= 1

        if p.remaining_burst < 0:
            raise SimulationFault(f"P{p.pid} has negative remaining burst {p.remaining_burst}")
        if p.remaining_burst == 0:
            p.completion_time = self.time + 1
            logger.debug("t=%d: P%d completed", p.completion_time, p.pid)

    def _check_accounting(self) -> None:
        for p in self.processes:
            if p.wait_time + p.executed != p.turnaround_time:
                raise SimulationFault(
                    f"P{p.pid}: wait {p.wait_time} + executed {p.executed} != turnaround {p.turnaround_time}"
                )

    def step(self) -> TraceRecord:
        if self.state is SimulationState.DONE:
            raise SimulationFault("Simulation already finished")
        if self.time >= self.max_ticks:
            raise SimulationFault(f"Simulation did not finish within {self.max_ticks} ticks")

        active = self._choose()
        self._apply(active)
        self._check_accounting()

        if active is None:
            record = TraceRecord(time=self.time, pid=None)
        else:
            p = self.processes[active]
            record = TraceRecord(
                time=self.time,
                pid=p.pid,
                remaining_burst=p.remaining_burst,
                wait_time=p.wait_time,
                turnaround_time=p.turnaround_time,
            )

        self.time += 1
        if self._all_done():
            self.state = SimulationState.DONE
        return record

    def ticks(self) -> Iterator[TraceRecord]:
        """Yield one trace record per simulated time unit until every process is done."""
        while self.state is SimulationState.RUNNING:
            yield self.step()

    def run(self, on_tick: Optional[TickCallback] = None) -> SimulationResult:
        trace: List[TraceRecord] = []
        for record in self.ticks():
            trace.append(record)
            if on_tick is not None:
                on_tick(record)
        return SimulationResult(
            policy=self.policy.name,
            quantum=self.policy.quantum,
            processes=self.processes,
            trace=trace,
        )


def _resolve_policy(policy: PolicyLike, quantum: Optional[int]) -> Policy:
    if isinstance(policy, Policy):
        if quantum is not None and policy.quantum is not None and quantum != policy.quantum:
            raise PolicyMisconfiguration(
                f"{policy.name} was built with quantum {policy.quantum}, but quantum {quantum} was requested"
            )
        return policy
    return make_policy(policy, quantum=quantum)


def simulate(
    policy: PolicyLike,
    processes: Iterable,
    quantum: Optional[int] = None,
    on_tick: Optional[TickCallback] = None,
    max_ticks: int = MAX_TICKS,
) -> SimulationResult:
    """
    Run one policy over a workload to completion.

    ``policy`` is a policy object or a name understood by ``make_policy``
    ("fcfs", "sjf", "rr", ...). ``quantum`` is used to build a named policy;
    a policy object keeps its own quantum, and a different value is rejected.
    Every call works on its own copy of the process table, so the caller's
    input is never mutated.
    """
    resolved = _resolve_policy(policy, quantum)
    table = build_table(processes)
    logger.info("Simulating %s over %d process(es)", resolved.name, len(table))

    result = Simulation(resolved, table, max_ticks=max_ticks).run(on_tick=on_tick)
    logger.info("%s finished at t=%d", resolved.name, len(result.trace))
    return result


def compare(
    processes: Sequence,
    policies: Sequence[str] = ("fcfs", "sjf", "rr"),
    quantum: Optional[int] = None,
    max_workers: Optional[int] = None,
    max_ticks: int = MAX_TICKS,
) -> List[SimulationResult]:
    """
    Run several policies over the same workload in parallel.

    Every run owns its process table and returns its own result; results
    come back in the order the policies were requested.
    """
    # Misconfigured policies are reported before any run starts.
    built = [make_policy(name, quantum=quantum) for name in policies]
    workload = list(processes)
    build_table(workload)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(simulate, p, workload, max_ticks=max_ticks) for p in built]
        return [f.result() for f in futures]
