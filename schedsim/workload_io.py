from __future__ import annotations

import csv
import json
import re
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import InvalidInput
from .models import Process

_PID_RE = re.compile(r"^[Pp]?(\d+)$")
_INT_RE = re.compile(r"^[+-]?\d+$")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    CSV files may carry a ``pid,burst_time[,arrival_time]`` header, or be the
    bare ``P1,5`` lines the classic simulator reads. Without an arrival time,
    a process arrives at its position in the file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix in (".csv", ".txt"):
        processes = _load_csv(path)
    else:
        raise InvalidInput(f"Unsupported workload format: {suffix} (use .json, .csv or .txt)")

    if not processes:
        raise InvalidInput(f"Workload {path} contains no processes")
    _check_order(processes)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"Invalid JSON workload {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise InvalidInput(f"Invalid process entry: {entry!r}")
        processes.append(_process_from_mapping(entry, position))

    return processes


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = [row for row in csv.reader(f) if row and any(cell.strip() for cell in row)]

    if not rows:
        return []

    header = [cell.strip().lower() for cell in rows[0]]
    if "pid" in header:
        return [
            _process_from_mapping(dict(zip(header, row)), position)
            for position, row in enumerate(rows[1:])
        ]

    return [_process_from_row(row, position) for position, row in enumerate(rows)]


def _parse_pid(value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid pid {value!r}")
    if isinstance(value, int):
        return value
    match = _PID_RE.match(str(value).strip())
    if not match:
        raise ValueError(f"invalid pid {value!r}")
    return int(match.group(1))


def _build(pid: int, burst_time: int, arrival_time: int, entry) -> Process:
    if burst_time <= 0:
        raise InvalidInput(f"Burst time must be positive: {entry!r}")
    if arrival_time < 0:
        raise InvalidInput(f"Arrival time must not be negative: {entry!r}")
    return Process(pid=pid, arrival_index=arrival_time, total_burst=burst_time)


def _parse_int(value) -> int:
    # Whole ints or digit strings only; floats and booleans are rejected.
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value.strip()):
        return int(value.strip())
    raise ValueError(f"expected an integer, got {value!r}")


def _optional_int(value) -> Optional[int]:
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    return _parse_int(value)


def _process_from_mapping(mapping, position: int) -> Process:
    try:
        pid = _parse_pid(mapping["pid"])
        burst_time = _parse_int(mapping["burst_time"])
        arrival_val = _optional_int(mapping.get("arrival_time"))
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    arrival_time = position if arrival_val is None else arrival_val
    return _build(pid, burst_time, arrival_time, mapping)


def _process_from_row(row: List[str], position: int) -> Process:
    if len(row) not in (2, 3):
        raise InvalidInput(f"Invalid process line: {','.join(row)!r} (expected P<id>,<burst>)")
    try:
        pid = _parse_pid(row[0])
        burst_time = _parse_int(row[1])
        arrival_val = _optional_int(row[2]) if len(row) == 3 else None
    except ValueError as exc:
        raise InvalidInput(f"Invalid process line: {','.join(row)!r}") from exc

    arrival_time = position if arrival_val is None else arrival_val
    return _build(pid, burst_time, arrival_time, ",".join(row))


def _check_order(processes: Iterable[Process]) -> None:
    seen: set[int] = set()
    last_arrival = 0
    for p in processes:
        if p.pid in seen:
            raise InvalidInput(f"Duplicate process id P{p.pid}")
        if p.arrival_index < last_arrival:
            raise InvalidInput(f"P{p.pid} arrives at {p.arrival_index}, before the process listed above it")
        seen.add(p.pid)
        last_arrival = p.arrival_index
