from __future__ import annotations

from typing import Dict, Iterable, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice, TraceRecord

IDLE_LABEL = "idle"
PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def slices_from_trace(trace: Iterable[TraceRecord]) -> List[ScheduledSlice]:
    """
    Collapse consecutive ticks with the same occupant into one slice. Runs
    of idle ticks become a single slice with ``pid=None``.
    """
    slices: List[ScheduledSlice] = []
    for record in trace:
        last = slices[-1] if slices else None
        if last is not None and last.pid == record.pid and last.end_time == record.time:
            last.end_time = record.time + 1
        else:
            slices.append(ScheduledSlice(pid=record.pid, start_time=record.time, end_time=record.time + 1))
    return slices


def _timeline(slices: Iterable[ScheduledSlice]) -> List[ScheduledSlice]:
    """Sort slices and make every gap an explicit idle slice, starting at t=0."""
    filled: List[ScheduledSlice] = []
    clock = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > clock:
            filled.append(ScheduledSlice(pid=None, start_time=clock, end_time=sl.start_time))
        filled.append(sl)
        clock = max(clock, sl.end_time)
    return filled


def _label(sl: ScheduledSlice) -> str:
    text = IDLE_LABEL if sl.idle else f"P{sl.pid}"
    return text[: max(1, sl.width)].ljust(max(1, sl.width))


def _time_marks(slices: List[ScheduledSlice]) -> str:
    return "0" + "".join(f"{sl.end_time:>3}" for sl in slices)


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: ``=`` while a process runs, ``.`` while idle.
    """
    if not slices:
        return "(no execution)"

    timeline = _timeline(slices)
    bar = "".join(("." if sl.idle else "=") * max(1, sl.width) for sl in timeline)
    labels = "".join(_label(sl) for sl in timeline)

    return "\n".join(["Gantt Chart:", f"|{bar}|", f" {labels}", _time_marks(timeline)])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Colored Gantt chart panel plus the matching line of time marks. Idle
    stretches are drawn as dim shaded cells labelled ``idle``.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), ""

    timeline = _timeline(slices)
    colors: Dict[int, str] = {}

    bar = Text()
    labels = Text()
    for sl in timeline:
        width = max(1, sl.width)
        if sl.idle:
            bar.append("░" * width, style="dim")
            labels.append(_label(sl), style="dim italic")
            continue
        color = colors.setdefault(sl.pid, PALETTE[len(colors) % len(PALETTE)])
        bar.append(" " * width, style=f"on {color}")
        labels.append(_label(sl), style="bold")

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(labels)
    return Panel.fit(grid, title="Gantt Chart"), _time_marks(timeline)
