from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduleBlock

COLORS = ["cyan", "blue", "magenta", "yellow", "green", "red"]


def block_label(pid: int) -> str:
    return f"P{pid}"


def _sorted(blocks: Sequence[ScheduleBlock]) -> List[ScheduleBlock]:
    return sorted(blocks, key=lambda b: (b.start_time, b.end_time))


def render_gantt(blocks: Sequence[ScheduleBlock]) -> str:
    """
    Plain-text Gantt chart. Idle gaps are drawn with dots.
    """
    if not blocks:
        return "(no execution)"

    line = "|"
    labels = " "
    time_marks = "0"
    last_time = 0

    for b in _sorted(blocks):
        idle_gap = b.start_time - last_time
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap
            time_marks += f"{b.start_time:>{idle_gap}}"
            last_time = b.start_time

        width = max(1, b.duration)
        line += "=" * width
        labels += block_label(b.pid)[:width].ljust(width)
        time_marks += f"{b.end_time:>{width}}"
        last_time = b.end_time

    line += "|"
    return "\n".join(["Gantt Chart:", line, labels, time_marks])


def build_rich_gantt(blocks: Sequence[ScheduleBlock], scale: int = 3) -> Tuple[Panel, str]:
    """
    Build a Rich Panel with a colored Gantt chart and a string of time marks.

    Each time unit is ``scale`` characters wide.
    """
    if not blocks:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for b in _sorted(blocks):
        idle_gap = (b.start_time - last_time) * scale
        if idle_gap > 0:
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)
            time_marks += f"{b.start_time:>{idle_gap}}"

        width = max(1, b.duration) * scale
        timeline.append(" " * width, style=f"on {pid_color(b.pid)}")
        labels.append(block_label(b.pid)[:width].ljust(width), style="bold")
        time_marks += f"{b.end_time:>{width}}"
        last_time = b.end_time

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), time_marks
