from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

MAX_CHART_WIDTH = 72


def _format_time(value: float) -> str:
    return f"{value:g}" if float(value).is_integer() else f"{value:.1f}"


def chart_scale(slices: List[ScheduledSlice], max_width: int = MAX_CHART_WIDTH) -> float:
    """
    Columns per time unit so the whole timeline fits in `max_width` columns.
    """
    if not slices:
        return 1.0
    makespan = max(s.end_time for s in slices)
    if makespan <= max_width:
        return 1.0
    return max_width / makespan


def build_rich_gantt(slices: List[ScheduledSlice], max_width: int = MAX_CHART_WIDTH) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    scale = chart_scale(slices, max_width)

    def column(t: float) -> int:
        return int(round(t * scale))

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_col = 0
    last_end = 0.0

    for sl in slices:
        idle_gap = column(sl.start_time) - last_col
        if idle_gap > 0:
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)
        if sl.start_time > last_end:
            time_marks += f"{_format_time(sl.start_time):>4}"
        last_col = max(last_col, column(sl.start_time))

        width = max(1, column(sl.end_time) - last_col)
        color = pid_color(sl.pid)

        timeline.append(" " * width, style=f"on {color}")
        labels.append(sl.pid[:width].ljust(width), style="bold")

        last_col += width
        last_end = max(last_end, sl.end_time)
        time_marks += f"{_format_time(sl.end_time):>4}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
