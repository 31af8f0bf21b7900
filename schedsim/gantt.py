from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineEntry

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]
DEFAULT_WIDTH = 60


def _column(t: int, scale: float) -> int:
    return round(t * scale)


def bar_columns(timeline: Sequence[TimelineEntry], scale: float) -> List[int]:
    """
    Chart column of every slice boundary, starting with 0.

    Each slice gets at least one column; later boundaries shift right so
    bars and axis labels stay aligned.
    """
    columns = [0]
    for entry in timeline:
        columns.append(max(columns[-1] + 1, _column(entry.end_time, scale)))
    return columns


def build_time_axis(timeline: Sequence[TimelineEntry], scale: float) -> str:
    """
    Lay out every slice boundary under its chart column, skipping a label
    when it would overlap the previous one.
    """
    boundaries = [0] + [entry.end_time for entry in timeline]
    columns = bar_columns(timeline, scale)
    width = columns[-1] + len(str(boundaries[-1]))
    axis = [" "] * width
    next_free = 0

    for t, col in zip(boundaries, columns):
        label = str(t)
        if col < next_free:
            continue
        axis[col:col + len(label)] = label
        next_free = col + len(label) + 1

    return "".join(axis).rstrip()


def build_rich_gantt(
    timeline: Sequence[TimelineEntry], max_width: int = DEFAULT_WIDTH
) -> Tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored, proportionally scaled Gantt chart
    and a string with time marks. IDLE slices are drawn as dim dots.
    """
    if not timeline:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    total_time = timeline[-1].end_time
    if total_time >= max_width:
        scale = max_width / total_time
    else:
        # Short runs get several columns per time unit so labels fit.
        scale = max(1, max_width // (total_time * 2))

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(COLORS)
            pid_to_color[pid] = COLORS[idx]
        return pid_to_color[pid]

    bars = Text()
    labels = Text()

    columns = bar_columns(timeline, scale)
    for entry, start_col, end_col in zip(timeline, columns, columns[1:]):
        width = end_col - start_col
        label = entry.pid[:width].ljust(width)

        if entry.is_idle:
            bars.append("." * width, style="dim")
            labels.append(label, style="dim")
        else:
            bars.append(" " * width, style=f"on {pid_color(entry.pid)}")
            labels.append(label, style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(bars)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, build_time_axis(timeline, scale)
