from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttSegment

MIN_CELLS_PER_UNIT = 1
MAX_CELLS_PER_UNIT = 8

COLORS = ["cyan", "red", "yellow", "green", "magenta", "blue", "bright_red", "white"]


def timeline_scale(segments: Iterable[GanttSegment], width: int = 80) -> Tuple[int, int, int]:
    """
    Return (origin, end, cells_per_unit) for drawing a timeline in `width` columns.

    The timeline starts at the earliest segment, not at zero, and each time
    unit gets between MIN_CELLS_PER_UNIT and MAX_CELLS_PER_UNIT character
    cells. Long schedules may overflow `width` at the minimum scale.
    """
    segments = list(segments)
    if not segments:
        return 0, 0, MIN_CELLS_PER_UNIT

    origin = min(s.start_time for s in segments)
    end = max(s.end_time for s in segments)
    span = max(1, end - origin)
    cells = (width - 4) // span
    return origin, end, min(MAX_CELLS_PER_UNIT, max(MIN_CELLS_PER_UNIT, cells))


def _time_marks(segments: List[GanttSegment], origin: int, cells: int) -> str:
    boundaries = sorted({origin} | {s.start_time for s in segments} | {s.end_time for s in segments})

    marks = ""
    for t in boundaries:
        column = (t - origin) * cells
        # Drop a mark that would run into the previous one.
        if marks and column <= len(marks):
            continue
        marks += " " * (column - len(marks)) + str(t)
    return marks


def render_gantt(segments: List[GanttSegment], width: int = 80) -> str:
    """
    Plain-text Gantt chart renderer; idle gaps are drawn with dots.
    """
    if not segments:
        return "(no execution)"

    segments = sorted(segments, key=lambda s: (s.start_time, s.end_time))
    origin, _, cells = timeline_scale(segments, width)

    line = "|"
    labels = " "
    last_time = origin

    for seg in segments:
        idle_gap = (seg.start_time - last_time) * cells
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap

        bar_width = seg.duration * cells
        line += "=" * bar_width
        labels += seg.pid[:bar_width].ljust(bar_width)
        last_time = seg.end_time

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels.rstrip(),
            _time_marks(segments, origin, cells),
        ]
    )


def build_rich_gantt(segments: List[GanttSegment], width: int = 80) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not segments:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    segments = sorted(segments, key=lambda s: (s.start_time, s.end_time))
    origin, _, cells = timeline_scale(segments, width)

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(COLORS)
            pid_to_color[pid] = COLORS[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    last_time = origin

    for seg in segments:
        idle_gap = (seg.start_time - last_time) * cells
        if idle_gap > 0:
            timeline.append("." * idle_gap, style="dim")
            labels.append(" " * idle_gap)

        bar_width = seg.duration * cells
        color = pid_color(seg.pid)

        timeline.append(" " * bar_width, style=f"on {color}")
        labels.append(seg.pid[:bar_width].ljust(bar_width), style="bold")
        last_time = seg.end_time

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, _time_marks(segments, origin, cells)
