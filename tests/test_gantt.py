import io

from rich.console import Console

from scheduler_viz.gantt import build_rich_gantt, render_gantt, timeline_scale
from scheduler_viz.models import GanttSegment


def test_scale_clamps_cells_per_unit():
    segs = [GanttSegment("P1", 0, 5), GanttSegment("P2", 5, 8)]
    assert timeline_scale(segs, width=80) == (0, 8, 8)
    assert timeline_scale(segs, width=20) == (0, 8, 2)
    assert timeline_scale([GanttSegment("P1", 0, 100)], width=10) == (0, 100, 1)
    assert timeline_scale([], width=80) == (0, 0, 1)


def test_scale_starts_at_first_segment():
    origin, end, _ = timeline_scale([GanttSegment("P1", 3, 4), GanttSegment("P2", 6, 9)])
    assert (origin, end) == (3, 9)


def test_render_plain_text():
    segs = [GanttSegment("P1", 0, 5), GanttSegment("P2", 5, 8)]
    header, line, labels, marks = render_gantt(segs).split("\n")
    assert header == "Gantt Chart:"
    assert line == "|" + "=" * 64 + "|"
    assert labels == " P1" + " " * 38 + "P2"
    assert marks.split() == ["0", "5", "8"]
    assert marks.index("8") == 64


def test_render_idle_gap():
    segs = [GanttSegment("P2", 5, 6), GanttSegment("P1", 2, 3)]
    out = render_gantt(segs, width=12).split("\n")
    assert out[1] == "|==....==|"
    assert out[3] == "2 3   5 6"


def test_render_empty():
    assert render_gantt([]) == "(no execution)"


def test_rich_gantt_renders_labels():
    segs = [GanttSegment("P1", 0, 2), GanttSegment("P2", 2, 4), GanttSegment("P1", 4, 6)]
    panel, marks = build_rich_gantt(segs, width=60)

    buf = io.StringIO()
    Console(file=buf, width=80).print(panel)
    rendered = buf.getvalue()
    assert "Gantt Chart" in rendered
    assert rendered.count("P1") == 2
    assert marks.split() == ["0", "2", "4", "6"]


def test_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert marks == ""
