import io
from pathlib import Path

import pytest
from rich.console import Console

from scheduler_viz.cli import _interactive_menu, main
from scheduler_viz.roster import Roster


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"P1","arrival_time":0,"burst_time":5,"priority":2},'
                 '{"pid":"P2","arrival_time":1,"burst_time":3,"priority":1}]')
    return p


def _feed(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda *args: next(it))


def _console():
    return Console(file=io.StringIO(), width=100)


def test_run_prints_metrics(workload: Path, capsys):
    assert main(["run", "-a", "rr", "-w", str(workload), "-q", "2"]) == 0
    out = capsys.readouterr().out
    assert "Round Robin" in out
    assert "Per-process metrics" in out
    assert "Avg waiting" in out


def test_compare_lists_every_algorithm(workload: Path, capsys):
    assert main(["compare", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    for label in ("FCFS", "SJF", "Priority", "Round Robin"):
        assert label in out


def test_unknown_algorithm_exits_with_error(workload: Path, capsys):
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 2
    assert "Unknown algorithm" in capsys.readouterr().out


def test_missing_workload_exits_with_error(tmp_path: Path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "nope.json")]) == 2


def test_menu_add_and_run(monkeypatch):
    roster = Roster()
    console = _console()
    _feed(monkeypatch, ["a", "0", "5", "", "a", "1", "3", "", "r", "rr", "2", "q"])

    _interactive_menu(roster, 2, console)

    assert [p.pid for p in roster] == ["P1", "P2"]
    assert "Round Robin" in console.file.getvalue()


def test_menu_rejects_bad_input_and_keeps_roster(monkeypatch):
    roster = Roster()
    roster.add(0, 2)
    console = _console()
    _feed(monkeypatch, ["a", "x", "1", "0", "e", "P1", "", "0", "", "q"])

    _interactive_menu(roster, 2, console)

    out = console.file.getvalue()
    assert "arrival_time must be an integer" in out
    assert "burst_time must be > 0" in out
    assert len(roster) == 1
    assert roster.get("P1").burst_time == 2


def test_menu_run_on_empty_roster(monkeypatch):
    console = _console()
    _feed(monkeypatch, ["r", "q"])
    _interactive_menu(Roster(), 2, console)
    assert "Add at least one process" in console.file.getvalue()


def test_menu_delete_and_clear(monkeypatch):
    roster = Roster()
    roster.add(0, 2)
    roster.add(0, 3)
    roster.add(0, 4)
    _feed(monkeypatch, ["d", "P2", "c", "n", "q"])
    _interactive_menu(roster, 2, _console())
    assert [p.pid for p in roster] == ["P1", "P3"]

    _feed(monkeypatch, ["c", "y", "q"])
    _interactive_menu(roster, 2, _console())
    assert len(roster) == 0
    assert roster.add(0, 1).pid == "P1"


def test_non_utf8_workload_exits_with_error(tmp_path: Path, capsys):
    p = tmp_path / "w.json"
    p.write_bytes(b'[{"pid":"\xff","arrival_time":0,"burst_time":1}]')
    assert main(["run", "-a", "fcfs", "-w", str(p)]) == 2
    assert "not valid UTF-8" in capsys.readouterr().out
