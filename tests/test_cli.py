from pathlib import Path

import pytest
from rich.console import Console

from schedsim.cli import main
from schedsim.gantt import bar_columns, build_rich_gantt, build_time_axis
from schedsim.models import IDLE, TimelineEntry


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival,burst,priority\nP1,0,5,2\nP2,1,3,1\nP3,9,2,3\n")
    return p


def test_run_prints_tables(workload, capsys):
    assert main(["run", "-a", "srtf", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm: SRTF" in out
    assert "Per-process metrics" in out
    assert "CPU utilization" in out


def test_run_rr_uses_default_quantum(workload, capsys):
    assert main(["run", "-a", "rr", "-w", str(workload)]) == 0
    assert "Quantum: 2" in capsys.readouterr().out


def test_compare_all_algorithms(workload, capsys):
    assert main(["compare", "-w", str(workload), "-q", "3"]) == 0
    out = capsys.readouterr().out
    for name in ("FCFS", "SJF", "SRTF", "Priority", "Round"):
        assert name in out


def test_errors_exit_with_code_2(workload, tmp_path, capsys):
    assert main(["run", "-a", "mlfq", "-w", str(workload)]) == 2
    assert "Unknown scheduling algorithm" in capsys.readouterr().out

    assert main(["run", "-a", "rr", "-q", "0", "-w", str(workload)]) == 2
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "missing.csv")]) == 2

    binary = tmp_path / "binary.csv"
    binary.write_bytes(b"pid,arrival,burst\n\xff\xfe,0,3\n")
    assert main(["run", "-a", "fcfs", "-w", str(binary)]) == 2


def test_time_axis_positions():
    timeline = [TimelineEntry("P1", 0, 5), TimelineEntry("P2", 5, 8)]
    # 8 units on a 60-column chart: 3 columns per unit.
    assert build_time_axis(timeline, 3) == "0" + " " * 14 + "5" + " " * 8 + "8"


def test_time_axis_skips_overlapping_labels():
    timeline = [TimelineEntry("A", 0, 1), TimelineEntry("B", 1, 120)]
    assert build_time_axis(timeline, 0.5) == "0" + " " * 59 + "120"


def test_gantt_shows_idle_slices():
    timeline = [TimelineEntry(IDLE, 0, 3), TimelineEntry("A", 3, 5)]
    panel, time_marks = build_rich_gantt(timeline)

    console = Console(record=True, width=120)
    console.print(panel)
    text = console.export_text()
    assert "IDLE" in text
    assert "A" in text
    assert time_marks.split() == ["0", "3", "5"]


def test_gantt_empty_timeline():
    _, time_marks = build_rich_gantt([])
    assert time_marks == ""


def test_short_slices_on_long_runs_stay_aligned_with_axis():
    timeline = [TimelineEntry("A", 0, 1), TimelineEntry("B", 1, 2), TimelineEntry("C", 2, 120)]
    columns = bar_columns(timeline, 0.5)

    # Sub-column slices still get one column each; the rest shift right.
    assert columns == [0, 1, 2, 60]
    assert build_time_axis(timeline, 0.5).index("120") == columns[-1]
