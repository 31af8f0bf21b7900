from pathlib import Path

import pytest

from schedsim.errors import InvalidInputError
from schedsim.models import Process
from schedsim.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[1].priority == 1
    assert procs[1].arrival_time == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,4\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert procs[0].priority == 4
    assert procs[1].priority == 1


def test_column_aliases(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("ID, AT, BT, Prio\nP1, 0, 5, 2\nP2, 4, 1, 1\n")
    procs = load_workload(p)
    assert procs == [Process("P1", 0, 5, 2), Process("P2", 4, 1, 1)]

    j = tmp_path / "w.json"
    j.write_text('[{"Process": "X", "Arrival": 2, "Burst": 3}]')
    assert load_workload(j) == [Process("X", 2, 3)]


@pytest.mark.parametrize(
    "body",
    [
        "pid,arrival_time,burst_time\nA,0,3\nA,1,2\n",
        "pid,arrival_time,burst_time\nA,-1,3\n",
        "pid,arrival_time,burst_time\nA,0,0\n",
        "pid,arrival_time,burst_time\nA,zero,3\n",
        "pid,arrival_time\nA,0\n",
        "pid,arrival_time,burst_time,priority\nA,0,3,high\n",
    ],
)
def test_invalid_rows_rejected(tmp_path: Path, body):
    p = tmp_path / "w.csv"
    p.write_text(body)
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_duplicate_error_names_row(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","at":0,"bt":1},{"pid":"A","at":2,"bt":1}]')
    with pytest.raises(InvalidInputError, match="Row 2"):
        load_workload(p)


def test_json_must_be_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid": "A"}')
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_unsupported_format(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("A 0 3")
    with pytest.raises(ValueError):
        load_workload(p)


@pytest.mark.parametrize("name", ["w.csv", "w.json"])
def test_non_utf8_file_rejected(tmp_path: Path, name):
    p = tmp_path / name
    p.write_bytes(b"pid,arrival_time,burst_time\n\xff\xfe,0,3\n")
    with pytest.raises(InvalidInputError, match="not valid UTF-8"):
        load_workload(p)
