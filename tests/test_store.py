import pytest

from schedsim.algorithms import run_algorithm
from schedsim.errors import InvalidInputError
from schedsim.models import IDLE, Process
from schedsim.store import ProcessStore


def test_add_keeps_insertion_order():
    store = ProcessStore()
    store.add("P2", arrival_time=1, burst_time=3)
    store.add("P1", arrival_time=0, burst_time=5, priority=4)

    assert [p.pid for p in store] == ["P2", "P1"]
    assert store.get("P1").priority == 4
    assert store.get("P2").priority == 1
    assert "P1" in store
    assert len(store) == 2


def test_duplicate_id_rejected():
    store = ProcessStore([Process("P1", 0, 5)])
    with pytest.raises(InvalidInputError):
        store.add("P1", arrival_time=2, burst_time=1)
    assert len(store) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pid": "P1", "burst_time": 0},
        {"pid": "P1", "arrival_time": -1},
        {"pid": ""},
        {"pid": IDLE},
    ],
)
def test_invalid_fields_rejected(kwargs):
    with pytest.raises(InvalidInputError):
        ProcessStore().add(**kwargs)


def test_delete_and_clear():
    store = ProcessStore([Process("A", 0, 1), Process("B", 0, 2)])
    removed = store.delete("A")

    assert removed.pid == "A"
    assert [p.pid for p in store] == ["B"]
    with pytest.raises(InvalidInputError, match="Unknown process id"):
        store.delete("A")

    store.clear()
    assert len(store) == 0
    assert store.snapshot() == ()


def test_run_uses_snapshot_of_store():
    store = ProcessStore()
    store.add("P1", 0, 5)
    store.add("P2", 1, 3)

    result = run_algorithm("fcfs", store)
    store.add("P3", 2, 1)
    store.delete("P1")

    assert [s.pid for s in result.timeline] == ["P1", "P2"]
    assert [p.pid for p in result.processes] == ["P1", "P2"]
