from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple

from .errors import InvalidInputError
from .models import DEFAULT_PRIORITY, IDLE, Process

logger = logging.getLogger(__name__)


def is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_process(process: Process) -> None:
    """
    Check the field constraints of a single process record.
    """
    if not isinstance(process.pid, str) or not process.pid.strip():
        raise InvalidInputError(f"Process id must be a non-empty string: {process.pid!r}")
    if process.pid == IDLE:
        raise InvalidInputError(f"'{IDLE}' is reserved and cannot be used as a process id")
    for field in ("arrival_time", "burst_time", "priority"):
        value = getattr(process, field)
        if not is_int(value):
            raise InvalidInputError(f"{field} of {process.pid} must be an integer (got {value!r})")
    if process.arrival_time < 0:
        raise InvalidInputError(
            f"Arrival time of {process.pid} must be >= 0 (got {process.arrival_time})"
        )
    if process.burst_time < 1:
        raise InvalidInputError(
            f"Burst time of {process.pid} must be >= 1 (got {process.burst_time})"
        )


class ProcessStore:
    """
    Ordered collection of process definitions.

    Insertion order is kept because the scheduling algorithms use it as the
    final tie-breaker. A scheduling run never sees the store itself, only the
    tuple returned by :meth:`snapshot`.
    """

    def __init__(self, processes=()) -> None:
        self._processes: Dict[str, Process] = {}
        for process in processes:
            self.add_process(process)

    def add(
        self,
        pid: str,
        arrival_time: int = 0,
        burst_time: int = 1,
        priority: Optional[int] = None,
    ) -> Process:
        process = Process(
            pid=pid,
            arrival_time=arrival_time,
            burst_time=burst_time,
            priority=DEFAULT_PRIORITY if priority is None else priority,
        )
        return self.add_process(process)

    def add_process(self, process: Process) -> Process:
        validate_process(process)
        if process.pid in self._processes:
            raise InvalidInputError(f"Process id already exists: {process.pid}")
        self._processes[process.pid] = process
        logger.debug("Added %s (arrival=%d, burst=%d, priority=%d)",
                     process.pid, process.arrival_time, process.burst_time, process.priority)
        return process

    def delete(self, pid: str) -> Process:
        if pid not in self._processes:
            raise InvalidInputError(f"Unknown process id: {pid}")
        process = self._processes.pop(pid)
        logger.debug("Deleted %s", pid)
        return process

    def clear(self) -> None:
        self._processes.clear()

    def get(self, pid: str) -> Optional[Process]:
        return self._processes.get(pid)

    def snapshot(self) -> Tuple[Process, ...]:
        return tuple(self._processes.values())

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        return iter(self.snapshot())

    def __contains__(self, pid: object) -> bool:
        return pid in self._processes
