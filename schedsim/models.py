from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Timeline marker for time units in which no process holds the CPU.
IDLE = "IDLE"

DEFAULT_PRIORITY = 1


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = DEFAULT_PRIORITY  # lower number = higher priority


@dataclass(frozen=True)
class TimelineEntry:
    """
    One contiguous slice of the Gantt chart, either a process or IDLE.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE


@dataclass(frozen=True)
class ProcessMetrics:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int


@dataclass(frozen=True)
class SystemMetrics:
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    total_time: int
    total_turnaround: int
    cpu_busy_time: int
    idle_time: int
    throughput: float
    cpu_utilization: float  # percent, 0-100


@dataclass(frozen=True)
class ScheduleResult:
    algorithm: str
    policy: str
    quantum: Optional[int]
    timeline: Tuple[TimelineEntry, ...]
    processes: Tuple[ProcessMetrics, ...]
    system: SystemMetrics
