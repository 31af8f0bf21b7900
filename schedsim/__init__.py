"""
CPU scheduling simulator.

Computes execution timelines for FCFS, SJF, SRTF, preemptive Priority and
Round Robin scheduling, and derives waiting, turnaround, response and CPU
utilization metrics from them.
"""

from .algorithms import ALGORITHMS, Policy, run_algorithm
from .errors import InconsistentStateError, InvalidInputError, SchedulerError
from .metrics import compute_metrics
from .models import IDLE, Process, ScheduleResult, TimelineEntry
from .store import ProcessStore

__all__ = [
    "ALGORITHMS",
    "IDLE",
    "InconsistentStateError",
    "InvalidInputError",
    "Policy",
    "Process",
    "ProcessStore",
    "ScheduleResult",
    "SchedulerError",
    "TimelineEntry",
    "compute_metrics",
    "run_algorithm",
]
