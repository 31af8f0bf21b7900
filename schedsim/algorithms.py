from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple, Union

from .errors import InvalidInputError
from .metrics import compute_metrics
from .models import IDLE, Process, ScheduleResult, TimelineEntry
from .store import is_int, validate_process

logger = logging.getLogger(__name__)


class Policy(str, Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    SRTF = "srtf"
    PRIORITY = "priority"
    ROUND_ROBIN = "rr"

    @classmethod
    def parse(cls, value: Union[str, "Policy"]) -> "Policy":
        if isinstance(value, Policy):
            return value
        key = str(value).strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        policy = _POLICY_ALIASES.get(key)
        if policy is None:
            raise InvalidInputError(f"Unknown scheduling algorithm '{value}'")
        return policy

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_POLICY_ALIASES = {
    "fcfs": Policy.FCFS,
    "sjf": Policy.SJF,
    "srtf": Policy.SRTF,
    "priority": Policy.PRIORITY,
    "rr": Policy.ROUND_ROBIN,
    "roundrobin": Policy.ROUND_ROBIN,
}

_DISPLAY_NAMES = {
    Policy.FCFS: "FCFS",
    Policy.SJF: "SJF (non-preemptive)",
    Policy.SRTF: "SRTF",
    Policy.PRIORITY: "Priority (preemptive)",
    Policy.ROUND_ROBIN: "Round Robin",
}


def validate_processes(processes: Iterable[Process]) -> Tuple[Process, ...]:
    """
    Snapshot the input and reject anything the engine cannot schedule.
    """
    snapshot = tuple(processes)
    if not snapshot:
        raise InvalidInputError("At least one process is required")

    seen = set()
    for p in snapshot:
        validate_process(p)
        if p.pid in seen:
            raise InvalidInputError(f"Duplicate process id: {p.pid}")
        seen.add(p.pid)
    return snapshot


def _idle(start: int, end: int) -> TimelineEntry:
    logger.debug("CPU idle from %d to %d", start, end)
    return TimelineEntry(pid=IDLE, start_time=start, end_time=end)


def schedule_fcfs(processes: Iterable[Process], quantum: Optional[int] = None) -> List[TimelineEntry]:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    ``sorted`` is stable, so processes arriving together keep insertion order.
    """
    procs = validate_processes(processes)

    time = 0
    timeline: List[TimelineEntry] = []

    for p in sorted(procs, key=lambda p: p.arrival_time):
        if time < p.arrival_time:
            timeline.append(_idle(time, p.arrival_time))
            time = p.arrival_time

        timeline.append(TimelineEntry(pid=p.pid, start_time=time, end_time=time + p.burst_time))
        time += p.burst_time

    return timeline


def schedule_sjf(processes: Iterable[Process], quantum: Optional[int] = None) -> List[TimelineEntry]:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and not yet
    run, choose the one with the smallest burst time. Ties go to the earlier
    arrival, then to the earlier inserted process.
    """
    procs = validate_processes(processes)
    index = {p.pid: i for i, p in enumerate(procs)}

    time = 0
    timeline: List[TimelineEntry] = []
    pending: List[Process] = list(procs)

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            next_arrival = min(p.arrival_time for p in pending)
            timeline.append(_idle(time, next_arrival))
            time = next_arrival
            continue

        p = min(ready, key=lambda x: (x.burst_time, x.arrival_time, index[x.pid]))
        logger.debug("t=%d: dispatch %s (burst=%d)", time, p.pid, p.burst_time)

        timeline.append(TimelineEntry(pid=p.pid, start_time=time, end_time=time + p.burst_time))
        time += p.burst_time
        pending.remove(p)

    return timeline


def _schedule_preemptive(
    procs: Tuple[Process, ...],
    rank: Callable[[Process, Dict[str, int]], int],
) -> List[TimelineEntry]:
    """
    Event-driven preemptive loop shared by SRTF and Priority.

    The running process is re-selected only at arrivals and completions,
    which are the only moments a unit-stepped loop could change its choice,
    so interval boundaries are identical to stepping one time unit at a time.
    """
    index = {p.pid: i for i, p in enumerate(procs)}
    remaining = {p.pid: p.burst_time for p in procs}

    time = 0
    timeline: List[TimelineEntry] = []
    running: Optional[str] = None
    interval_start = 0

    while any(rt > 0 for rt in remaining.values()):
        ready = [p for p in procs if p.arrival_time <= time and remaining[p.pid] > 0]

        if not ready:
            next_arrival = min(p.arrival_time for p in procs if remaining[p.pid] > 0)
            timeline.append(_idle(time, next_arrival))
            time = next_arrival
            continue

        current = min(ready, key=lambda p: (rank(p, remaining), p.arrival_time, index[p.pid]))

        if current.pid != running:
            if running is not None:
                logger.debug("t=%d: %s preempts %s", time, current.pid, running)
                timeline.append(TimelineEntry(pid=running, start_time=interval_start, end_time=time))
            running = current.pid
            interval_start = time

        # Run until completion or the next arrival, whichever comes first.
        run_time = remaining[current.pid]
        future = [p.arrival_time for p in procs if p.arrival_time > time]
        if future:
            run_time = min(run_time, min(future) - time)

        time += run_time
        remaining[current.pid] -= run_time

        if remaining[current.pid] == 0:
            timeline.append(TimelineEntry(pid=current.pid, start_time=interval_start, end_time=time))
            running = None

    return timeline


def schedule_srtf(processes: Iterable[Process], quantum: Optional[int] = None) -> List[TimelineEntry]:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    procs = validate_processes(processes)
    return _schedule_preemptive(procs, lambda p, remaining: remaining[p.pid])


def schedule_priority(processes: Iterable[Process], quantum: Optional[int] = None) -> List[TimelineEntry]:
    """
    Preemptive Priority scheduling.

    Lower numeric priority value means higher priority. A newly arrived
    process takes the CPU only when its priority is strictly higher than the
    running one's; ties go to the earlier arrival, then insertion order.
    """
    procs = validate_processes(processes)
    return _schedule_preemptive(procs, lambda p, remaining: p.priority)


def schedule_rr(processes: Iterable[Process], quantum: Optional[int] = None) -> List[TimelineEntry]:
    """
    Round Robin scheduling with a fixed time quantum.

    After each turn, processes that arrived during the turn join the ready
    queue before the preempted process does.
    """
    if not is_int(quantum) or quantum <= 0:
        raise InvalidInputError(f"Round Robin requires a positive quantum (got {quantum})")
    procs = validate_processes(processes)

    remaining = {p.pid: p.burst_time for p in procs}
    not_arrived: Deque[Process] = deque(sorted(procs, key=lambda p: p.arrival_time))
    ready: Deque[Process] = deque()

    time = 0
    timeline: List[TimelineEntry] = []

    def enqueue_new_arrivals(current_time: int) -> None:
        while not_arrived and not_arrived[0].arrival_time <= current_time:
            ready.append(not_arrived.popleft())

    enqueue_new_arrivals(time)

    while ready or not_arrived:
        if not ready:
            next_arrival = not_arrived[0].arrival_time
            timeline.append(_idle(time, next_arrival))
            time = next_arrival
            enqueue_new_arrivals(time)
            continue

        p = ready.popleft()
        run_time = min(quantum, remaining[p.pid])
        timeline.append(TimelineEntry(pid=p.pid, start_time=time, end_time=time + run_time))

        time += run_time
        remaining[p.pid] -= run_time

        enqueue_new_arrivals(time)

        if remaining[p.pid] > 0:
            ready.append(p)

    return timeline


ALGORITHMS = {
    Policy.FCFS: schedule_fcfs,
    Policy.SJF: schedule_sjf,
    Policy.SRTF: schedule_srtf,
    Policy.PRIORITY: schedule_priority,
    Policy.ROUND_ROBIN: schedule_rr,
}


def run_algorithm(
    policy: Union[str, Policy],
    processes: Iterable[Process],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm and derive metrics from its timeline.

    The quantum only applies to Round Robin and is dropped for every other
    policy.
    """
    policy = Policy.parse(policy)
    procs = validate_processes(processes)
    if policy is not Policy.ROUND_ROBIN:
        quantum = None

    logger.debug("Running %s on %d processes (quantum=%s)", policy.display_name, len(procs), quantum)
    timeline = ALGORITHMS[policy](procs, quantum=quantum)
    process_metrics, system = compute_metrics(timeline, procs)

    return ScheduleResult(
        algorithm=policy.display_name,
        policy=policy.value,
        quantum=quantum,
        timeline=tuple(timeline),
        processes=tuple(process_metrics),
        system=system,
    )
