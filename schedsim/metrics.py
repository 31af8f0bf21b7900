from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from .errors import InconsistentStateError, InvalidInputError
from .models import Process, ProcessMetrics, SystemMetrics, TimelineEntry


def _check_contiguous(timeline: Sequence[TimelineEntry]) -> None:
    expected_start = 0
    for entry in timeline:
        if entry.start_time != expected_start or entry.end_time <= entry.start_time:
            raise InconsistentStateError(
                f"Timeline is not contiguous at {entry.pid} "
                f"[{entry.start_time}, {entry.end_time}) (expected start {expected_start})"
            )
        expected_start = entry.end_time


def compute_process_metrics(
    timeline: Sequence[TimelineEntry], processes: Sequence[Process]
) -> List[ProcessMetrics]:
    """
    Derive start, completion, turnaround, waiting and response time for each
    process from its first and last timeline entry.

    Rows follow the order of ``processes``.
    """
    first_start: Dict[str, int] = {}
    last_end: Dict[str, int] = {}
    executed: Dict[str, int] = {}

    for entry in timeline:
        if entry.is_idle:
            continue
        first_start.setdefault(entry.pid, entry.start_time)
        last_end[entry.pid] = entry.end_time
        executed[entry.pid] = executed.get(entry.pid, 0) + entry.duration

    unknown = set(first_start) - {p.pid for p in processes}
    if unknown:
        raise InconsistentStateError(f"Timeline references unknown processes: {sorted(unknown)}")

    metrics: List[ProcessMetrics] = []
    for p in processes:
        if p.pid not in first_start:
            raise InconsistentStateError(f"Process {p.pid} never appears in the timeline")
        if executed[p.pid] != p.burst_time:
            raise InconsistentStateError(
                f"Process {p.pid} ran for {executed[p.pid]} units but its burst is {p.burst_time}"
            )

        start_time = first_start[p.pid]
        completion_time = last_end[p.pid]
        turnaround_time = completion_time - p.arrival_time

        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=start_time,
                completion_time=completion_time,
                turnaround_time=turnaround_time,
                waiting_time=turnaround_time - p.burst_time,
                response_time=start_time - p.arrival_time,
            )
        )

    return metrics


def compute_system_metrics(
    timeline: Sequence[TimelineEntry], processes: Sequence[ProcessMetrics]
) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and the timeline they came from.
    """
    if not processes:
        raise InvalidInputError("Cannot compute metrics for an empty process set")

    total_time = max(entry.end_time for entry in timeline)
    if total_time <= 0:
        raise InvalidInputError("Timeline has zero length")

    cpu_busy_time = sum(p.burst_time for p in processes)
    summary = summarize_process_metrics(processes)

    return SystemMetrics(
        avg_waiting=summary["avg_waiting"],
        avg_turnaround=summary["avg_turnaround"],
        avg_response=summary["avg_response"],
        total_time=total_time,
        total_turnaround=sum(p.turnaround_time for p in processes),
        cpu_busy_time=cpu_busy_time,
        idle_time=total_time - cpu_busy_time,
        throughput=len(processes) / total_time,
        cpu_utilization=cpu_busy_time / total_time * 100,
    )


def compute_metrics(
    timeline: Sequence[TimelineEntry], processes: Iterable[Process]
) -> Tuple[List[ProcessMetrics], SystemMetrics]:
    """
    Validate a finished timeline against its process set and derive both the
    per-process table and the aggregates.
    """
    procs = list(processes)
    if not procs:
        raise InvalidInputError("Cannot compute metrics for an empty process set")
    if not timeline:
        raise InconsistentStateError("Timeline is empty")

    _check_contiguous(timeline)
    process_metrics = compute_process_metrics(timeline, procs)
    return process_metrics, compute_system_metrics(timeline, process_metrics)


def summarize_process_metrics(processes: Sequence[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
