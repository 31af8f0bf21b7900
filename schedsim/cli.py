from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import Policy, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .models import ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
ALGORITHM_CHOICES = [policy.value for policy in Policy]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, Round Robin).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Shortcut for --log-level DEBUG.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, srtf, priority, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}; ignored by other algorithms).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALGORITHM_CHOICES,
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_CHOICES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        # Two columns of panel border and padding.
        console.print("  " + time_marks, highlight=False)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    sys = result.system
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{sys.avg_waiting:.2f}")
    sys_table.add_row("Avg turnaround", f"{sys.avg_turnaround:.2f}")
    sys_table.add_row("Avg response", f"{sys.avg_response:.2f}")
    sys_table.add_row("Total time", str(sys.total_time))
    sys_table.add_row("Total turnaround", str(sys.total_turnaround))
    sys_table.add_row("Idle time", str(sys.idle_time))
    sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{sys.cpu_utilization:.1f}%")

    console.print(sys_table)


def _print_comparison(results: List[ScheduleResult], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("CPU util", justify="right")

    for result in results:
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.system.avg_waiting:.2f}",
            f"{result.system.avg_turnaround:.2f}",
            f"{result.system.avg_response:.2f}",
            f"{result.system.cpu_utilization:.1f}%",
        )

    console.print(summary_table)


def _animate_result(result: ScheduleResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    makespan = result.system.total_time
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        entry = next(e for e in result.timeline if e.start_time <= t < e.end_time)
        if entry.is_idle:
            console.print(f"t={t:2d}: [dim]idle[/dim]")
        else:
            bar = f"[green]{'█' * (t - entry.start_time + 1)}[/green]"
            console.print(f"t={t:2d}: {entry.pid} {bar}")
        time.sleep(delay)


def _run(args: argparse.Namespace, console: Console) -> int:
    policy = Policy.parse(args.algorithm)
    quantum = args.quantum
    if policy is Policy.ROUND_ROBIN and quantum is None:
        quantum = DEFAULT_QUANTUM

    processes = load_workload(Path(args.workload))
    result = run_algorithm(policy, processes, quantum=quantum)
    if args.step:
        try:
            _animate_result(result, delay=args.step_delay, console=console)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")
    _print_result(result, console)
    return 0


def _compare(args: argparse.Namespace, console: Console) -> int:
    workload_path = Path(args.workload)
    processes = load_workload(workload_path)

    results = [run_algorithm(alg, processes, quantum=args.quantum) for alg in args.algorithms]
    _print_comparison(results, f"Algorithm comparison: {workload_path.name}", console)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else args.log_level)
    console = Console()

    commands = {"run": _run, "compare": _compare}
    try:
        return commands[args.command](args, console)
    except (SchedulerError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"Error: {exc}", style="red", markup=False, highlight=False)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
