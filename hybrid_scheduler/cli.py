from __future__ import annotations

import argparse
import logging
import math
import time
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .aggregator import DEFAULT_QUANTUM, run
from .algorithms import ALGORITHMS, run_algorithm
from .gantt import build_rich_gantt
from .metrics import cpu_leader, waiting_leader
from .models import SCHEDULER_DESCRIPTIONS, PredictedAttributes, ProcessInput, SchedulingResult
from .predictor import MAX_QUANTUM, MIN_QUANTUM, predict
from .validation import InvalidInput
from .workload_io import load_workload, results_to_json, sample_workload

logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hybrid-scheduler",
        description="CPU scheduling simulator (FCFS, SJF, Priority, RR, Hybrid AI).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_workload_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--workload",
            "-w",
            default=None,
            help="Path to JSON or CSV workload file (default: built-in sample workload).",
        )

    def add_quantum_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--quantum",
            "-q",
            type=float,
            default=DEFAULT_QUANTUM,
            help=f"Base time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
        )
        sub.add_argument(
            "--no-clamp",
            action="store_true",
            help=f"Pass the quantum through unchanged instead of clamping it to [{MIN_QUANTUM:g}, {MAX_QUANTUM:g}].",
        )

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    add_workload_options(run_parser)
    add_quantum_options(run_parser)
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
        help="Run every algorithm on the same workload and compare their metrics.",
    )
    add_workload_options(compare_parser)
    add_quantum_options(compare_parser)
    compare_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full results as JSON instead of tables.",
    )

    predict_parser = subparsers.add_parser("predict", help="Show predicted attributes for each process.")
    add_workload_options(predict_parser)

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _load(workload: Optional[str]) -> List[ProcessInput]:
    if workload is None:
        logger.info("Using built-in sample workload")
        return sample_workload()
    return load_workload(Path(workload))


def _effective_quantum(args: argparse.Namespace) -> float:
    if args.no_clamp:
        return args.quantum
    clamped = min(max(args.quantum, MIN_QUANTUM), MAX_QUANTUM)
    if clamped != args.quantum:
        logger.warning("Quantum %s clamped to %s", args.quantum, clamped)
    return clamped


def _fmt(value: Optional[float], digits: int = 2) -> str:
    if value is None or not math.isfinite(value):
        return ""
    return f"{value:.{digits}f}"


def _print_result(result: SchedulingResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.label}")
    console.print(f"[dim]{SCHEDULER_DESCRIPTIONS[result.algorithm]}[/dim]")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum:g}")
    if result.suggested_quantum is not None:
        console.print(f"[bold]Suggested quantum:[/bold] {result.suggested_quantum:.2f}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "ID",
        "Arrive",
        "Burst",
        "Start",
        "Finish",
        "Wait",
        "Turnaround",
        "Response",
        "Slices",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "ID" else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.id,
            f"{p.arrival_time:g}",
            f"{p.burst_time:g}",
            _fmt(p.start_time),
            _fmt(p.finish_time),
            _fmt(p.waiting_time),
            _fmt(p.turnaround_time),
            _fmt(p.response_time),
            str(len(p.slice_history)),
        )

    console.print(proc_table)
    console.print()

    summary = result.summary
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Total execution", _fmt(summary.total_execution_time))
    sys_table.add_row("Avg waiting", _fmt(summary.average_waiting_time))
    sys_table.add_row("Avg turnaround", _fmt(summary.average_turnaround_time))
    sys_table.add_row("Avg response", _fmt(summary.average_response_time))
    sys_table.add_row("Throughput (proc/time)", _fmt(summary.throughput, 3))
    sys_table.add_row("CPU utilization", f"{summary.cpu_utilization:.1f}%")

    console.print(sys_table)


def _print_comparison(results: Sequence[SchedulingResult], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Total", justify="right")
    summary_table.add_column("CPU %", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for result in results:
        s = result.summary
        summary_table.add_row(
            result.label,
            "" if result.quantum is None else f"{result.quantum:g}",
            _fmt(s.total_execution_time),
            _fmt(s.cpu_utilization, 1),
            _fmt(s.throughput, 3),
            _fmt(s.average_waiting_time),
            _fmt(s.average_turnaround_time),
            _fmt(s.average_response_time),
        )

    console.print(summary_table)

    best_cpu = cpu_leader(results)
    best_wait = waiting_leader(results)
    if best_cpu and best_wait:
        console.print(
            f"[bold]CPU efficiency leader:[/bold] {best_cpu.label} "
            f"({best_cpu.summary.cpu_utilization:.2f}%)"
        )
        console.print(
            f"[bold]Waiting time leader:[/bold] {best_wait.label} "
            f"({best_wait.summary.average_waiting_time:.2f} units)"
        )
        console.print(f"[bold]Processes scheduled:[/bold] {len(best_cpu.processes)}")


def _print_predictions(predictions: Mapping[str, PredictedAttributes], console: Console) -> None:
    table = Table(title="Predicted attributes", box=box.SIMPLE_HEAVY)
    table.add_column("ID", justify="center")
    table.add_column("Predicted burst", justify="right")
    table.add_column("Predicted priority", justify="right")
    table.add_column("Suggested quantum", justify="right")
    table.add_column("Confidence", justify="right")

    for pid, pred in predictions.items():
        table.add_row(
            pid,
            _fmt(pred.predicted_burst_time),
            str(pred.predicted_priority),
            _fmt(pred.predicted_quantum),
            f"{pred.confidence * 100:.0f}%",
        )

    console.print(table)


def _animate_result(result: SchedulingResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    timeline = result.timeline
    if not timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    makespan = max(s.end_time for s in timeline)
    console.print(f"[bold]Simulating {result.label}[/bold] (duration {makespan:g} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(math.ceil(makespan)):
        running = None
        bar = ""
        for sl in timeline:
            if sl.start_time <= t < sl.end_time:
                running = sl.pid
                bar = f"[green]{'█' * int(t - sl.start_time + 1)}[/green]"
                break
        msg = f"t={t:2d}: " + (running or "[idle]")
        console.print(msg + (" " + bar if bar else ""))
        time.sleep(delay)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    try:
        processes = _load(args.workload)

        if args.command == "run":
            result = run_algorithm(args.algorithm, processes, quantum=_effective_quantum(args))
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            return 0

        if args.command == "compare":
            results = run(processes, _effective_quantum(args))
            if args.json:
                console.print_json(results_to_json(results))
            else:
                _print_comparison(results, console)
            return 0

        if args.command == "predict":
            _print_predictions(predict(processes), console)
            return 0
    except InvalidInput as exc:
        console.print(f"[red]Invalid input: {escape(str(exc))}[/red]")
        return EXIT_INVALID_INPUT
    except OSError as exc:
        console.print(f"[red]Could not read workload: {escape(str(exc))}[/red]")
        return EXIT_INVALID_INPUT

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
