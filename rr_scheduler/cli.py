from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .driver import drive
from .engine import DEFAULT_QUANTUM, Simulation
from .errors import ConfigurationError
from .gantt import build_rich_gantt
from .models import RunSummary, Snapshot
from .workload_io import load_workload

logger = logging.getLogger(__name__)

MAX_RECOMMENDED_PROCESSES = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rr-scheduler",
        description="Tick-by-tick Round Robin CPU scheduling simulator.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v for run events, -vv for every tick).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    common.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum in ticks (default: {DEFAULT_QUANTUM}).",
    )

    subparsers.add_parser(
        "run",
        parents=[common],
        help="Run the workload to completion and print the Gantt chart and metrics.",
    )

    step_parser = subparsers.add_parser(
        "step",
        parents=[common],
        help="Show the simulation one tick at a time, then print the summary.",
    )
    step_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.8,
        help="Seconds to wait between ticks (default: 0.8).",
    )

    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _fmt_avg(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def _print_summary(summary: RunSummary, colors: dict[str, str], console: Console) -> None:
    console.print("[bold]Algorithm:[/bold] Round Robin")
    console.print(f"[bold]Quantum:[/bold] {summary.quantum}")
    console.print()

    panel, time_marks = build_rich_gantt(summary.timeline, colors)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = ["ID", "PID", "Name", "Arrive", "Burst", "Complete", "Wait", "Turnaround"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"ID", "PID", "Name"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in summary.processes:
        proc_table.add_row(
            p.id,
            str(p.pid),
            p.name,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
        )

    console.print(proc_table)
    console.print()

    stats = summary.statistics
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", _fmt_avg(stats.average_waiting if stats else None))
    sys_table.add_row("Avg turnaround", _fmt_avg(stats.average_turnaround if stats else None))
    if summary.system:
        sys = summary.system
        sys_table.add_row("Total execution time", str(sys.makespan))
        sys_table.add_row("CPU busy time", str(sys.cpu_busy_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _format_tick(snapshot: Snapshot) -> str:
    """
    One trace line for the tick that just ran, as shown by ``step``.
    """
    t = snapshot.current_time - 1
    last = snapshot.gantt[-1]
    occupant = "[dim]idle[/dim]" if last.is_idle else f"[green]{escape(last.occupant)}[/green]"
    ready = escape(" ".join(p.id for p in snapshot.ready) or "-")

    if snapshot.running is not None:
        quantum = f"{snapshot.quantum - snapshot.quantum_remaining}/{snapshot.quantum}"
        rest = f"{snapshot.running.remaining_time} left"
    else:
        quantum = "-"
        rest = ""

    done = [p.id for p in snapshot.completed if p.completion_time == snapshot.current_time]
    finished = f" [bold]{escape(' '.join(done))} done[/bold]" if done else ""

    return f"t={t:3d}: {occupant} ready=({ready}) quantum={quantum} {rest}{finished}".rstrip()


def _load_simulation(workload: str, quantum: int) -> Simulation:
    specs = load_workload(Path(workload))
    if len(specs) > MAX_RECOMMENDED_PROCESSES:
        logger.warning(
            "Workload has %d processes; charts are easiest to read with at most %d",
            len(specs),
            MAX_RECOMMENDED_PROCESSES,
        )
    return Simulation(specs, quantum=quantum)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    console = Console()

    try:
        simulation = _load_simulation(args.workload, args.quantum)
    except (ConfigurationError, OSError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    colors = {p.id: p.color for p in simulation.processes}

    if args.command == "run":
        summary = simulation.run_to_completion()
        _print_summary(summary, colors, console)
        return 0

    if args.command == "step":
        console.print(
            f"[bold]Simulating Round Robin[/bold] (quantum {simulation.quantum}, "
            f"{len(simulation.processes)} processes)"
        )
        console.print("[dim]Press Ctrl+C to skip the animation.[/dim]")
        try:
            drive(simulation, on_tick=lambda snap: console.print(_format_tick(snap)), delay=args.step_delay)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")
        summary = simulation.run_to_completion()
        console.print()
        _print_summary(summary, colors, console)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
