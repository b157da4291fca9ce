from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS, run_algorithm
from .errors import EmptyRosterError, SchedulerError
from .gantt import build_rich_gantt
from .metrics import summarize_process_metrics
from .models import SimulationResult
from .roster import Roster, parse_quantum
from .workload_io import load_roster, load_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
DEFAULT_ARRIVAL = 0
DEFAULT_BURST = 1
DEFAULT_PRIORITY = 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-viz",
        description="CPU scheduling visualizer (FCFS, SJF, Priority, Round Robin).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log roster changes and every dispatch decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, priority, rr).",
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
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round robin (ignored by FCFS, SJF, Priority; default: {DEFAULT_QUANTUM}).",
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
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf priority rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactively add, edit and delete processes, then simulate them.",
    )
    menu_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Optional workload file used to prefill the roster.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum to prefill for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _print_result(result: SimulationResult, console: Optional[Console] = None) -> None:
    console = console or Console()

    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline, width=console.width)
    console.print(panel)
    if time_marks:
        console.print("  " + time_marks)

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

    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    if result.system:
        system = result.system
        sys_table.add_row("Makespan", str(system.makespan))
        sys_table.add_row("CPU idle time", str(system.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(processes, algorithms: List[str], quantum: int, console: Console, title: str) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm", no_wrap=True)
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in algorithms:
        q = quantum if alg.lower() in QUANTUM_ALGORITHMS else None
        result = run_algorithm(alg, processes, quantum=q)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


def _animate_result(result: SimulationResult, delay: float, console: Optional[Console] = None) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    console = console or Console()
    timeline = sorted(result.timeline, key=lambda s: (s.start_time, s.end_time))
    if not timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    makespan = max(s.end_time for s in timeline)
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        running = None
        bar = ""
        for seg in timeline:
            if seg.start_time <= t < seg.end_time:
                running = seg.pid
                bar = f"[green]{'#' * (t - seg.start_time + 1)}[/green]"
                break
        msg = f"t={t:2d}: " + (running or "(idle)")
        console.print(msg + (" " + bar if bar else ""), markup=True, highlight=False)
        time.sleep(delay)


def _print_roster(roster: Roster, console: Console) -> None:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Arrival", justify="right")
    table.add_column("Burst", justify="right")
    table.add_column("Priority", justify="center")

    for p in roster:
        table.add_row(p.pid, str(p.arrival_time), str(p.burst_time), str(p.priority))

    if len(roster):
        console.print(table)
    else:
        console.print("[dim]No processes yet.[/dim]")


MENU_ACTIONS = {
    "a": "Add process",
    "e": "Edit process",
    "d": "Delete process",
    "c": "Clear all processes",
    "r": "Run simulation",
    "x": "Reset everything",
    "q": "Quit",
}


def _prompt_pid(roster: Roster, console: Console) -> str:
    return Prompt.ask("Process id", console=console, choices=[p.pid for p in roster])


def _interactive_menu(roster: Roster, default_quantum: int, console: Optional[Console] = None) -> None:
    console = console or Console()
    quantum = default_quantum

    while True:
        console.print("\n[bold cyan]Scheduler Visualizer[/bold cyan]")
        _print_roster(roster, console)
        for key, label in MENU_ACTIONS.items():
            console.print(f"  [yellow]{key}[/yellow]. [white]{label}[/white]")

        choice = Prompt.ask("Choice", console=console, choices=list(MENU_ACTIONS), show_choices=False)

        try:
            if choice == "q":
                return

            if choice == "a":
                arrival = Prompt.ask("Arrival time", console=console, default=str(DEFAULT_ARRIVAL))
                burst = Prompt.ask("Burst time", console=console, default=str(DEFAULT_BURST))
                priority = Prompt.ask("Priority", console=console, default=str(DEFAULT_PRIORITY))
                spec = roster.add(arrival, burst, priority)
                console.print(f"[green]Added {spec.pid}.[/green]")

            elif choice == "e":
                if not len(roster):
                    raise EmptyRosterError()
                pid = _prompt_pid(roster, console)
                current = roster.get(pid)
                arrival = Prompt.ask("Arrival time", console=console, default=str(current.arrival_time))
                burst = Prompt.ask("Burst time", console=console, default=str(current.burst_time))
                priority = Prompt.ask("Priority", console=console, default=str(current.priority))
                roster.update(pid, arrival=arrival, burst=burst, priority=priority)
                console.print(f"[green]Updated {pid}.[/green]")

            elif choice == "d":
                if not len(roster):
                    raise EmptyRosterError()
                pid = _prompt_pid(roster, console)
                roster.remove(pid)
                console.print(f"[green]Deleted {pid}.[/green]")

            elif choice == "c":
                if Confirm.ask("Clear all processes?", console=console, default=False):
                    roster.clear()

            elif choice == "x":
                if Confirm.ask("Reset everything?", console=console, default=False):
                    roster.clear()
                    quantum = DEFAULT_QUANTUM

            elif choice == "r":
                if not len(roster):
                    raise EmptyRosterError("Add at least one process")
                alg = Prompt.ask("Algorithm", console=console, choices=list(ALGORITHMS), default="fcfs")
                if alg in QUANTUM_ALGORITHMS:
                    quantum = parse_quantum(Prompt.ask("Quantum", console=console, default=str(quantum)))
                result = run_algorithm(alg, roster.snapshot(), quantum=quantum)
                _print_result(result, console)

        except SchedulerError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            _print_comparison(processes, args.algorithms, args.quantum, console, "Algorithm comparison")
            return 0

        if args.command == "menu":
            roster = load_roster(args.workload) if args.workload else Roster()
            _interactive_menu(roster, args.quantum, console)
            return 0

    except SchedulerError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2
    except OSError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
