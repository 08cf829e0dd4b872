from __future__ import annotations

import argparse
import logging
import random
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import run_algorithm
from .bankers import check_safety, evaluate_request
from .concurrency import BoundedBuffer, DiningTable
from .config import (
    DEFAULT_CLAIMS,
    DEFAULT_FRAME_CAPACITY,
    DEFAULT_QUANTUM,
    DEFAULT_REFERENCE_STRING,
    DEFAULT_TOTAL_RESOURCES,
    SAMPLE_PROCESSES,
    SHELL_PROMPT,
)
from .gantt import block_label
from .metrics import summarize_process_metrics
from .models import Process, ProcessClaim, ScheduleResult
from .paging import compare_policies, parse_reference_string, run_paging
from .policies import POLICY_NAMES, ReplacementPolicy
from .render import print_paging_comparison, print_paging_trace, print_safety, print_schedule
from .shell import MiniShell
from .workload_io import load_bankers_scenario, load_references, load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oslab",
        description="Operating-systems algorithm lab: CPU scheduling, page replacement, Banker's algorithm.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Schedule a workload with one policy.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Policy to use (fcfs, sjf, srtf, priority, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in two-process sample).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round robin (default: {DEFAULT_QUANTUM}).",
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
        help="Run several scheduling policies on the same workload and compare average metrics.",
    )
    compare_parser.add_argument("--workload", "-w", default=None, help="Path to JSON or CSV workload file.")
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(POLICY_NAMES),
        help="Policies to compare (default: fcfs sjf srtf priority rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for round robin (default: {DEFAULT_QUANTUM}).",
    )

    paging_parser = subparsers.add_parser("paging", help="Trace a page replacement policy.")
    source = paging_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--references",
        "-r",
        default=None,
        help=f"Reference string, e.g. '7,0,1,2' (default: {DEFAULT_REFERENCE_STRING}).",
    )
    source.add_argument("--file", default=None, help="Text file holding the reference string.")
    paging_parser.add_argument(
        "--frames",
        "-f",
        type=int,
        default=DEFAULT_FRAME_CAPACITY,
        help=f"Number of frames (default: {DEFAULT_FRAME_CAPACITY}).",
    )
    paging_parser.add_argument(
        "--policy",
        "-p",
        default="fifo",
        help="Replacement policy (fifo, lru, mru, optimal).",
    )
    paging_parser.add_argument(
        "--compare",
        action="store_true",
        help="Compare all four policies instead of tracing one.",
    )

    bankers_parser = subparsers.add_parser("bankers", help="Run the Banker's safety check.")
    bankers_parser.add_argument(
        "--scenario",
        "-s",
        default=None,
        help="JSON scenario file (default: built-in textbook scenario).",
    )
    bankers_parser.add_argument(
        "--request",
        default=None,
        help="Evaluate a resource request, written PID:a,b,c (e.g. 1:1,0,2).",
    )

    conc_parser = subparsers.add_parser("concurrency", help="Step a producer-consumer or dining philosophers model.")
    conc_parser.add_argument("model", choices=["buffer", "philosophers"])
    conc_parser.add_argument("--steps", type=int, default=10, help="Number of steps to run (default: 10).")
    conc_parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run.")

    shell_parser = subparsers.add_parser("shell", help="Start the interactive mini shell.")
    shell_parser.add_argument("--seed", type=int, default=None, help="Random seed for fork PIDs.")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _processes(workload: Optional[str]) -> List[Process]:
    if workload is None:
        return [Process(pid, arrival, burst, prio) for pid, arrival, burst, prio in SAMPLE_PROCESSES]
    return load_workload(Path(workload))


def _parse_request(text: str) -> Tuple[int, Tuple[int, ...]]:
    try:
        pid_text, vector_text = text.split(":", 1)
        return int(pid_text), tuple(int(v) for v in vector_text.split(","))
    except ValueError as exc:
        raise ValueError(f"Invalid request {text!r} (expected PID:a,b,c)") from exc


def _animate_result(result: ScheduleResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    timeline = result.timeline
    if not timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    makespan = max(b.end_time for b in timeline)
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        running = next((b for b in timeline if b.start_time <= t < b.end_time), None)
        if running is None:
            console.print(f"t={t:2d}: [idle]")
        else:
            bar = "█" * (t - running.start_time + 1)
            console.print(f"t={t:2d}: {block_label(running.pid)} [green]{bar}[/green]")
        time.sleep(delay)


def _cmd_run(args, console: Console) -> int:
    processes = _processes(args.workload)
    result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
    if args.step:
        try:
            _animate_result(result, args.step_delay, console)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")
    print_schedule(result, console)
    return 0


def _cmd_compare(args, console: Console) -> int:
    processes = _processes(args.workload)

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in args.algorithms:
        result = run_algorithm(alg, processes, quantum=args.quantum)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)
    return 0


def _cmd_paging(args, console: Console) -> int:
    if args.file is not None:
        references = load_references(args.file)
    else:
        references = parse_reference_string(args.references or DEFAULT_REFERENCE_STRING)

    if args.compare:
        print_paging_comparison(compare_policies(references, args.frames), console)
    else:
        print_paging_trace(run_paging(references, args.frames, ReplacementPolicy.parse(args.policy)), console)
    return 0


def _cmd_bankers(args, console: Console) -> int:
    if args.scenario is not None:
        total, claims = load_bankers_scenario(args.scenario)
    else:
        total = DEFAULT_TOTAL_RESOURCES
        claims = [ProcessClaim(pid, alloc, maximum) for pid, alloc, maximum in DEFAULT_CLAIMS]

    result = check_safety(total, claims)
    decision = None
    if args.request is not None:
        pid, request = _parse_request(args.request)
        decision = evaluate_request(total, claims, pid, request)

    print_safety(total, claims, result, console, decision=decision)
    return 0 if result.safe else 1


def _cmd_concurrency(args, console: Console) -> int:
    rng = random.Random(args.seed)

    if args.model == "buffer":
        buffer = BoundedBuffer()
        for _ in range(args.steps):
            event = buffer.step(rng)
            color = "red" if event.kind == "error" else "cyan"
            slots = " ".join(str(i) for i in buffer.items) or "(empty)"
            console.print(f"[{color}]{event.message}[/{color}]  buffer: {slots}")
        return 0

    table = DiningTable()
    for step in range(args.steps):
        states = table.step(rng)
        row = "  ".join(f"{seat + 1}:{state.value}" for seat, state in enumerate(states))
        console.print(f"step {step + 1:2d}  {row}")
    return 0


def _cmd_shell(args, console: Console) -> int:
    shell = MiniShell(rng=random.Random(args.seed))
    for line in shell.history:
        console.print(line, markup=False)

    while True:
        try:
            line = input(f"{SHELL_PROMPT} ")
        except EOFError:
            console.print()
            return 0
        if line.strip().lower() in {"exit", "quit"}:
            return 0
        if line.strip().lower() == "clear":
            console.clear()
        for output in shell.execute(line):
            console.print(output, markup=False)


_COMMANDS = {
    "run": _cmd_run,
    "compare": _cmd_compare,
    "paging": _cmd_paging,
    "bankers": _cmd_bankers,
    "concurrency": _cmd_concurrency,
    "shell": _cmd_shell,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    console = Console()
    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.error(f"Unknown command: {args.command}")
        return 1

    try:
        return handler(args, console)
    except (ValueError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
