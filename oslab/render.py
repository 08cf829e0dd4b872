from __future__ import annotations

from typing import Dict, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .config import RESOURCE_LABELS
from .gantt import block_label, build_rich_gantt
from .metrics import summarize_process_metrics
from .models import PagingResult, ProcessClaim, RequestDecision, SafetyResult, ScheduleResult
from .policies import ReplacementPolicy


def _resource_labels(width: int) -> Sequence[str]:
    if width <= len(RESOURCE_LABELS):
        return RESOURCE_LABELS[:width]
    return [f"R{k}" for k in range(width)]


def _vector(values: Sequence[int]) -> str:
    return " ".join(str(v) for v in values)


def print_schedule(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)
    console.print()

    headers = ["PID", "Arrive", "Burst", "Priority", "Start", "Complete", "Wait", "Turnaround", "Response"]
    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h in {"PID", "Priority"} else "right")

    for p in result.processes:
        proc_table.add_row(
            block_label(p.pid),
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
        sys_table.add_row("Throughput (proc/time)", f"{result.system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{result.system.cpu_utilization * 100:.1f}%")
    console.print(sys_table)


def print_paging_trace(result: PagingResult, console: Console) -> None:
    table = Table(title=f"{result.policy} with {result.frame_capacity} frames", box=box.SIMPLE_HEAVY)
    table.add_column("Step", justify="right")
    table.add_column("Page", justify="center")
    for slot in range(result.frame_capacity):
        table.add_column(f"F{slot}", justify="center")
    table.add_column("Result", justify="center")
    table.add_column("Faults", justify="right")

    for i, step in enumerate(result.steps):
        cells = []
        for slot, page in enumerate(step.frames):
            text = "-" if page is None else str(page)
            if slot == step.replaced_slot:
                text = f"[bold magenta]{text}[/bold magenta]"
            cells.append(text)
        outcome = "[green]hit[/green]" if step.is_hit else "[red]fault[/red]"
        table.add_row(str(i), str(step.page), *cells, outcome, str(step.faults))

    console.print(table)
    console.print(
        f"[bold]Faults:[/bold] {result.faults}  [bold]Hits:[/bold] {result.hits}  "
        f"[bold]Hit ratio:[/bold] {result.hit_ratio * 100:.1f}%"
    )


def print_paging_comparison(results: Dict[ReplacementPolicy, PagingResult], console: Console) -> None:
    table = Table(title="Page replacement comparison", box=box.SIMPLE_HEAVY)
    table.add_column("Policy")
    table.add_column("Faults", justify="right")
    table.add_column("Hits", justify="right")
    table.add_column("Hit ratio", justify="right")
    table.add_column("Final frames", justify="center")

    for policy, result in results.items():
        frames = " ".join("-" if p is None else str(p) for p in result.final_frames)
        table.add_row(policy.value, str(result.faults), str(result.hits), f"{result.hit_ratio * 100:.1f}%", frames)

    console.print(table)


def print_safety(
    total: Sequence[int],
    claims: Sequence[ProcessClaim],
    result: SafetyResult,
    console: Console,
    decision: Optional[RequestDecision] = None,
) -> None:
    labels = _resource_labels(len(total))

    console.print(f"[bold]Total:[/bold] {_vector(total)}  ({' '.join(labels)})")
    console.print(f"[bold]Available:[/bold] {_vector(result.available)}")
    console.print()

    table = Table(title="Resource claims", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Allocation", justify="center")
    table.add_column("Maximum", justify="center")
    table.add_column("Need", justify="center")
    for claim in claims:
        table.add_row(block_label(claim.pid), _vector(claim.allocation), _vector(claim.maximum), _vector(claim.need))
    console.print(table)

    if result.safe:
        sequence = " -> ".join(block_label(pid) for pid in result.sequence)
        console.print(f"[bold green]System state: SAFE[/bold green]  sequence: {sequence or '(no processes)'}")
    else:
        console.print("[bold red]System state: UNSAFE[/bold red]  no process ordering can satisfy every need")

    if decision is not None:
        style = "green" if decision.granted else "yellow"
        console.print(f"[bold]Request:[/bold] [{style}]{decision.reason}[/{style}]")
