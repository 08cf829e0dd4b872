from __future__ import annotations

from typing import Dict, List, Sequence

from .models import Process, ProcessMetrics, ScheduleBlock, SystemMetrics


def compute_process_metrics(
    processes: Sequence[Process], timeline: Sequence[ScheduleBlock]
) -> List[ProcessMetrics]:
    """
    Derive per-process timing metrics from a timeline.

    Completion is the latest block end of a process, turnaround is completion
    minus arrival and waiting is turnaround minus burst. Processes that never
    appear in the timeline are left out.
    """
    blocks_by_pid: Dict[int, List[ScheduleBlock]] = {}
    for block in timeline:
        blocks_by_pid.setdefault(block.pid, []).append(block)

    metrics: List[ProcessMetrics] = []
    for p in processes:
        blocks = blocks_by_pid.get(p.pid)
        if not blocks:
            continue

        start_time = min(b.start_time for b in blocks)
        completion_time = max(b.end_time for b in blocks)
        turnaround_time = completion_time - p.arrival_time

        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                start_time=start_time,
                completion_time=completion_time,
                waiting_time=turnaround_time - p.burst_time,
                turnaround_time=turnaround_time,
                response_time=start_time - p.arrival_time,
                priority=p.priority,
            )
        )

    return metrics


def compute_system_metrics(timeline: Sequence[ScheduleBlock]) -> SystemMetrics:
    """
    Compute throughput and CPU utilization for a timeline.
    """
    if not timeline:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(b.end_time for b in timeline)
    cpu_busy_time = sum(b.duration for b in timeline)
    completed = len({b.pid for b in timeline})

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=completed / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
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
