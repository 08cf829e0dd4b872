from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Sequence, Union

from .errors import ConfigurationError
from .metrics import compute_process_metrics, compute_system_metrics
from .models import Process, ScheduleBlock, ScheduleResult
from .policies import (
    FCFS,
    SJF,
    SRTF,
    Priority,
    RoundRobin,
    SchedulingPolicy,
    scheduling_policy,
)

logger = logging.getLogger(__name__)


@dataclass
class _Job:
    """Per-run scratch copy of a process."""

    process: Process
    order: int
    remaining: int

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time


# Primary selection key per policy. min() keeps the first of equal keys, and
# the ready list is in input order, so ties go to the earlier input entry.
_SELECTION_KEYS: Dict[type, Callable[[_Job], int]] = {
    FCFS: lambda j: j.process.arrival_time,
    SJF: lambda j: j.process.burst_time,
    SRTF: lambda j: j.remaining,
    Priority: lambda j: j.process.priority,
}


def _validate_processes(processes: Sequence[Process]) -> None:
    seen = set()
    for p in processes:
        if p.pid in seen:
            raise ConfigurationError(f"Duplicate process id {p.pid}")
        seen.add(p.pid)
        if p.arrival_time < 0:
            raise ConfigurationError(f"Process {p.pid} has negative arrival time {p.arrival_time}")
        if p.burst_time < 1:
            raise ConfigurationError(f"Process {p.pid} needs a burst time >= 1, got {p.burst_time}")


def merge_blocks(blocks: Sequence[ScheduleBlock]) -> List[ScheduleBlock]:
    """
    Merge back-to-back blocks of the same process into one block.
    """
    merged: List[ScheduleBlock] = []
    for block in blocks:
        prev = merged[-1] if merged else None
        if prev is not None and prev.pid == block.pid and prev.end_time == block.start_time:
            merged[-1] = ScheduleBlock(pid=prev.pid, start_time=prev.start_time, end_time=block.end_time)
        else:
            merged.append(block)
    return merged


def _run_by_selection(jobs: List[_Job], policy: SchedulingPolicy) -> List[ScheduleBlock]:
    """
    FCFS, SJF, SRTF and Priority.

    At each decision point pick the best ready job by the policy's key. The
    non-preemptive policies run the job to completion; SRTF runs one time unit
    and decides again so that a shorter arrival can take over.
    """
    key = _SELECTION_KEYS[type(policy)]
    pending = list(jobs)

    time = 0
    blocks: List[ScheduleBlock] = []

    while pending:
        ready = [j for j in pending if j.arrival_time <= time]

        if not ready:
            # CPU idle: jump to the next arrival instead of ticking through the gap.
            time = min(j.arrival_time for j in pending)
            continue

        job = min(ready, key=key)
        run_time = 1 if policy.preemptive else job.remaining

        blocks.append(ScheduleBlock(pid=job.pid, start_time=time, end_time=time + run_time))
        time += run_time
        job.remaining -= run_time

        if job.remaining == 0:
            pending.remove(job)

    return blocks


def _run_round_robin(jobs: List[_Job], quantum: int) -> List[ScheduleBlock]:
    """
    Round Robin with a fixed time quantum.

    Jobs that arrive while a slice runs are queued before the preempted job
    goes to the back of the queue.
    """
    not_arrived: Deque[_Job] = deque(sorted(jobs, key=lambda j: (j.arrival_time, j.order)))
    ready: Deque[_Job] = deque()

    time = 0
    blocks: List[ScheduleBlock] = []

    def admit_arrivals(current_time: int) -> None:
        while not_arrived and not_arrived[0].arrival_time <= current_time:
            ready.append(not_arrived.popleft())

    admit_arrivals(time)

    while ready or not_arrived:
        if not ready:
            time = not_arrived[0].arrival_time
            admit_arrivals(time)
            continue

        job = ready.popleft()
        run_time = min(job.remaining, quantum)

        blocks.append(ScheduleBlock(pid=job.pid, start_time=time, end_time=time + run_time))
        time += run_time
        job.remaining -= run_time

        admit_arrivals(time)

        if job.remaining > 0:
            ready.append(job)

    return blocks


def _resolve_policy(policy: Union[SchedulingPolicy, str], quantum: Optional[int]) -> SchedulingPolicy:
    if isinstance(policy, str):
        return scheduling_policy(policy, quantum)
    return policy


def schedule(
    processes: Sequence[Process],
    policy: Union[SchedulingPolicy, str],
    quantum: Optional[int] = None,
) -> List[ScheduleBlock]:
    """
    Simulate ``processes`` under ``policy`` and return the merged timeline.

    ``policy`` is a policy object (``FCFS()``, ``RoundRobin(2)``, ...) or a
    policy name, in which case ``quantum`` is used for round robin. Idle time
    produces no block. The input processes are not modified.
    """
    policy = _resolve_policy(policy, quantum)
    _validate_processes(processes)

    jobs = [_Job(process=p, order=i, remaining=p.burst_time) for i, p in enumerate(processes)]

    if isinstance(policy, RoundRobin):
        raw = _run_round_robin(jobs, policy.quantum)
    else:
        raw = _run_by_selection(jobs, policy)

    timeline = merge_blocks(raw)
    logger.debug(
        "Scheduled %d processes with %s into %d blocks", len(processes), policy.name, len(timeline)
    )
    return timeline


def run_schedule(
    processes: Sequence[Process],
    policy: Union[SchedulingPolicy, str],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Schedule ``processes`` and attach per-process and system metrics.
    """
    policy = _resolve_policy(policy, quantum)
    timeline = schedule(processes, policy)

    return ScheduleResult(
        algorithm=policy.name,
        quantum=policy.quantum if isinstance(policy, RoundRobin) else None,
        processes=compute_process_metrics(processes, timeline),
        timeline=timeline,
        system=compute_system_metrics(timeline),
    )


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the policy called ``name``. Quantum is only used by round robin.
    """
    return run_schedule(processes, scheduling_policy(name, quantum))
