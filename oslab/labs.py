"""
Lab state objects and their pure ``recompute`` step.

A front end keeps one immutable state per lab, rebuilds it whenever the user
edits an input and calls ``recompute`` (or ``LabSession.run`` to also report
progress) to get a fresh result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .algorithms import run_schedule
from .bankers import check_safety
from .config import (
    DEFAULT_CLAIMS,
    DEFAULT_FRAME_CAPACITY,
    DEFAULT_QUANTUM,
    DEFAULT_REFERENCE_STRING,
    DEFAULT_TOTAL_RESOURCES,
    SAMPLE_PROCESSES,
)
from .models import PagingResult, Process, ProcessClaim, SafetyResult, ScheduleResult
from .paging import parse_reference_string, run_paging
from .policies import ReplacementPolicy, scheduling_policy
from .sync import Lab, ProgressReporter, report_progress


@dataclass(frozen=True)
class CPULabState:
    processes: Tuple[Process, ...]
    policy: str = "fcfs"
    quantum: int = DEFAULT_QUANTUM

    lab = Lab.CPU

    @classmethod
    def sample(cls, policy: str = "fcfs") -> "CPULabState":
        return cls(
            processes=tuple(Process(pid, arrival, burst, prio) for pid, arrival, burst, prio in SAMPLE_PROCESSES),
            policy=policy,
        )


@dataclass(frozen=True)
class MemoryLabState:
    references: Tuple[int, ...]
    frame_capacity: int = DEFAULT_FRAME_CAPACITY
    policy: ReplacementPolicy = ReplacementPolicy.FIFO

    lab = Lab.MEMORY

    @classmethod
    def sample(cls, policy: ReplacementPolicy = ReplacementPolicy.FIFO) -> "MemoryLabState":
        return cls(references=tuple(parse_reference_string(DEFAULT_REFERENCE_STRING)), policy=policy)


@dataclass(frozen=True)
class BankersLabState:
    total: Tuple[int, ...]
    claims: Tuple[ProcessClaim, ...]

    lab = Lab.DEADLOCK

    @classmethod
    def sample(cls) -> "BankersLabState":
        return cls(
            total=DEFAULT_TOTAL_RESOURCES,
            claims=tuple(ProcessClaim(pid, alloc, maximum) for pid, alloc, maximum in DEFAULT_CLAIMS),
        )


LabState = Union[CPULabState, MemoryLabState, BankersLabState]
LabResult = Union[ScheduleResult, PagingResult, SafetyResult]


def _recompute_cpu(state: CPULabState) -> ScheduleResult:
    policy = scheduling_policy(state.policy, state.quantum)
    return run_schedule(state.processes, policy)


def _recompute_memory(state: MemoryLabState) -> PagingResult:
    return run_paging(state.references, state.frame_capacity, state.policy)


def _recompute_bankers(state: BankersLabState) -> SafetyResult:
    return check_safety(state.total, state.claims)


_RECOMPUTE = {
    CPULabState: _recompute_cpu,
    MemoryLabState: _recompute_memory,
    BankersLabState: _recompute_bankers,
}


def recompute(state: LabState) -> LabResult:
    try:
        handler = _RECOMPUTE[type(state)]
    except KeyError:
        raise TypeError(f"Unsupported lab state: {type(state).__name__}") from None
    return handler(state)


class LabSession:
    """
    Recompute lab states and report each successful run to a progress tracker.
    """

    def __init__(self, reporter: Optional[ProgressReporter] = None, user_id: Optional[str] = None) -> None:
        self.reporter = reporter
        self.user_id = user_id

    def run(self, state: LabState) -> LabResult:
        result = recompute(state)
        report_progress(self.reporter, self.user_id, state.lab)
        return result
