from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class ScheduleBlock:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduleBlock] = field(default_factory=list)
    system: Optional[SystemMetrics] = None


@dataclass(frozen=True)
class SimulationStep:
    """
    Frame state after handling one page reference.

    ``frames`` holds one entry per slot, ``None`` for an empty slot.
    ``replaced_slot`` is the slot that changed on a fault and ``None`` on a hit.
    """

    page: int
    frames: Tuple[Optional[int], ...]
    is_hit: bool
    faults: int
    replaced_slot: Optional[int] = None
    evicted_page: Optional[int] = None


@dataclass
class PagingResult:
    policy: str
    frame_capacity: int
    steps: List[SimulationStep] = field(default_factory=list)

    @property
    def faults(self) -> int:
        return self.steps[-1].faults if self.steps else 0

    @property
    def hits(self) -> int:
        return sum(1 for s in self.steps if s.is_hit)

    @property
    def hit_ratio(self) -> float:
        return self.hits / len(self.steps) if self.steps else 0.0

    @property
    def final_frames(self) -> Tuple[Optional[int], ...]:
        if not self.steps:
            return (None,) * self.frame_capacity
        return self.steps[-1].frames


@dataclass(frozen=True)
class ProcessClaim:
    pid: int
    allocation: Tuple[int, ...]
    maximum: Tuple[int, ...]

    @property
    def need(self) -> Tuple[int, ...]:
        return tuple(m - a for m, a in zip(self.maximum, self.allocation))


@dataclass
class SafetyResult:
    safe: bool
    sequence: List[int] = field(default_factory=list)
    available: Tuple[int, ...] = ()
    need: List[Tuple[int, ...]] = field(default_factory=list)


@dataclass
class RequestDecision:
    granted: bool
    reason: str
    safety: Optional[SafetyResult] = None
