from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FCFS:
    name = "FCFS"
    preemptive = False


@dataclass(frozen=True)
class SJF:
    name = "SJF (non-preemptive)"
    preemptive = False


@dataclass(frozen=True)
class SRTF:
    name = "SRTF"
    preemptive = True


@dataclass(frozen=True)
class Priority:
    name = "Priority (non-preemptive)"
    preemptive = False


@dataclass(frozen=True)
class RoundRobin:
    quantum: int
    name = "Round Robin"
    preemptive = True

    def __post_init__(self) -> None:
        if isinstance(self.quantum, bool) or not isinstance(self.quantum, int) or self.quantum < 1:
            logger.debug("Rejected round robin quantum %r", self.quantum)
            raise ConfigurationError(f"Round Robin requires an integer quantum >= 1, got {self.quantum!r}")


SchedulingPolicy = Union[FCFS, SJF, SRTF, Priority, RoundRobin]

_SIMPLE_POLICIES = {
    "fcfs": FCFS,
    "sjf": SJF,
    "srtf": SRTF,
    "priority": Priority,
}
_ROUND_ROBIN_NAMES = {"rr", "roundrobin", "round-robin", "round_robin"}

POLICY_NAMES = ["fcfs", "sjf", "srtf", "priority", "rr"]


def scheduling_policy(name: str, quantum: Optional[int] = None) -> SchedulingPolicy:
    """
    Build a scheduling policy from its command-line name.

    ``quantum`` is required for round robin and ignored by the others.
    """
    key = name.strip().lower()
    if key in _ROUND_ROBIN_NAMES:
        if quantum is None:
            raise ConfigurationError("Round Robin requires a quantum (use --quantum)")
        return RoundRobin(quantum)
    if key not in _SIMPLE_POLICIES:
        raise ConfigurationError(f"Unknown scheduling policy '{name}'")
    return _SIMPLE_POLICIES[key]()


class ReplacementPolicy(Enum):
    FIFO = "FIFO"
    LRU = "LRU"
    MRU = "MRU"
    OPTIMAL = "OPTIMAL"

    @classmethod
    def parse(cls, value: Union[str, "ReplacementPolicy"]) -> "ReplacementPolicy":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key == "OPT":
            key = "OPTIMAL"
        try:
            return cls(key)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown page replacement policy '{value}'") from exc
