"""
Page replacement simulator.

Replays a page reference string against a fixed number of frames and records
the frame state after every reference. Supported eviction policies:

- FIFO: evict the page that was loaded first.
- LRU: evict the resident page referenced least recently.
- MRU: evict the resident page referenced most recently.
- OPTIMAL: evict the resident page whose next use is farthest away. Pages that
  are never used again go first; if there are several, the one in the lowest
  slot is evicted.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Union

from .errors import ConfigurationError
from .models import PagingResult, SimulationStep
from .policies import ReplacementPolicy

logger = logging.getLogger(__name__)

_NEVER = float("inf")


def parse_reference_string(text: str) -> List[int]:
    """
    Parse ``"7, 0,1 2"`` into ``[7, 0, 1, 2]``. Blank entries are skipped.
    """
    refs: List[int] = []
    for token in re.split(r"[,\s]+", text.strip()):
        if token == "":
            continue
        try:
            refs.append(int(token))
        except ValueError as exc:
            raise ValueError(f"Invalid page reference: {token!r}") from exc
    return refs


def _next_use(references: Sequence[int], position: int, page: int) -> float:
    for i in range(position + 1, len(references)):
        if references[i] == page:
            return i
    return _NEVER


def _choose_victim(
    policy: ReplacementPolicy,
    frames: List[Optional[int]],
    load_order: Deque[int],
    recency: List[int],
    references: Sequence[int],
    position: int,
) -> int:
    """Return the slot index to evict. All frames are occupied here."""
    if policy is ReplacementPolicy.FIFO:
        return frames.index(load_order[0])

    if policy is ReplacementPolicy.LRU:
        victim = next(p for p in recency if p in frames)
        return frames.index(victim)

    if policy is ReplacementPolicy.MRU:
        victim = next(p for p in reversed(recency) if p in frames)
        return frames.index(victim)

    # OPTIMAL: strict ">" keeps the lowest slot among equal distances,
    # which only happens for pages that are never used again.
    best_slot = 0
    best_distance = -1.0
    for slot, page in enumerate(frames):
        distance = _next_use(references, position, page)
        if distance > best_distance:
            best_slot = slot
            best_distance = distance
    return best_slot


def simulate(
    references: Iterable[int],
    frame_capacity: int,
    policy: Union[ReplacementPolicy, str],
) -> List[SimulationStep]:
    """
    Run a page replacement simulation, one ``SimulationStep`` per reference.
    """
    policy = ReplacementPolicy.parse(policy)
    if isinstance(frame_capacity, bool) or not isinstance(frame_capacity, int) or frame_capacity < 1:
        logger.debug("Rejected frame capacity %r", frame_capacity)
        raise ConfigurationError(f"Frame capacity must be an integer >= 1, got {frame_capacity!r}")

    refs = list(references)
    frames: List[Optional[int]] = [None] * frame_capacity
    load_order: Deque[int] = deque()
    recency: List[int] = []  # least recently used first
    faults = 0
    steps: List[SimulationStep] = []

    for position, page in enumerate(refs):
        is_hit = page in frames
        replaced_slot: Optional[int] = None
        evicted: Optional[int] = None

        if not is_hit:
            faults += 1
            if None in frames:
                replaced_slot = frames.index(None)
            else:
                replaced_slot = _choose_victim(policy, frames, load_order, recency, refs, position)
                evicted = frames[replaced_slot]
                if evicted in load_order:
                    load_order.remove(evicted)
            frames[replaced_slot] = page
            load_order.append(page)

        if page in recency:
            recency.remove(page)
        recency.append(page)

        steps.append(
            SimulationStep(
                page=page,
                frames=tuple(frames),
                is_hit=is_hit,
                faults=faults,
                replaced_slot=replaced_slot,
                evicted_page=evicted,
            )
        )

    logger.debug(
        "Simulated %d references with %s on %d frames: %d faults",
        len(refs),
        policy.value,
        frame_capacity,
        faults,
    )
    return steps


def run_paging(
    references: Iterable[int],
    frame_capacity: int,
    policy: Union[ReplacementPolicy, str],
) -> PagingResult:
    policy = ReplacementPolicy.parse(policy)
    steps = simulate(references, frame_capacity, policy)
    return PagingResult(policy=policy.value, frame_capacity=frame_capacity, steps=steps)


def compare_policies(
    references: Iterable[int],
    frame_capacity: int,
    policies: Optional[Iterable[Union[ReplacementPolicy, str]]] = None,
) -> Dict[ReplacementPolicy, PagingResult]:
    """
    Run the same reference string under several policies (all by default).
    """
    refs = list(references)
    chosen = list(ReplacementPolicy) if policies is None else [ReplacementPolicy.parse(p) for p in policies]
    return {p: run_paging(refs, frame_capacity, p) for p in chosen}
