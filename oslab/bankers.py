"""
Banker's algorithm: safety check and resource-request evaluation.

Safety algorithm:
1. Work = Available, Finish = False for every process.
2. Find the first unfinished process with Need <= Work.
3. If found: Finish it, Work += its Allocation, append its id, go to 2.
4. Stop when every process finished (SAFE) or none can proceed (UNSAFE).

Time complexity is O(P^2 x R).
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from .errors import ConfigurationError
from .models import ProcessClaim, RequestDecision, SafetyResult

logger = logging.getLogger(__name__)


def _reject(message: str) -> ConfigurationError:
    logger.debug("Rejected resource configuration: %s", message)
    return ConfigurationError(message)


def _validate(total: Sequence[int], claims: Sequence[ProcessClaim]) -> None:
    width = len(total)
    if any(t < 0 for t in total):
        raise _reject(f"Total resources must be non-negative, got {tuple(total)}")

    seen = set()
    for claim in claims:
        if claim.pid in seen:
            raise _reject(f"Duplicate process id {claim.pid}")
        seen.add(claim.pid)

        if len(claim.allocation) != width or len(claim.maximum) != width:
            raise _reject(f"Process {claim.pid} must list exactly {width} resource values")
        if any(v < 0 for v in claim.allocation) or any(v < 0 for v in claim.maximum):
            raise _reject(f"Process {claim.pid} has a negative resource value")
        for k, (alloc, maximum) in enumerate(zip(claim.allocation, claim.maximum)):
            if alloc > maximum:
                raise _reject(
                    f"Process {claim.pid} holds {alloc} of resource {k} but its maximum is {maximum}"
                )


def compute_available(total: Sequence[int], claims: Sequence[ProcessClaim]) -> Tuple[int, ...]:
    """
    Available = Total - sum of allocations, per resource class.
    """
    available = list(total)
    for claim in claims:
        for k, alloc in enumerate(claim.allocation):
            available[k] -= alloc
    return tuple(available)


def _fits(need: Sequence[int], work: Sequence[int]) -> bool:
    return all(n <= w for n, w in zip(need, work))


def _safety_pass(available: Tuple[int, ...], claims: Sequence[ProcessClaim]) -> List[int]:
    work = list(available)
    finished = [False] * len(claims)
    sequence: List[int] = []

    made_progress = True
    while made_progress:
        made_progress = False
        for i, claim in enumerate(claims):
            if finished[i] or not _fits(claim.need, work):
                continue
            # The process can run to completion and release what it holds.
            for k, alloc in enumerate(claim.allocation):
                work[k] += alloc
            finished[i] = True
            sequence.append(claim.pid)
            made_progress = True
            break  # restart from the top

    return sequence


def check_safety(total: Sequence[int], claims: Sequence[ProcessClaim]) -> SafetyResult:
    """
    Decide whether the allocation state is safe.

    When it is, ``sequence`` is a completion order in which every process's
    need can be met; otherwise ``sequence`` is empty.
    """
    _validate(total, claims)
    available = compute_available(total, claims)
    if any(a < 0 for a in available):
        raise _reject(f"Allocations exceed total resources (available would be {available})")

    sequence = _safety_pass(available, claims)
    safe = len(sequence) == len(claims)

    logger.debug("Safety check on %d processes: safe=%s sequence=%s", len(claims), safe, sequence)
    return SafetyResult(
        safe=safe,
        sequence=sequence if safe else [],
        available=available,
        need=[claim.need for claim in claims],
    )


def evaluate_request(
    total: Sequence[int],
    claims: Sequence[ProcessClaim],
    pid: int,
    request: Sequence[int],
) -> RequestDecision:
    """
    Resource-request algorithm.

    1. A request above the process's remaining need is a configuration error.
    2. A request above what is available cannot be granted yet (must wait).
    3. Otherwise pretend to allocate and grant only if the new state is safe.

    The caller's claims are never modified; the tentative state is a copy.
    """
    _validate(total, claims)
    matches = [c for c in claims if c.pid == pid]
    if not matches:
        raise _reject(f"Unknown process id {pid}")
    claim = matches[0]

    if len(request) != len(total) or any(r < 0 for r in request):
        raise _reject(f"Request must list {len(total)} non-negative values, got {tuple(request)}")
    if not _fits(request, claim.need):
        raise _reject(f"Process {pid} requested {tuple(request)} which exceeds its need {claim.need}")

    available = compute_available(total, claims)
    if not _fits(request, available):
        return RequestDecision(
            granted=False,
            reason=f"Insufficient resources (requested {tuple(request)}, available {available}); process must wait",
        )

    granted_claim = ProcessClaim(
        pid=claim.pid,
        allocation=tuple(a + r for a, r in zip(claim.allocation, request)),
        maximum=claim.maximum,
    )
    tentative = [granted_claim if c.pid == pid else c for c in claims]
    safety = check_safety(total, tentative)

    if safety.safe:
        seq_str = " -> ".join(f"P{p}" for p in safety.sequence)
        return RequestDecision(granted=True, reason=f"Granted (safe sequence: {seq_str})", safety=safety)
    return RequestDecision(granted=False, reason="Denied (would leave the system unsafe)", safety=safety)
