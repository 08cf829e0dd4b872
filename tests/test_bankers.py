import pytest

from oslab.bankers import check_safety, compute_available, evaluate_request
from oslab.errors import ConfigurationError
from oslab.models import ProcessClaim

TOTAL = (10, 5, 7)


def _claims():
    return [
        ProcessClaim(0, allocation=(0, 1, 0), maximum=(7, 5, 3)),
        ProcessClaim(1, allocation=(2, 0, 0), maximum=(3, 2, 2)),
        ProcessClaim(2, allocation=(3, 0, 2), maximum=(9, 0, 2)),
    ]


def _is_valid_sequence(total, claims, sequence):
    by_pid = {c.pid: c for c in claims}
    work = list(compute_available(total, claims))
    for pid in sequence:
        claim = by_pid[pid]
        if any(n > w for n, w in zip(claim.need, work)):
            return False
        work = [w + a for w, a in zip(work, claim.allocation)]
    return sorted(sequence) == sorted(by_pid)


def test_available_and_need():
    assert compute_available(TOTAL, _claims()) == (5, 4, 5)
    assert _claims()[0].need == (7, 4, 3)


def test_textbook_scenario_is_safe():
    result = check_safety(TOTAL, _claims())
    assert result.safe
    assert result.available == (5, 4, 5)
    assert _is_valid_sequence(TOTAL, _claims(), result.sequence)


def test_scan_restarts_from_the_top():
    # P1 is the only one that fits at first; after it releases, P0 fits before P2.
    assert check_safety(TOTAL, _claims()).sequence == [1, 0, 2]


def test_competing_maximal_claims_are_unsafe():
    claims = [ProcessClaim(c.pid, c.allocation, TOTAL) for c in _claims()]
    result = check_safety(TOTAL, claims)
    assert not result.safe
    assert result.sequence == []
    assert result.available == (5, 4, 5)


def test_no_processes_is_trivially_safe():
    result = check_safety(TOTAL, [])
    assert result.safe
    assert result.sequence == []
    assert result.available == TOTAL


def test_repeatable():
    assert check_safety(TOTAL, _claims()) == check_safety(TOTAL, _claims())


def test_allocation_above_maximum_rejected():
    claims = _claims() + [ProcessClaim(3, allocation=(1, 0, 0), maximum=(0, 0, 0))]
    with pytest.raises(ConfigurationError):
        check_safety(TOTAL, claims)


def test_over_committed_total_rejected():
    with pytest.raises(ConfigurationError):
        check_safety((4, 5, 7), _claims())


def test_vector_length_mismatch_rejected():
    with pytest.raises(ConfigurationError):
        check_safety(TOTAL, [ProcessClaim(0, allocation=(0, 1), maximum=(1, 1))])


def test_duplicate_pid_rejected():
    with pytest.raises(ConfigurationError):
        check_safety(TOTAL, _claims() + [ProcessClaim(0, (0, 0, 0), (1, 1, 1))])


def test_request_granted_when_state_stays_safe():
    decision = evaluate_request(TOTAL, _claims(), pid=1, request=(1, 0, 2))
    assert decision.granted
    assert decision.safety.safe
    assert decision.safety.available == (4, 4, 3)


def test_request_denied_when_state_would_be_unsafe():
    # Giving P0 most of B leaves nobody able to finish.
    decision = evaluate_request(TOTAL, _claims(), pid=0, request=(5, 4, 3))
    assert not decision.granted
    assert decision.safety is not None and not decision.safety.safe


def test_request_waits_when_resources_unavailable():
    claims = [ProcessClaim(0, (0, 0, 0), (10, 5, 7)), ProcessClaim(1, (8, 0, 0), (9, 0, 0))]
    decision = evaluate_request(TOTAL, claims, pid=0, request=(3, 0, 0))
    assert not decision.granted
    assert decision.safety is None


def test_request_above_need_rejected():
    with pytest.raises(ConfigurationError):
        evaluate_request(TOTAL, _claims(), pid=1, request=(2, 0, 0))


def test_request_does_not_touch_callers_claims():
    claims = _claims()
    evaluate_request(TOTAL, claims, pid=1, request=(1, 0, 2))
    assert claims == _claims()
