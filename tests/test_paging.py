import random

import pytest

from oslab.errors import ConfigurationError
from oslab.paging import compare_policies, parse_reference_string, run_paging, simulate
from oslab.policies import ReplacementPolicy

REFS = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2]


def test_fifo_textbook_string():
    steps = simulate(REFS, 3, ReplacementPolicy.FIFO)
    assert len(steps) == len(REFS)
    assert steps[-1].faults == 10
    assert steps[4].is_hit
    assert steps[4].replaced_slot is None
    assert steps[3].frames == (2, 0, 1)
    assert steps[3].evicted_page == 7
    assert steps[-1].frames == (0, 2, 3)


def test_lru_textbook_string():
    result = run_paging(REFS, 3, "lru")
    assert result.faults == 9
    assert result.final_frames == (0, 3, 2)


def test_optimal_textbook_string():
    result = run_paging(REFS, 3, ReplacementPolicy.OPTIMAL)
    assert result.faults == 7
    assert result.hits == 6


def test_cold_start_fills_empty_slots_in_order():
    steps = simulate([5, 6, 7], 3, ReplacementPolicy.LRU)
    assert [s.replaced_slot for s in steps] == [0, 1, 2]
    assert [s.frames for s in steps] == [(5, None, None), (5, 6, None), (5, 6, 7)]
    assert all(s.evicted_page is None for s in steps)


def test_fifo_ignores_recent_hits():
    steps = simulate([1, 2, 3, 1, 4], 3, ReplacementPolicy.FIFO)
    # 1 was loaded first, so it goes even though it was just referenced.
    assert steps[-1].evicted_page == 1
    assert steps[-1].replaced_slot == 0


def test_lru_evicts_least_recently_referenced():
    steps = simulate([1, 2, 3, 1, 4], 3, ReplacementPolicy.LRU)
    assert steps[-1].evicted_page == 2
    assert steps[-1].frames == (1, 4, 3)


def test_mru_evicts_most_recently_referenced():
    steps = simulate([1, 2, 3, 4], 3, ReplacementPolicy.MRU)
    assert steps[-1].evicted_page == 3
    assert steps[-1].replaced_slot == 2

    steps = simulate([1, 2, 3, 1, 4], 3, ReplacementPolicy.MRU)
    assert steps[-1].evicted_page == 1


def test_optimal_prefers_page_never_used_again():
    steps = simulate([1, 2, 3, 4, 1, 2], 3, ReplacementPolicy.OPTIMAL)
    assert steps[3].evicted_page == 3


def test_optimal_tie_between_unused_pages_takes_lowest_slot():
    steps = simulate([1, 2, 3, 4], 3, ReplacementPolicy.OPTIMAL)
    assert steps[3].replaced_slot == 0
    assert steps[3].frames == (4, 2, 3)


def test_optimal_never_worse_than_other_policies():
    rng = random.Random(1234)
    for _ in range(200):
        refs = [rng.randrange(6) for _ in range(rng.randrange(1, 25))]
        capacity = rng.randrange(1, 5)
        results = compare_policies(refs, capacity)
        optimal = results[ReplacementPolicy.OPTIMAL].faults
        assert all(optimal <= r.faults for r in results.values())


def test_frame_occupancy_never_exceeds_capacity():
    for policy in ReplacementPolicy:
        for step in simulate(REFS, 2, policy):
            assert len(step.frames) == 2
            assert step.page in step.frames


def test_single_frame():
    result = run_paging([1, 1, 2, 1], 1, "fifo")
    assert [s.is_hit for s in result.steps] == [False, True, False, False]
    assert result.faults == 3


def test_empty_reference_string():
    result = run_paging([], 3, "optimal")
    assert result.steps == []
    assert result.faults == 0
    assert result.hit_ratio == 0.0
    assert result.final_frames == (None, None, None)


@pytest.mark.parametrize("capacity", [0, -2])
def test_capacity_must_be_positive(capacity):
    with pytest.raises(ConfigurationError):
        simulate([1, 2], capacity, "fifo")


def test_unknown_policy():
    with pytest.raises(ConfigurationError):
        simulate([1], 1, "clock")


def test_repeatable_and_input_untouched():
    refs = list(REFS)
    assert simulate(refs, 3, "lru") == simulate(refs, 3, "lru")
    assert refs == REFS


def test_parse_reference_string():
    assert parse_reference_string("7, 0,1  2,,3") == [7, 0, 1, 2, 3]
    assert parse_reference_string("   ") == []
    with pytest.raises(ValueError):
        parse_reference_string("1,x")


def test_policy_names():
    assert ReplacementPolicy.parse("opt") is ReplacementPolicy.OPTIMAL
    assert ReplacementPolicy.parse("Lru") is ReplacementPolicy.LRU
