import random

import pytest

from oslab.concurrency import BoundedBuffer, DiningTable, PhilosopherState
from oslab.errors import ConfigurationError


def test_buffer_is_fifo():
    buffer = BoundedBuffer(capacity=3)
    buffer.produce(4)
    buffer.produce(8)
    event = buffer.consume()
    assert event.kind == "consumer"
    assert event.item == 4
    assert buffer.items == (8,)


def test_overflow_blocks_producer():
    buffer = BoundedBuffer(capacity=2)
    buffer.produce(1)
    buffer.produce(2)
    event = buffer.produce(3)
    assert event.kind == "error"
    assert buffer.items == (1, 2)


def test_underflow_blocks_consumer():
    buffer = BoundedBuffer()
    event = buffer.consume()
    assert event.kind == "error"
    assert event.item is None
    assert buffer.is_empty()


def test_event_log_is_bounded_and_newest_first():
    buffer = BoundedBuffer(capacity=10, log_length=3)
    for item in range(5):
        buffer.produce(item)
    assert [e.item for e in buffer.events] == [4, 3, 2]


def test_auto_pilot_never_exceeds_capacity():
    buffer = BoundedBuffer(capacity=5)
    rng = random.Random(7)
    for _ in range(200):
        buffer.step(rng)
        assert 0 <= len(buffer.items) <= 5


def test_bad_capacity():
    with pytest.raises(ConfigurationError):
        BoundedBuffer(capacity=0)


def test_neighbours_wrap_around():
    table = DiningTable(5)
    assert table.neighbours(0) == (4, 1)
    assert table.neighbours(4) == (3, 0)


def test_neighbours_never_eat_together():
    table = DiningTable(5)
    rng = random.Random(42)
    seen_eating = False
    for _ in range(300):
        states = table.step(rng)
        for seat, state in enumerate(states):
            if state is PhilosopherState.EATING:
                seen_eating = True
                left, right = table.neighbours(seat)
                assert states[left] is not PhilosopherState.EATING
                assert states[right] is not PhilosopherState.EATING
    assert seen_eating


def test_same_seed_same_run():
    a, b = DiningTable(), DiningTable()
    ra, rb = random.Random(3), random.Random(3)
    assert [a.step(ra) for _ in range(20)] == [b.step(rb) for _ in range(20)]
