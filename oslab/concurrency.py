"""
Teaching models for two classic synchronization problems.

Nothing here uses real threads or locks. Each model is a small state machine
advanced by explicit calls, with randomness drawn from an injected
``random.Random`` so runs can be replayed.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional, Tuple

from .config import BUFFER_CAPACITY, EVENT_LOG_LENGTH, PHILOSOPHER_COUNT
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BufferEvent:
    kind: str  # "producer", "consumer" or "error"
    message: str
    item: Optional[int] = None


class BoundedBuffer:
    """
    Producer-consumer over a fixed-size FIFO buffer.

    Producing into a full buffer or consuming from an empty one does not
    change the buffer; it records an error event instead (the thread would
    block on the semaphore).
    """

    def __init__(self, capacity: int = BUFFER_CAPACITY, log_length: int = EVENT_LOG_LENGTH) -> None:
        if capacity < 1:
            raise ConfigurationError(f"Buffer capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._items: Deque[int] = deque()
        self._events: Deque[BufferEvent] = deque(maxlen=log_length)

    @property
    def items(self) -> Tuple[int, ...]:
        return tuple(self._items)

    @property
    def events(self) -> List[BufferEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._events))

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def is_empty(self) -> bool:
        return not self._items

    def _record(self, event: BufferEvent) -> BufferEvent:
        self._events.append(event)
        logger.debug(event.message)
        return event

    def produce(self, item: int) -> BufferEvent:
        if self.is_full():
            return self._record(BufferEvent("error", "Producer: buffer full, blocked on empty-slot semaphore"))
        self._items.append(item)
        return self._record(BufferEvent("producer", f"Producer: produced item #{item}", item))

    def consume(self) -> BufferEvent:
        if self.is_empty():
            return self._record(BufferEvent("error", "Consumer: buffer empty, blocked on full-slot semaphore"))
        item = self._items.popleft()
        return self._record(BufferEvent("consumer", f"Consumer: consumed item #{item}", item))

    def step(self, rng: random.Random) -> BufferEvent:
        """Auto-pilot: produce or consume with equal odds."""
        if rng.random() > 0.5:
            return self.produce(rng.randrange(99))
        return self.consume()


class PhilosopherState(Enum):
    THINKING = "thinking"
    HUNGRY = "hungry"
    EATING = "eating"


class DiningTable:
    """
    Dining philosophers around a round table.

    Every step each philosopher may move thinking -> hungry -> eating ->
    thinking. A hungry philosopher only picks up the forks when neither
    neighbour is eating, so neighbours never eat together.
    """

    BECOME_HUNGRY = 0.7
    START_EATING = 0.5
    STOP_EATING = 0.6

    def __init__(self, count: int = PHILOSOPHER_COUNT) -> None:
        if count < 2:
            raise ConfigurationError(f"Need at least 2 philosophers, got {count}")
        self.states: List[PhilosopherState] = [PhilosopherState.THINKING] * count

    def __len__(self) -> int:
        return len(self.states)

    def neighbours(self, seat: int) -> Tuple[int, int]:
        n = len(self.states)
        return (seat - 1) % n, (seat + 1) % n

    def can_eat(self, seat: int) -> bool:
        return all(self.states[s] is not PhilosopherState.EATING for s in self.neighbours(seat))

    def step(self, rng: random.Random) -> List[PhilosopherState]:
        for seat, state in enumerate(self.states):
            roll = rng.random()
            if state is PhilosopherState.THINKING and roll > self.BECOME_HUNGRY:
                self.states[seat] = PhilosopherState.HUNGRY
            elif state is PhilosopherState.HUNGRY and roll > self.START_EATING and self.can_eat(seat):
                self.states[seat] = PhilosopherState.EATING
            elif state is PhilosopherState.EATING and roll > self.STOP_EATING:
                self.states[seat] = PhilosopherState.THINKING
        return list(self.states)
