"""
Event types and the future event list for the simulation engine.

Defines the events that drive the discrete-event simulation and the
min-heap queue that owns the simulated clock.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from ..network import Direction


class EventType(Enum):
    """Types of events in the simulation."""

    TRAIN_ARRIVAL = auto()  # Train reaches a station
    TRAIN_DEPARTURE = auto()  # Train boards and leaves for the next station
    TRAIN_RELEASE = auto()  # Staged train is put on the line
    CUSTOMER_ARRIVAL = auto()  # Customer walks into a station
    SENTINEL = auto()  # Marks the simulation horizon


@dataclass(order=True)
class Event:
    """
    A simulation event.

    Events are ordered by time only, so equal-time events have no defined
    relative order.
    """

    time: float  # Simulated minutes
    event_type: EventType = field(compare=False)
    train_id: Optional[int] = field(default=None, compare=False)
    station: Optional[int] = field(default=None, compare=False)
    direction: Optional[Direction] = field(default=None, compare=False)


class QueueExhaustedError(RuntimeError):
    """Raised when an event is requested from an empty queue."""


class EventQueue:
    """
    Future event list and simulation clock.

    The clock only moves when an event is popped. Ties between events with
    the same time come out in whatever order the heap yields them: repeatable
    for a given sequence of pushes, but not first-in-first-out.
    """

    def __init__(self):
        self._heap: list[Event] = []
        self.now: float = 0.0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def schedule(self, event: Event) -> None:
        """Insert an event; it may not be earlier than the current clock."""
        if event.time < self.now:
            raise ValueError(
                f"Cannot schedule {event.event_type.name} at {event.time} "
                f"before current time {self.now}"
            )
        heapq.heappush(self._heap, event)

    def pop_next(self) -> Event:
        """Remove the earliest event and advance the clock to its time."""
        if not self._heap:
            raise QueueExhaustedError(
                f"Future event list is empty at t={self.now}; "
                "the horizon sentinel was never scheduled"
            )
        event = heapq.heappop(self._heap)
        self.now = event.time
        return event

    def peek_time(self) -> Optional[float]:
        return self._heap[0].time if self._heap else None

    def clear(self) -> None:
        self._heap = []


def create_train_arrival_event(time: float, train_id: int, station: int) -> Event:
    """Create a train arrival event."""
    return Event(
        time=time,
        event_type=EventType.TRAIN_ARRIVAL,
        train_id=train_id,
        station=station,
    )


def create_train_departure_event(
    time: float, train_id: int, next_station: int
) -> Event:
    """Create a train departure event towards `next_station`."""
    return Event(
        time=time,
        event_type=EventType.TRAIN_DEPARTURE,
        train_id=train_id,
        station=next_station,
    )


def create_train_release_event(time: float, direction: Direction) -> Event:
    """Create a train release event."""
    return Event(time=time, event_type=EventType.TRAIN_RELEASE, direction=direction)


def create_customer_arrival_event(time: float, station: int) -> Event:
    """Create a customer arrival event."""
    return Event(time=time, event_type=EventType.CUSTOMER_ARRIVAL, station=station)


def create_sentinel_event(time: float) -> Event:
    """Create the end-of-horizon marker."""
    return Event(time=time, event_type=EventType.SENTINEL)
