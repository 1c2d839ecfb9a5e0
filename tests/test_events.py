"""
Tests for railsim/simulation/events.py module.

Tests cover:
- EventType enum
- Event ordering
- EventQueue clock, ordering, ties and exhaustion
- Event factory functions
"""

import pytest

from railsim.network import Direction
from railsim.simulation.events import (
    Event,
    EventQueue,
    EventType,
    QueueExhaustedError,
    create_customer_arrival_event,
    create_sentinel_event,
    create_train_arrival_event,
    create_train_departure_event,
    create_train_release_event,
)


class TestEventType:
    """Tests for EventType enum."""

    def test_all_types_exist(self):
        expected_types = [
            "TRAIN_ARRIVAL",
            "TRAIN_DEPARTURE",
            "TRAIN_RELEASE",
            "CUSTOMER_ARRIVAL",
            "SENTINEL",
        ]
        for type_name in expected_types:
            assert hasattr(EventType, type_name)

    def test_type_values_unique(self):
        values = [t.value for t in EventType]
        assert len(values) == len(set(values))


class TestEvent:
    """Tests for Event ordering."""

    def test_ordered_by_time(self):
        early = create_sentinel_event(1.0)
        late = create_customer_arrival_event(2.0, station=0)
        assert early < late

    def test_payload_ignored_in_comparison(self):
        a = create_train_arrival_event(5.0, train_id=0, station=1)
        b = create_customer_arrival_event(5.0, station=3)
        assert a == b
        assert not a < b and not b < a


class TestEventQueue:
    """Tests for EventQueue."""

    def test_pops_in_time_order(self):
        queue = EventQueue()
        for t in [5.0, 1.0, 3.0, 2.0, 4.0]:
            queue.schedule(create_sentinel_event(t))

        times = [queue.pop_next().time for _ in range(5)]
        assert times == [1.0, 2.0, 3.0, 4.0, 5.0]

    def test_clock_follows_popped_event(self):
        queue = EventQueue()
        queue.schedule(create_customer_arrival_event(2.5, station=0))
        assert queue.now == 0.0

        queue.pop_next()
        assert queue.now == 2.5

    def test_empty_pop_raises(self):
        queue = EventQueue()
        with pytest.raises(QueueExhaustedError):
            queue.pop_next()

    def test_cannot_schedule_in_the_past(self):
        queue = EventQueue()
        queue.schedule(create_sentinel_event(10.0))
        queue.pop_next()
        with pytest.raises(ValueError):
            queue.schedule(create_sentinel_event(9.0))

    def test_schedule_at_current_time_allowed(self):
        queue = EventQueue()
        queue.schedule(create_sentinel_event(3.0))
        queue.pop_next()
        queue.schedule(create_sentinel_event(3.0))
        assert queue.pop_next().time == 3.0

    def test_len_and_bool(self):
        queue = EventQueue()
        assert not queue
        queue.schedule(create_sentinel_event(1.0))
        assert queue
        assert len(queue) == 1
        assert queue.peek_time() == 1.0

    def test_ties_all_pop_before_later_events(self):
        """Equal-time events have no defined relative order, only a time order."""
        queue = EventQueue()
        queue.schedule(create_sentinel_event(2.0))
        tied = [create_customer_arrival_event(1.0, station=s) for s in range(5)]
        for event in tied:
            queue.schedule(event)

        popped = [queue.pop_next() for _ in range(5)]
        assert all(e.time == 1.0 for e in popped)
        assert sorted(e.station for e in popped) == list(range(5))
        assert queue.pop_next().event_type is EventType.SENTINEL

    def test_tie_order_repeatable_for_same_pushes(self):
        """Tie order is arbitrary but identical for identical push sequences."""

        def drain():
            queue = EventQueue()
            for s in [3, 0, 4, 1, 2]:
                queue.schedule(create_customer_arrival_event(1.0, station=s))
            return [queue.pop_next().station for _ in range(5)]

        assert drain() == drain()

    def test_clear(self):
        queue = EventQueue()
        queue.schedule(create_sentinel_event(1.0))
        queue.clear()
        assert len(queue) == 0


class TestEventFactories:
    """Tests for event factory functions."""

    def test_train_arrival(self):
        event = create_train_arrival_event(3.0, train_id=2, station=4)
        assert event.event_type is EventType.TRAIN_ARRIVAL
        assert (event.time, event.train_id, event.station) == (3.0, 2, 4)

    def test_train_departure_carries_next_station(self):
        event = create_train_departure_event(3.5, train_id=2, next_station=5)
        assert event.event_type is EventType.TRAIN_DEPARTURE
        assert event.station == 5

    def test_train_release(self):
        event = create_train_release_event(0.0, Direction.WEST)
        assert event.event_type is EventType.TRAIN_RELEASE
        assert event.direction is Direction.WEST
        assert event.train_id is None

    def test_sentinel(self):
        event = create_sentinel_event(1200.0)
        assert isinstance(event, Event)
        assert event.event_type is EventType.SENTINEL
