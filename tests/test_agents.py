"""
Tests for railsim/agents module.

Tests cover:
- Customer dataclass and derived times
- draw_destination sampling
- Train lifecycle, boarding, alighting and utilization tracking
"""

from collections import deque

import numpy as np
import pytest

from railsim.agents import FULL_THRESHOLD, Customer, Train, TrainState, draw_destination
from railsim.network import Direction


class TestCustomer:
    """Tests for Customer dataclass."""

    def test_default_values(self):
        customer = Customer(arrival_time=3.0, origin=1, destination=4)
        assert customer.board_time is None
        assert customer.exit_time is None
        assert customer.wait_time is None
        assert customer.ride_time is None

    def test_direction(self):
        assert Customer(arrival_time=0.0, origin=1, destination=4).direction is Direction.EAST
        assert Customer(arrival_time=0.0, origin=4, destination=1).direction is Direction.WEST

    def test_same_origin_and_destination_rejected(self):
        with pytest.raises(ValueError):
            Customer(arrival_time=0.0, origin=2, destination=2)

    def test_wait_and_ride_time(self):
        customer = Customer(arrival_time=1.0, origin=0, destination=2)
        customer.board_time = 4.0
        customer.exit_time = 10.0
        assert customer.wait_time == pytest.approx(3.0)
        assert customer.ride_time == pytest.approx(6.0)


class TestDrawDestination:
    """Tests for draw_destination."""

    def test_never_returns_origin(self):
        rng = np.random.default_rng(0)
        for origin in range(5):
            draws = {draw_destination(rng, origin, 5) for _ in range(200)}
            assert origin not in draws
            assert draws == set(range(5)) - {origin}

    def test_two_stations(self):
        rng = np.random.default_rng(1)
        assert all(draw_destination(rng, 0, 2) == 1 for _ in range(20))
        assert all(draw_destination(rng, 1, 2) == 0 for _ in range(20))

    def test_reproducible(self):
        a = [draw_destination(np.random.default_rng(42), 3, 10) for _ in range(3)]
        b = [draw_destination(np.random.default_rng(42), 3, 10) for _ in range(3)]
        assert a == b

    def test_single_station_rejected(self):
        with pytest.raises(ValueError):
            draw_destination(np.random.default_rng(0), 0, 1)


def riders(n, origin=0, destination=3, arrival_time=0.0):
    return deque(
        Customer(arrival_time=arrival_time, origin=origin, destination=destination)
        for _ in range(n)
    )


class TestTrainLifecycle:
    """Tests for Train state transitions."""

    def test_starts_staged(self):
        train = Train(train_id=0)
        assert train.state is TrainState.STAGED
        assert train.capacity == 100
        assert train.load == 0

    def test_release_arrive_leave_disable(self):
        train = Train(train_id=1)

        train.release(Direction.WEST, 5)
        assert train.state is TrainState.AT_STATION
        assert train.direction is Direction.WEST
        assert train.at_station == 5

        train.leave_to(4)
        assert train.state is TrainState.IN_TRANSIT
        assert train.at_station == 4

        train.arrive_at(4)
        assert train.state is TrainState.AT_STATION

        train.disable()
        assert train.state is TrainState.STAGED

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            Train(train_id=0, capacity=0)


class TestTrainBoarding:
    """Tests for Train.board and Train.alight."""

    def test_boards_everyone_when_room(self):
        train = Train(train_id=0, capacity=10)
        queue = riders(4)

        boarded = train.board(queue, now=2.0)

        assert len(boarded) == 4
        assert not queue
        assert all(c.board_time == 2.0 for c in boarded)

    def test_stops_at_capacity_and_leaves_rest_queued(self):
        train = Train(train_id=0, capacity=3)
        queue = riders(5)
        first_three = list(queue)[:3]

        boarded = train.board(queue, now=1.0)

        assert boarded == first_three
        assert train.load == 3
        assert len(queue) == 2
        assert all(c.board_time is None for c in queue)

    def test_full_train_boards_nobody(self):
        train = Train(train_id=0, capacity=2)
        train.board(riders(2), now=0.0)
        queue = riders(3)
        assert train.board(queue, now=1.0) == []
        assert len(queue) == 3

    def test_alight_filters_by_destination(self):
        train = Train(train_id=0, capacity=10)
        to_two = riders(2, destination=2)
        to_three = riders(3, destination=3)
        train.board(deque([to_three[0], to_two[0], to_three[1], to_two[1], to_three[2]]), now=0.0)

        leaving = train.alight(2, now=5.0)

        assert sorted(id(c) for c in leaving) == sorted(id(c) for c in to_two)
        assert all(c.exit_time == 5.0 for c in leaving)
        assert train.load == 3
        assert all(c.destination == 3 for c in train.passengers)

    def test_alight_nobody(self):
        train = Train(train_id=0, capacity=10)
        train.board(riders(2, destination=3), now=0.0)
        assert train.alight(1, now=2.0) == []
        assert train.load == 2


class TestTrainUtilization:
    """Tests for utilization accumulators."""

    def test_no_samples_is_undefined(self):
        train = Train(train_id=0)
        assert train.average_utilization is None
        assert train.fraction_full is None

    def test_records_samples(self):
        train = Train(train_id=0, capacity=4)
        train.record_utilization()
        train.board(riders(2), now=0.0)
        train.record_utilization()

        assert train.utilization_samples == 2
        assert train.average_utilization == pytest.approx(0.25)
        assert train.utilization_max == pytest.approx(0.5)
        assert train.full_samples == 0

    def test_full_above_threshold(self):
        train = Train(train_id=0, capacity=4)
        train.board(riders(4), now=0.0)
        occupancy = train.record_utilization()

        assert occupancy == 1.0
        assert train.full_samples == 1
        assert train.fraction_full == 1.0

    def test_exactly_threshold_is_not_full(self):
        train = Train(train_id=0, capacity=100)
        train.board(riders(99), now=0.0)
        train.record_utilization(FULL_THRESHOLD)
        assert train.full_samples == 0
