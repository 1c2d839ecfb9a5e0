"""
Train entity and its lifecycle.

A train is STAGED in a direction pool until released, then alternates
between AT_STATION and IN_TRANSIT until it reaches the terminal ahead of
it, where it is disabled and staged for the opposite direction.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from ..network import Direction
from .customer import Customer

# Occupancy fraction above which a train counts as running full
FULL_THRESHOLD = 0.99


class TrainState(Enum):
    """Lifecycle states of a train."""

    STAGED = auto()
    AT_STATION = auto()
    IN_TRANSIT = auto()


@dataclass
class Train:
    """A train with a fixed seating capacity and utilization accumulators."""

    train_id: int
    capacity: int = 100
    active: bool = False
    at_station: int = 0  # Current station, or the one being approached
    in_motion: bool = False
    direction: Direction = Direction.EAST
    passengers: list[Customer] = field(default_factory=list)

    # Utilization tracking, one sample per departure
    utilization_total: float = 0.0
    utilization_samples: int = 0
    utilization_max: float = 0.0
    full_samples: int = 0

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(f"Train capacity must be positive, got {self.capacity}")

    @property
    def state(self) -> TrainState:
        if not self.active:
            return TrainState.STAGED
        return TrainState.IN_TRANSIT if self.in_motion else TrainState.AT_STATION

    @property
    def load(self) -> int:
        return len(self.passengers)

    @property
    def occupancy(self) -> float:
        return len(self.passengers) / self.capacity

    @property
    def average_utilization(self) -> Optional[float]:
        if self.utilization_samples == 0:
            return None
        return self.utilization_total / self.utilization_samples

    @property
    def fraction_full(self) -> Optional[float]:
        """Share of departures at which the train was running full."""
        if self.utilization_samples == 0:
            return None
        return self.full_samples / self.utilization_samples

    # Lifecycle transitions

    def release(self, direction: Direction, station: int) -> None:
        """Activate a staged train at the start of a trip."""
        self.active = True
        self.in_motion = False
        self.direction = direction
        self.at_station = station

    def arrive_at(self, station: int) -> None:
        self.in_motion = False
        self.at_station = station

    def leave_to(self, station: int) -> None:
        self.in_motion = True
        self.at_station = station

    def disable(self) -> None:
        """Take the train off the line at the end of a trip."""
        self.in_motion = False
        self.active = False

    # Passenger exchange

    def board(self, queue: deque[Customer], now: float) -> list[Customer]:
        """
        Board customers from the front of `queue` until it empties or the
        train is full. Returns the boarded customers in boarding order.
        """
        boarded = []
        while queue and len(self.passengers) < self.capacity:
            customer = queue.popleft()
            customer.board_time = now
            self.passengers.append(customer)
            boarded.append(customer)
        return boarded

    def alight(self, station: int, now: float) -> list[Customer]:
        """Remove and return every passenger whose destination is `station`."""
        leaving = [c for c in self.passengers if c.destination == station]
        if leaving:
            self.passengers = [c for c in self.passengers if c.destination != station]
            for customer in leaving:
                customer.exit_time = now
        return leaving

    def record_utilization(self, threshold: float = FULL_THRESHOLD) -> float:
        """Record the current occupancy as a utilization sample."""
        occupancy = self.occupancy
        self.utilization_total += occupancy
        self.utilization_samples += 1
        self.utilization_max = max(self.utilization_max, occupancy)
        if occupancy > threshold:
            self.full_samples += 1
        return occupancy
