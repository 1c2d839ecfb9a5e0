"""
Line topology and passenger demand model.

A line is an ordered sequence of stations running west (index 0) to east
(last index), with a travel time for every segment between neighbours and
a time-varying arrival rate at each station.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .agents.customer import Customer


class Direction(IntEnum):
    """Direction of travel along the line."""

    EAST = 1  # Increasing station index
    WEST = -1  # Decreasing station index

    @property
    def opposite(self) -> Direction:
        return Direction.WEST if self is Direction.EAST else Direction.EAST

    @classmethod
    def between(cls, origin: int, destination: int) -> Direction:
        """Direction a rider takes from origin to destination."""
        if origin == destination:
            raise ValueError(f"Origin and destination are both station {origin}")
        return cls.EAST if destination > origin else cls.WEST


@dataclass
class Station:
    """A station with one FIFO queue of waiting customers per direction."""

    name: str
    index: int
    base_rate: float  # Mean customer arrivals per minute before demand scaling
    east_queue: deque[Customer] = field(default_factory=deque)
    west_queue: deque[Customer] = field(default_factory=deque)

    def queue_for(self, direction: Direction) -> deque[Customer]:
        return self.east_queue if direction is Direction.EAST else self.west_queue

    def enqueue(self, customer: Customer) -> None:
        self.queue_for(customer.direction).append(customer)

    def waiting(self, direction: Optional[Direction] = None) -> int:
        """Number of customers waiting, in one direction or both."""
        if direction is None:
            return len(self.east_queue) + len(self.west_queue)
        return len(self.queue_for(direction))


@dataclass
class DemandProfile:
    """
    Hourly demand multipliers shared by every station.

    Knots sit on hour boundaries; between knots the multiplier is linearly
    interpolated.
    """

    multipliers: list[float]
    minutes_per_knot: float = 60.0

    def __post_init__(self):
        if len(self.multipliers) < 2:
            raise ValueError("Demand profile needs at least two knot points")
        if any(m < 0 for m in self.multipliers):
            raise ValueError("Demand multipliers must be non-negative")

    @property
    def span(self) -> float:
        """Minutes covered between the first and last knot."""
        return (len(self.multipliers) - 1) * self.minutes_per_knot

    def multiplier_at(self, time: float) -> float:
        """Piecewise-linear multiplier at the given simulated minute."""
        if time <= 0:
            return self.multipliers[0]
        if time >= self.span:
            return self.multipliers[-1]

        hour = math.floor(time / self.minutes_per_knot)
        frac = (time % self.minutes_per_knot) / self.minutes_per_knot
        return (1 - frac) * self.multipliers[hour] + frac * self.multipliers[hour + 1]


@dataclass
class Line:
    """
    A single unbranched, bidirectional line.

    Holds the stations, segment travel times, demand profile and the two
    staging pools of idle trains waiting to be released.
    """

    name: str
    stations: list[Station]
    travel_times: list[float]  # Minutes; travel_times[i] joins station i and i + 1
    demand: DemandProfile
    east_pool: deque[int] = field(default_factory=deque)
    west_pool: deque[int] = field(default_factory=deque)

    def __post_init__(self):
        if len(self.stations) < 2:
            raise ValueError("A line needs at least two stations")
        if len(self.travel_times) != len(self.stations) - 1:
            raise ValueError(
                f"Expected {len(self.stations) - 1} travel times for "
                f"{len(self.stations)} stations, got {len(self.travel_times)}"
            )
        if any(t <= 0 for t in self.travel_times):
            raise ValueError("Segment travel times must be positive")

    def __len__(self) -> int:
        return len(self.stations)

    @property
    def last_index(self) -> int:
        return len(self.stations) - 1

    def station_name(self, index: int) -> str:
        return self.stations[index].name

    def pool(self, direction: Direction) -> deque[int]:
        """Staging pool of trains waiting to start a trip in this direction."""
        return self.east_pool if direction is Direction.EAST else self.west_pool

    def origin_terminal(self, direction: Direction) -> int:
        """Station where a trip in this direction starts."""
        return 0 if direction is Direction.EAST else self.last_index

    def is_terminal_for(self, station: int, direction: Direction) -> bool:
        """True if a train heading in `direction` ends its trip at `station`."""
        if direction is Direction.EAST:
            return station == self.last_index
        return station == 0

    def next_station(self, station: int, direction: Direction) -> int:
        nxt = station + int(direction)
        if not 0 <= nxt <= self.last_index:
            raise IndexError(f"No station beyond {station} heading {direction.name}")
        return nxt

    def travel_time(self, direction: Direction, at_station: int) -> float:
        """Minutes to traverse the segment leaving `at_station` in `direction`."""
        segment = at_station if direction is Direction.EAST else at_station - 1
        if not 0 <= segment < len(self.travel_times):
            raise IndexError(
                f"No segment leaving station {at_station} heading {direction.name}"
            )
        return self.travel_times[segment]

    def current_rate(self, station: int, time: float) -> float:
        """
        Effective arrival rate (customers per minute) at `station` and `time`.

        Recomputed on every call from the station's base rate and the
        interpolated demand multiplier.

        The engine samples this once per arrival and draws the next gap from
        an exponential at that rate. Without thinning this only approximates
        a non-homogeneous Poisson process and lags steep demand ramps.
        """
        return self.stations[station].base_rate * self.demand.multiplier_at(time)

    def waiting(self, direction: Direction) -> int:
        """Customers waiting line-wide for trains in `direction`."""
        return sum(s.waiting(direction) for s in self.stations)


def create_line(
    name: str,
    station_names: list[str],
    travel_times: list[float],
    base_rates: list[float],
    multipliers: list[float],
) -> Line:
    """Build a Line from parallel lists of station attributes."""
    if len(base_rates) != len(station_names):
        raise ValueError(
            f"Expected {len(station_names)} base rates, got {len(base_rates)}"
        )
    stations = [
        Station(name=station_name, index=i, base_rate=rate)
        for i, (station_name, rate) in enumerate(zip(station_names, base_rates))
    ]
    return Line(
        name=name,
        stations=stations,
        travel_times=list(travel_times),
        demand=DemandProfile(multipliers=list(multipliers)),
    )
