"""
Customer entity and destination sampling.

A customer is created when it walks into a station, waits in the queue for
its direction, rides a train, and leaves the system at its destination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..network import Direction


@dataclass
class Customer:
    """A rider travelling between two stations."""

    arrival_time: float  # Time the customer entered the origin station
    origin: int
    destination: int
    board_time: Optional[float] = None
    exit_time: Optional[float] = None

    def __post_init__(self):
        if self.origin == self.destination:
            raise ValueError(
                f"Customer destination must differ from origin {self.origin}"
            )

    @property
    def direction(self) -> Direction:
        return Direction.between(self.origin, self.destination)

    @property
    def wait_time(self) -> Optional[float]:
        """Minutes spent in the station queue, once boarded."""
        if self.board_time is None:
            return None
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> Optional[float]:
        """Minutes spent on the train, once alighted."""
        if self.board_time is None or self.exit_time is None:
            return None
        return self.exit_time - self.board_time


def draw_destination(
    rng: np.random.Generator, origin: int, n_stations: int
) -> int:
    """Uniformly random station index other than `origin`."""
    if n_stations < 2:
        raise ValueError("Need at least two stations to pick a destination")
    destination = int(rng.integers(0, n_stations - 1))
    if destination >= origin:
        destination += 1
    return destination
