"""
Statistics collection for simulation runs.

Handlers feed raw per-event counts into the aggregator while the simulation
runs; derived metrics are only computed at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from ..agents.customer import Customer
    from ..agents.train import Train


@dataclass
class TripRecord:
    """Record of a completed customer trip."""

    origin: int
    destination: int
    arrival_time: float
    board_time: float
    exit_time: float

    @property
    def wait_time(self) -> float:
        return self.board_time - self.arrival_time

    @property
    def ride_time(self) -> float:
        return self.exit_time - self.board_time


class StatisticsAggregator:
    """
    Running totals and extrema accumulated by event handlers.

    Nothing here is read back by the handlers, so statistics never feed into
    dispatch decisions.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Reset all counters."""
        self.generated = 0
        self.boarded = 0
        self.departed = 0
        self.missed_boardings = 0
        self.release_misses = 0

        self.total_wait = 0.0
        self.max_wait = 0.0
        self.max_wait_at: Optional[float] = None  # Boarding time of the longest wait
        self.total_ride = 0.0

        self.trips: list[TripRecord] = []

    def record_generated(self) -> None:
        """Record a customer entering a station."""
        self.generated += 1

    def record_boarding(self, customer: Customer) -> float:
        """Record a boarding and return the customer's wait."""
        wait = customer.board_time - customer.arrival_time
        self.boarded += 1
        self.total_wait += wait
        if self.max_wait_at is None or wait > self.max_wait:
            self.max_wait = wait
            self.max_wait_at = customer.board_time
        return wait

    def record_alighting(self, customer: Customer) -> None:
        """Record a customer leaving the system at its destination."""
        self.departed += 1
        self.total_ride += customer.exit_time - customer.board_time
        self.trips.append(
            TripRecord(
                origin=customer.origin,
                destination=customer.destination,
                arrival_time=customer.arrival_time,
                board_time=customer.board_time,
                exit_time=customer.exit_time,
            )
        )

    def record_missed(self, count: int) -> None:
        """Record customers left on the platform by a full train."""
        self.missed_boardings += count

    def record_release_miss(self) -> None:
        """Record a release that found no staged train."""
        self.release_misses += 1

    @property
    def average_wait(self) -> Optional[float]:
        if self.boarded == 0:
            return None
        return self.total_wait / self.boarded

    @property
    def average_ride(self) -> Optional[float]:
        if self.departed == 0:
            return None
        return self.total_ride / self.departed

    def summarize(self, trains: list[Train], horizon: float) -> dict[str, Any]:
        """
        Compute summary metrics for the run.

        Args:
            trains: Every train in the run, active or staged
            horizon: Simulated minutes covered by the run

        Returns:
            Dictionary of metrics; undefined values are None
        """
        sampled = [t for t in trains if t.utilization_samples > 0]
        if sampled:
            avg_utilization = float(np.mean([t.average_utilization for t in sampled]))
            max_utilization = float(max(t.utilization_max for t in sampled))
            avg_fraction_full = float(np.mean([t.fraction_full for t in sampled]))
        else:
            avg_utilization = max_utilization = avg_fraction_full = None

        hours = horizon / 60.0
        throughput = self.departed / hours if hours > 0 else None

        return {
            "generated": self.generated,
            "boarded": self.boarded,
            "departed": self.departed,
            "onboard": sum(t.load for t in trains),
            "missed_boardings": self.missed_boardings,
            "release_misses": self.release_misses,
            "avg_wait": self.average_wait,
            "max_wait": self.max_wait if self.max_wait_at is not None else None,
            "max_wait_at": self.max_wait_at,
            "avg_ride": self.average_ride,
            "throughput_per_hour": throughput,
            "avg_utilization": avg_utilization,
            "max_utilization": max_utilization,
            "avg_fraction_full": avg_fraction_full,
            "n_trains": len(trains),
        }

    def trips_dataframe(self) -> pd.DataFrame:
        """Convert completed trips to a DataFrame."""
        if not self.trips:
            return pd.DataFrame()

        records = [
            {
                "origin": t.origin,
                "destination": t.destination,
                "arrival_time": t.arrival_time,
                "board_time": t.board_time,
                "exit_time": t.exit_time,
                "wait_time": t.wait_time,
                "ride_time": t.ride_time,
            }
            for t in self.trips
        ]

        return pd.DataFrame(records)

    @staticmethod
    def trains_dataframe(trains: list[Train]) -> pd.DataFrame:
        """Per-train utilization table."""
        return pd.DataFrame(
            [
                {
                    "train_id": t.train_id,
                    "capacity": t.capacity,
                    "samples": t.utilization_samples,
                    "avg_utilization": t.average_utilization,
                    "max_utilization": t.utilization_max,
                    "fraction_full": t.fraction_full,
                    "onboard": t.load,
                }
                for t in trains
            ],
            columns=[
                "train_id",
                "capacity",
                "samples",
                "avg_utilization",
                "max_utilization",
                "fraction_full",
                "onboard",
            ],
        )
