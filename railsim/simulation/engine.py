"""
Event-driven simulation engine.

Owns the line, the trains, the future event list, the random stream and the
statistics for one run, and processes events strictly in time order until
the horizon.
"""

from __future__ import annotations

import logging
import time as time_module
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional

import numpy as np
import pandas as pd

from ..agents.customer import Customer, draw_destination
from ..agents.train import FULL_THRESHOLD, Train
from ..network import Direction, Line
from ..policies.base import DispatchContext, DispatchPolicy
from .events import (
    Event,
    EventQueue,
    EventType,
    create_customer_arrival_event,
    create_sentinel_event,
    create_train_arrival_event,
    create_train_departure_event,
    create_train_release_event,
)
from .metrics import StatisticsAggregator

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for a simulation run. Times are in minutes."""

    duration_minutes: float = 1200.0  # 20 hours, one demand knot per hour
    random_seed: int = 1

    # Fleet
    n_trains: int = 4
    train_capacity: int = 100

    # Dwell times
    release_dwell: float = 1.0  # Release to first arrival at the origin terminal
    station_dwell: float = 0.5  # Arrival to departure at every station

    full_threshold: float = FULL_THRESHOLD

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        if self.n_trains < 0:
            raise ValueError("n_trains must be non-negative")
        if self.train_capacity <= 0:
            raise ValueError("train_capacity must be positive")
        if self.release_dwell < 0 or self.station_dwell < 0:
            raise ValueError("Dwell times must be non-negative")
        if self.random_seed < 0:
            raise ValueError("random_seed must be non-negative")

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]] = None, **overrides) -> SimulationConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        if data is not None and not isinstance(data, dict):
            raise TypeError(f"Simulation settings must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (data or {}).items() if k in known}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class SimulationResult:
    """Results from a simulation run."""

    config: SimulationConfig
    policy: str
    metrics: dict[str, Any]
    trips: pd.DataFrame
    trains: pd.DataFrame
    events_processed: int
    wall_clock_seconds: float


Observer = Callable[["SimulationEngine", Event], None]


class SimulationEngine:
    """
    Discrete-event simulation of one rail line.

    Processes events from a priority queue; each handler runs to completion
    and may schedule follow-up events. Trains start staged, alternating
    between the eastbound and westbound pools.
    """

    def __init__(
        self,
        config: SimulationConfig,
        line: Line,
        policy: DispatchPolicy,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config
        self.line = line
        self.policy = policy
        self.rng = rng or np.random.default_rng(config.random_seed)

        self.queue = EventQueue()
        self.metrics = StatisticsAggregator()

        self.trains = [
            Train(train_id=i, capacity=config.train_capacity)
            for i in range(config.n_trains)
        ]
        for train in self.trains:
            pool_direction = Direction.EAST if train.train_id % 2 == 0 else Direction.WEST
            self.line.pool(pool_direction).append(train.train_id)

        self.events_processed = 0
        self.started = False
        self._observers: list[Observer] = []

        # Event handlers
        self._handlers: dict[EventType, Callable[[Event], None]] = {
            EventType.TRAIN_ARRIVAL: self._handle_train_arrival,
            EventType.TRAIN_DEPARTURE: self._handle_train_departure,
            EventType.TRAIN_RELEASE: self._handle_train_release,
            EventType.CUSTOMER_ARRIVAL: self._handle_customer_arrival,
            EventType.SENTINEL: self._handle_sentinel,
        }

    @property
    def current_time(self) -> float:
        return self.queue.now

    @property
    def horizon(self) -> float:
        return self.config.duration_minutes

    def add_observer(self, observer: Observer) -> None:
        """Register a callback invoked after every processed event."""
        self._observers.append(observer)

    def schedule_event(self, event: Event) -> None:
        """Schedule an event for processing."""
        self.queue.schedule(event)

    def start(self) -> None:
        """
        Seed the event list: one release per direction and one customer
        arrival per station at t=0, and the sentinel at the horizon.
        """
        if self.started:
            return
        self.started = True

        now = self.current_time
        self.schedule_event(create_train_release_event(now, Direction.EAST))
        self.schedule_event(create_train_release_event(now, Direction.WEST))
        for station in self.line.stations:
            self.schedule_event(create_customer_arrival_event(now, station.index))
        self.schedule_event(create_sentinel_event(self.horizon))

    def step(self) -> Event:
        """Pop the next event, advance the clock to it and handle it."""
        event = self.queue.pop_next()
        self._handlers[event.event_type](event)
        self.events_processed += 1
        for observer in self._observers:
            observer(self, event)
        return event

    def run(self, bootstrap: bool = True) -> SimulationResult:
        """
        Run the simulation to the horizon.

        Args:
            bootstrap: Seed the default initial events first. Pass False
                when the caller has scheduled its own events, including
                a sentinel at the horizon.

        Returns:
            SimulationResult with metrics and per-trip/per-train data
        """
        start_wall_time = time_module.perf_counter()
        if bootstrap:
            self.start()

        logger.info(
            f"Running {self.line.name} to t={self.horizon:g} with "
            f"{len(self.trains)} trains, policy {self.policy.describe()}"
        )

        while self.queue and self.current_time < self.horizon:
            self.step()

        wall_time = time_module.perf_counter() - start_wall_time
        logger.info(
            f"Simulation finished at t={self.current_time:g} after "
            f"{self.events_processed} events ({wall_time:.3f}s)"
        )

        return SimulationResult(
            config=self.config,
            policy=self.policy.describe(),
            metrics=self.metrics.summarize(self.trains, self.horizon),
            trips=self.metrics.trips_dataframe(),
            trains=self.metrics.trains_dataframe(self.trains),
            events_processed=self.events_processed,
            wall_clock_seconds=wall_time,
        )

    # Event Handlers

    def _handle_train_release(self, event: Event) -> None:
        """Put the next staged train on the line and schedule the next release."""
        direction = event.direction
        pool = self.line.pool(direction)

        if pool:
            train = self.trains[pool.popleft()]
            terminal = self.line.origin_terminal(direction)
            train.release(direction, terminal)
            self.schedule_event(
                create_train_arrival_event(
                    self.current_time + self.config.release_dwell,
                    train.train_id,
                    terminal,
                )
            )
            logger.debug(
                f"{self.current_time:.2f} -- Train {train.train_id} RELEASED "
                f"heading {direction.name}"
            )
        else:
            self.metrics.record_release_miss()
            logger.debug(
                f"{self.current_time:.2f} -- No staged train to release "
                f"heading {direction.name}"
            )

        context = DispatchContext(
            time=self.current_time,
            direction=direction,
            waiting=self.line.waiting(direction),
            train_capacity=self.config.train_capacity,
        )
        headway = self.policy.next_headway(context)
        self.schedule_event(
            create_train_release_event(self.current_time + headway, direction)
        )

    def _handle_train_arrival(self, event: Event) -> None:
        """Let riders off; stage the train at a terminal, otherwise dwell."""
        train = self.trains[event.train_id]
        station = event.station

        for customer in train.alight(station, self.current_time):
            self.metrics.record_alighting(customer)

        logger.debug(
            f"{self.current_time:.2f} -- Train {train.train_id} ARRIVAL at "
            f"{self.line.station_name(station)} ({train.load} onboard)"
        )

        if self.line.is_terminal_for(station, train.direction):
            train.arrive_at(station)
            train.disable()
            self.line.pool(train.direction.opposite).append(train.train_id)
            logger.debug(
                f"{self.current_time:.2f} -- Train {train.train_id} reached "
                f"terminal heading {train.direction.name}"
            )
            return

        train.arrive_at(station)
        next_station = self.line.next_station(station, train.direction)
        self.schedule_event(
            create_train_departure_event(
                self.current_time + self.config.station_dwell,
                train.train_id,
                next_station,
            )
        )

    def _handle_train_departure(self, event: Event) -> None:
        """Board waiting riders, sample utilization and leave for the next station."""
        train = self.trains[event.train_id]
        current = train.at_station
        station = self.line.stations[current]
        waiting = station.queue_for(train.direction)

        for customer in train.board(waiting, self.current_time):
            self.metrics.record_boarding(customer)
        if waiting:
            self.metrics.record_missed(len(waiting))

        occupancy = train.record_utilization(self.config.full_threshold)
        logger.debug(
            f"{self.current_time:.2f} -- Train {train.train_id} DEPARTURE from "
            f"{station.name} to {self.line.station_name(event.station)} "
            f"at {occupancy:.0%} occupancy, {len(waiting)} left waiting"
        )

        train.leave_to(event.station)
        self.schedule_event(
            create_train_arrival_event(
                self.current_time + self.line.travel_time(train.direction, current),
                train.train_id,
                event.station,
            )
        )

    def _handle_customer_arrival(self, event: Event) -> None:
        """Queue a new customer and schedule the station's next arrival."""
        station = event.station
        destination = draw_destination(self.rng, station, len(self.line))
        customer = Customer(
            arrival_time=self.current_time,
            origin=station,
            destination=destination,
        )
        self.line.stations[station].enqueue(customer)
        self.metrics.record_generated()

        rate = self.line.current_rate(station, self.current_time)
        if rate <= 0:
            raise ValueError(
                f"Arrival rate at {self.line.station_name(station)} is {rate} "
                f"at t={self.current_time}; rates must be positive"
            )
        interarrival = float(self.rng.exponential(1.0 / rate))
        self.schedule_event(
            create_customer_arrival_event(self.current_time + interarrival, station)
        )

        logger.debug(
            f"{self.current_time:.2f} -- Customer at {self.line.station_name(station)} "
            f"bound for {self.line.station_name(destination)}, next in {interarrival:.2f}"
        )

    def _handle_sentinel(self, event: Event) -> None:
        """Horizon marker; the run loop stops once the clock reaches it."""
        logger.debug(f"{self.current_time:.2f} -- Horizon reached")


def run_simulation(
    config: SimulationConfig,
    line: Line,
    policy: DispatchPolicy,
) -> SimulationResult:
    """
    Convenience function to run a simulation.

    Args:
        config: Simulation configuration
        line: Line to simulate; its queues and pools are mutated
        policy: Dispatch policy

    Returns:
        SimulationResult
    """
    engine = SimulationEngine(config, line, policy)
    return engine.run()
