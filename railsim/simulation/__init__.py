"""
Simulation engine for rail line dispatch experiments.

Provides the event queue, event-driven engine and statistics aggregation.
"""

from .engine import SimulationConfig, SimulationEngine, SimulationResult, run_simulation
from .events import Event, EventQueue, EventType, QueueExhaustedError
from .metrics import StatisticsAggregator, TripRecord

__all__ = [
    # Engine
    "SimulationConfig",
    "SimulationEngine",
    "SimulationResult",
    "run_simulation",
    # Events
    "Event",
    "EventQueue",
    "EventType",
    "QueueExhaustedError",
    # Metrics
    "StatisticsAggregator",
    "TripRecord",
]
