"""Trains and customers moving along the simulated line."""

from .customer import Customer, draw_destination
from .train import FULL_THRESHOLD, Train, TrainState

__all__ = [
    "Customer",
    "draw_destination",
    "FULL_THRESHOLD",
    "Train",
    "TrainState",
]
