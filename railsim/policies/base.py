"""
Base classes for train dispatch policies.

A dispatch policy decides the headway between successive train releases in
one direction. The engine queries it exactly once per release event.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..network import Direction

# Headway bounds for the demand-responsive policies (minutes)
DEFAULT_MIN_HEADWAY = 2.0
DEFAULT_MAX_HEADWAY = 20.0


class PolicyType(Enum):
    """Dispatch policies, valued by their command-line names."""

    CONSTANT = "constant"
    TIME_BASED = "timebased"
    POP_BASED = "popbased"
    TRANSLINK = "translink"


class UnsupportedPolicyError(ValueError):
    """Raised when a policy name does not match any implemented policy."""


@dataclass
class DispatchContext:
    """Line state visible to a policy at the moment of a release."""

    time: float
    direction: Direction
    waiting: int = 0  # Customers queued line-wide for this direction
    train_capacity: int = 100


class DispatchPolicy(ABC):
    """
    Abstract base class for dispatch policies.

    Subclasses implement compute_headway(); next_headway() wraps it with
    bookkeeping and a sanity check on the result.
    """

    policy_type: PolicyType

    def __init__(self, parameter: float):
        if not math.isfinite(parameter) or parameter <= 0:
            raise ValueError(
                f"{type(self).__name__} parameter must be a positive number, got {parameter}"
            )
        self.parameter = parameter
        self.n_queries: int = 0

    @property
    def name(self) -> str:
        return self.policy_type.value

    @abstractmethod
    def compute_headway(self, context: DispatchContext) -> float:
        """
        Compute minutes until the next release in `context.direction`.

        Args:
            context: Line state at the time of the current release

        Returns:
            Positive headway in minutes
        """
        pass

    def next_headway(self, context: DispatchContext) -> float:
        """Query the policy for the delay until the next release."""
        headway = self.compute_headway(context)
        if not math.isfinite(headway) or headway <= 0:
            raise ValueError(
                f"{self.name} policy produced invalid headway {headway} "
                f"at t={context.time}"
            )
        self.n_queries += 1
        return headway

    def describe(self) -> str:
        return f"{self.name}({self.parameter:g})"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
