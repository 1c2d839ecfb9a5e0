"""
Demand-responsive dispatch policies.

Both policies shorten headways as demand rises and are bounded to
[min_headway, max_headway] so service never stops or floods the line.
"""

from __future__ import annotations

from ..network import DemandProfile
from .base import (
    DEFAULT_MAX_HEADWAY,
    DEFAULT_MIN_HEADWAY,
    DispatchContext,
    DispatchPolicy,
    PolicyType,
    clamp,
)


class _BoundedPolicy(DispatchPolicy):
    def __init__(
        self,
        base_interval: float = 6.0,
        min_headway: float = DEFAULT_MIN_HEADWAY,
        max_headway: float = DEFAULT_MAX_HEADWAY,
    ):
        super().__init__(base_interval)
        if not 0 < min_headway <= max_headway:
            raise ValueError(
                f"Invalid headway bounds [{min_headway}, {max_headway}]"
            )
        self.base_interval = base_interval
        self.min_headway = min_headway
        self.max_headway = max_headway


class TimeOfDayPolicy(_BoundedPolicy):
    """
    Scale a base headway by the inverse of the time-of-day demand multiplier.

    headway = clamp(base_interval / multiplier(t), min_headway, max_headway)

    A zero multiplier (no expected demand) yields max_headway.
    """

    policy_type = PolicyType.TIME_BASED

    def __init__(
        self,
        demand: DemandProfile,
        base_interval: float = 6.0,
        min_headway: float = DEFAULT_MIN_HEADWAY,
        max_headway: float = DEFAULT_MAX_HEADWAY,
    ):
        super().__init__(base_interval, min_headway, max_headway)
        self.demand = demand

    def compute_headway(self, context: DispatchContext) -> float:
        multiplier = self.demand.multiplier_at(context.time)
        if multiplier <= 0:
            return self.max_headway
        return clamp(self.base_interval / multiplier, self.min_headway, self.max_headway)


class PopulationPolicy(_BoundedPolicy):
    """
    Shrink the headway as the waiting population grows.

    headway = clamp(base_interval / (1 + waiting / train_capacity),
                    min_headway, max_headway)

    where `waiting` counts customers queued line-wide for the release
    direction. With nobody waiting the base interval is used.
    """

    policy_type = PolicyType.POP_BASED

    def compute_headway(self, context: DispatchContext) -> float:
        pressure = 1.0 + context.waiting / max(1, context.train_capacity)
        return clamp(self.base_interval / pressure, self.min_headway, self.max_headway)
