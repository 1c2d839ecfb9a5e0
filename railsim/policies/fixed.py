"""
Schedule-driven dispatch policies.

Headways here do not depend on the state of the line: either a single
fixed interval, or an operator's hourly timetable.
"""

from __future__ import annotations

import math

from .base import DispatchContext, DispatchPolicy, PolicyType, clamp


class ConstantPolicy(DispatchPolicy):
    """Release a train every `interval` minutes, all day."""

    policy_type = PolicyType.CONSTANT

    def __init__(self, interval: float = 5.0):
        super().__init__(interval)
        self.interval = interval

    def compute_headway(self, context: DispatchContext) -> float:
        return self.interval


class EmpiricalCalendarPolicy(DispatchPolicy):
    """
    Headways looked up from an hourly table of operator intervals.

    The table index is the whole hour of the clamped release time; there is
    no interpolation between hours, so headways stay whole minutes when the
    table holds whole minutes.
    """

    policy_type = PolicyType.TRANSLINK

    def __init__(
        self,
        intervals: list[float],
        horizon: float,
        scale: float = 1.0,
        minutes_per_slot: float = 60.0,
    ):
        super().__init__(scale)
        if not intervals:
            raise ValueError("Calendar policy needs at least one interval")
        if any(i <= 0 for i in intervals):
            raise ValueError("Calendar intervals must be positive")
        self.intervals = list(intervals)
        self.horizon = horizon
        self.scale = scale
        self.minutes_per_slot = minutes_per_slot

    def slot_at(self, time: float) -> int:
        slot = math.floor(clamp(time, 0.0, self.horizon) / self.minutes_per_slot)
        return min(slot, len(self.intervals) - 1)

    def compute_headway(self, context: DispatchContext) -> float:
        return self.scale * self.intervals[self.slot_at(context.time)]
