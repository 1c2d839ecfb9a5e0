"""Construct dispatch policies from their command-line names."""

from __future__ import annotations

from typing import Optional

from ..network import DemandProfile
from .adaptive import PopulationPolicy, TimeOfDayPolicy
from .base import DispatchPolicy, PolicyType, UnsupportedPolicyError
from .fixed import ConstantPolicy, EmpiricalCalendarPolicy

# Parameter used when none is given on the command line
DEFAULT_PARAMETERS: dict[PolicyType, float] = {
    PolicyType.CONSTANT: 5.0,  # Interval, minutes
    PolicyType.TIME_BASED: 6.0,  # Base interval at multiplier 1.0, minutes
    PolicyType.POP_BASED: 6.0,  # Base interval with nobody waiting, minutes
    PolicyType.TRANSLINK: 1.0,  # Scale applied to the hourly table
}

POLICY_NAMES = [p.value for p in PolicyType]


def parse_policy_type(name: str) -> PolicyType:
    try:
        return PolicyType(name.strip().lower())
    except ValueError:
        raise UnsupportedPolicyError(
            f"Unknown dispatch policy '{name}'; expected one of {', '.join(POLICY_NAMES)}"
        ) from None


def create_policy(
    name: str,
    parameter: Optional[float] = None,
    *,
    demand: DemandProfile,
    intervals: list[float],
    horizon: float,
) -> DispatchPolicy:
    """
    Build a dispatch policy.

    Args:
        name: Policy name (constant, timebased, popbased, translink)
        parameter: Policy parameter; the policy default when None
        demand: Demand profile, used by the time-of-day policy
        intervals: Hourly headway table, used by the calendar policy
        horizon: Simulation horizon in minutes

    Returns:
        A configured DispatchPolicy

    Raises:
        UnsupportedPolicyError: If the name is not a known policy
        ValueError: If the parameter is not positive
    """
    policy_type = parse_policy_type(name)
    if parameter is None:
        parameter = DEFAULT_PARAMETERS[policy_type]

    if policy_type is PolicyType.CONSTANT:
        return ConstantPolicy(interval=parameter)
    if policy_type is PolicyType.TIME_BASED:
        return TimeOfDayPolicy(demand=demand, base_interval=parameter)
    if policy_type is PolicyType.POP_BASED:
        return PopulationPolicy(base_interval=parameter)
    return EmpiricalCalendarPolicy(intervals=intervals, horizon=horizon, scale=parameter)
