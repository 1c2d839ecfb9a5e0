"""Dispatch policies deciding train headways."""

from .adaptive import PopulationPolicy, TimeOfDayPolicy
from .base import (
    DispatchContext,
    DispatchPolicy,
    PolicyType,
    UnsupportedPolicyError,
)
from .factory import DEFAULT_PARAMETERS, POLICY_NAMES, create_policy, parse_policy_type
from .fixed import ConstantPolicy, EmpiricalCalendarPolicy

__all__ = [
    # Base classes
    "DispatchContext",
    "DispatchPolicy",
    "PolicyType",
    "UnsupportedPolicyError",
    # Policies
    "ConstantPolicy",
    "EmpiricalCalendarPolicy",
    "TimeOfDayPolicy",
    "PopulationPolicy",
    # Construction
    "DEFAULT_PARAMETERS",
    "POLICY_NAMES",
    "create_policy",
    "parse_policy_type",
]
