"""Plain-text rendering of simulation metrics."""

from __future__ import annotations

from typing import Any, Optional

UNDEFINED = "undefined"


def _fmt(value: Optional[float], spec: str = ".2f", suffix: str = "") -> str:
    if value is None:
        return UNDEFINED
    return f"{value:{spec}}{suffix}"


def _pct(value: Optional[float]) -> str:
    return _fmt(None if value is None else value * 100, ".1f", "%")


def format_report(metrics: dict[str, Any], title: str = "Simulation Report") -> str:
    """
    Render summary metrics as a human-readable report.

    The output depends only on the metrics, so identical runs give identical
    reports. Undefined metrics are printed as "undefined".
    """
    max_wait = _fmt(metrics.get("max_wait"), suffix=" min")
    if metrics.get("max_wait_at") is not None:
        max_wait += f" (at t={metrics['max_wait_at']:.2f})"

    lines = [
        title,
        "=" * len(title),
        f"Customers generated:     {metrics['generated']:,}",
        f"Customers boarded:       {metrics['boarded']:,}",
        f"Customers departed:      {metrics['departed']:,}",
        f"Still onboard at end:    {metrics['onboard']:,}",
        f"Missed boardings:        {metrics['missed_boardings']:,}",
        f"Release misses:          {metrics['release_misses']:,}",
        "",
        f"Average station wait:    {_fmt(metrics.get('avg_wait'), suffix=' min')}",
        f"Maximum station wait:    {max_wait}",
        f"Average ride time:       {_fmt(metrics.get('avg_ride'), suffix=' min')}",
        f"Throughput:              {_fmt(metrics.get('throughput_per_hour'), suffix=' customers/hour')}",
        "",
        f"Average train utilization: {_pct(metrics.get('avg_utilization'))}",
        f"Maximum train utilization: {_pct(metrics.get('max_utilization'))}",
        f"Average time running full: {_pct(metrics.get('avg_fraction_full'))}",
    ]
    return "\n".join(lines)
