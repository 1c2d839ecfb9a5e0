"""
Static line configuration.

Loads station names, segment travel times, baseline demand and the hourly
demand and dispatch tables from a YAML document.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .network import Line, create_line

DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "millennium_line.yaml"


class ConfigError(ValueError):
    """Raised when a configuration document is malformed."""


def load_config(config_path: Optional[Path] = None) -> dict[str, Any]:
    """Load a configuration document from YAML (the bundled line by default)."""
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} does not contain a mapping")
    return config


def get_section(config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a top-level section, or an empty mapping when it is absent."""
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


def _positive_list(data: dict[str, Any], key: str, section: str) -> list[float]:
    values = data.get(key)
    if not isinstance(values, list) or not values:
        raise ConfigError(f"'{section}.{key}' must be a non-empty list")
    try:
        values = [float(v) for v in values]
    except (TypeError, ValueError):
        raise ConfigError(f"'{section}.{key}' must contain only numbers") from None
    if any(v <= 0 for v in values):
        raise ConfigError(f"'{section}.{key}' values must be positive")
    return values


@dataclass
class LineConfig:
    """Static description of a line and its demand."""

    name: str
    stations: list[str]
    travel_times: list[float]
    base_rates: list[float]
    demand_multipliers: list[float]
    dispatch_intervals: list[float]

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> LineConfig:
        """Validate and build from a loaded configuration document."""
        line = config.get("line")
        if not isinstance(line, dict):
            raise ConfigError("Missing 'line' section")

        stations = line.get("stations")
        if not isinstance(stations, list) or len(stations) < 2:
            raise ConfigError("'line.stations' must list at least two stations")
        stations = [str(s) for s in stations]

        travel_times = _positive_list(line, "travel_times", "line")
        if len(travel_times) != len(stations) - 1:
            raise ConfigError(
                f"'line.travel_times' needs {len(stations) - 1} entries, "
                f"got {len(travel_times)}"
            )

        base_rates = _positive_list(line, "base_rates", "line")
        if len(base_rates) != len(stations):
            raise ConfigError(
                f"'line.base_rates' needs {len(stations)} entries, got {len(base_rates)}"
            )

        multipliers = _positive_list(get_section(config, "demand"), "multipliers", "demand")
        if len(multipliers) < 2:
            raise ConfigError("'demand.multipliers' needs at least two knot points")
        intervals = _positive_list(get_section(config, "dispatch"), "intervals", "dispatch")

        return cls(
            name=str(line.get("name", "Unnamed Line")),
            stations=stations,
            travel_times=travel_times,
            base_rates=base_rates,
            demand_multipliers=multipliers,
            dispatch_intervals=intervals,
        )

    def build_line(self) -> Line:
        """Create a fresh Line with empty queues and pools."""
        return create_line(
            name=self.name,
            station_names=self.stations,
            travel_times=self.travel_times,
            base_rates=self.base_rates,
            multipliers=self.demand_multipliers,
        )
