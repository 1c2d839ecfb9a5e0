"""
Multi-seed comparison of dispatch policies.

Every policy is run once per seed against a fresh copy of the same line and
the numeric metrics are aggregated per policy.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

import numpy as np
import pandas as pd

from .config import LineConfig
from .policies.factory import create_policy
from .simulation.engine import SimulationConfig, SimulationEngine

logger = logging.getLogger(__name__)

PolicySpec = tuple[str, Optional[float]]


def run_replication(
    line_config: LineConfig,
    sim_config: SimulationConfig,
    policy_name: str,
    parameter: Optional[float],
    seed: int,
) -> dict[str, Any]:
    """Run one seed of one policy and return its metrics."""
    line = line_config.build_line()
    policy = create_policy(
        policy_name,
        parameter,
        demand=line.demand,
        intervals=line_config.dispatch_intervals,
        horizon=sim_config.duration_minutes,
    )
    engine = SimulationEngine(replace(sim_config, random_seed=seed), line, policy)
    result = engine.run()
    return {"policy": result.policy, "seed": seed, **result.metrics}


def compare_policies(
    policies: list[PolicySpec],
    seeds: list[int],
    line_config: LineConfig,
    sim_config: Optional[SimulationConfig] = None,
) -> pd.DataFrame:
    """
    Run every policy against every seed and aggregate the results.

    Args:
        policies: (name, parameter) pairs; a None parameter uses the default
        seeds: Random seeds, shared by all policies
        line_config: Line to simulate
        sim_config: Run configuration; its seed is replaced per replication

    Returns:
        One row per policy with mean, std and 95% CI of each numeric metric
    """
    sim_config = sim_config or SimulationConfig()
    if not seeds:
        raise ValueError("At least one seed is required")

    logger.info(
        f"Comparing {len(policies)} policies x {len(seeds)} seeds = "
        f"{len(policies) * len(seeds)} runs"
    )

    records = []
    for name, parameter in policies:
        runs = [
            run_replication(line_config, sim_config, name, parameter, seed)
            for seed in seeds
        ]
        record: dict[str, Any] = {"policy": runs[0]["policy"], "n_replications": len(runs)}

        metric_names = [
            k for k, v in runs[0].items() if k != "seed" and isinstance(v, (int, float))
        ]
        for metric in metric_names:
            values = np.array(
                [r[metric] for r in runs if r[metric] is not None], dtype=float
            )
            if values.size == 0:
                continue
            mean = np.mean(values)
            record[f"{metric}_mean"] = mean
            record[f"{metric}_std"] = np.std(values)

            # 95% CI
            se = np.std(values) / np.sqrt(len(values)) if len(values) > 1 else 0.0
            record[f"{metric}_ci_low"] = mean - 1.96 * se
            record[f"{metric}_ci_high"] = mean + 1.96 * se

        records.append(record)

    return pd.DataFrame(records)
