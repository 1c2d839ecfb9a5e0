#!/usr/bin/env python3
"""
Run a single rail line simulation and print its report.

Usage:
    railsim <seed> <policy> [parameter] [--config PATH] [--output-dir DIR] [--verbose]

Policies and the meaning of their optional parameter:
    constant    fixed headway in minutes (default 5.0)
    timebased   base headway scaled by time-of-day demand (default 6.0)
    popbased    base headway shortened by waiting customers (default 6.0)
    translink   scale applied to the hourly operator timetable (default 1.0)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import numpy as np
import yaml

from .config import ConfigError, LineConfig, get_section, load_config
from .policies import POLICY_NAMES, UnsupportedPolicyError, create_policy
from .report import format_report
from .simulation import SimulationConfig, SimulationEngine, SimulationResult

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging; per-event traces are only shown with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _seed(value: str) -> int:
    try:
        seed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"seed must be an integer, got '{value}'") from None
    if not 0 <= seed < 2**64:
        raise argparse.ArgumentTypeError(f"seed must be in [0, 2^64), got {seed}")
    return seed


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="railsim",
        description="Simulate passenger flow and train dispatch on a rail line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("seed", type=_seed, help="Seed for the random stream")
    parser.add_argument(
        "policy",
        type=str.lower,
        choices=POLICY_NAMES,
        help="Dispatch policy",
    )
    parser.add_argument(
        "parameter",
        type=float,
        nargs="?",
        default=None,
        help="Policy parameter (policy default when omitted)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML line configuration (bundled Millennium Line by default)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write metrics.json, trips.csv and trains.csv here",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every simulation event",
    )

    return parser.parse_args(argv)


def save_results(result: SimulationResult, output_dir: Path) -> None:
    """Save simulation results."""
    output_dir.mkdir(parents=True, exist_ok=True)

    metrics_path = output_dir / "metrics.json"
    with open(metrics_path, "w") as f:
        # Convert numpy types to Python types
        metrics: dict[str, Any] = {
            k: float(v) if isinstance(v, (np.floating, np.integer)) else v
            for k, v in result.metrics.items()
        }
        metrics["policy"] = result.policy
        metrics["seed"] = result.config.random_seed
        json.dump(metrics, f, indent=2)
    logger.info(f"Saved metrics to {metrics_path}")

    if not result.trips.empty:
        trips_path = output_dir / "trips.csv"
        result.trips.to_csv(trips_path, index=False)
        logger.info(f"Saved trip data to {trips_path}")

    trains_path = output_dir / "trains.csv"
    result.trains.to_csv(trains_path, index=False)
    logger.info(f"Saved train data to {trains_path}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    # Load configuration
    try:
        config = load_config(args.config)
        line_config = LineConfig.from_dict(config)
        sim_config = SimulationConfig.from_dict(
            get_section(config, "simulation"), random_seed=args.seed
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except yaml.YAMLError as e:
        print(f"Error parsing config: {e}", file=sys.stderr)
        return 1
    except (ConfigError, TypeError, ValueError) as e:
        print(f"Error in config: {e}", file=sys.stderr)
        return 1

    line = line_config.build_line()
    try:
        policy = create_policy(
            args.policy,
            args.parameter,
            demand=line.demand,
            intervals=line_config.dispatch_intervals,
            horizon=sim_config.duration_minutes,
        )
    except UnsupportedPolicyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    engine = SimulationEngine(sim_config, line, policy)
    result = engine.run()

    print(format_report(result.metrics, title=f"{line.name} -- {result.policy}, seed {args.seed}"))
    print()
    print(f"Execution time: {result.wall_clock_seconds:.3f} s")

    if args.output_dir:
        save_results(result, args.output_dir)

    return 0


if __name__ == "__main__":
    sys.exit(main())
