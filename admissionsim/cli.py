"""Command-line entry point.

Usage:
    python -m admissionsim <horizon_s> <producer_kind> <producer_rate>
        <dispatcher_kind> <consumer_kind> <consumer_rate>
        [<latency_goal_us>] [<goal_factor>] [options]

Process kinds: uniform, poisson, expdelay, capdelay. Pass "-" for an
optional positional to keep its default.

Exit codes: 0 on a completed run, 1 on missing or non-numeric arguments,
2 on a configuration error.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence

from admissionsim.config import (
    DEFAULT_CAP_FACTOR,
    DEFAULT_GOAL_FACTOR,
    DEFAULT_LATENCY_GOAL_US,
    DEFAULT_QUANTUM_S,
    PipelineConfig,
)
from admissionsim.errors import ConfigurationError
from admissionsim.logging_config import configure_from_env, enable_console_logging
from admissionsim.math.process_kind import ProcessKind
from admissionsim.simulation import Simulation

EXIT_USAGE = 1
EXIT_CONFIG = 2


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def _or_default(convert: Callable[[str], float]) -> Callable[[str], float | None]:
    """Argument type where "-" means "use the default"."""

    def parse(text: str) -> float | None:
        if text == "-":
            return None
        return convert(text)

    parse.__name__ = convert.__name__
    return parse


def build_parser() -> argparse.ArgumentParser:
    kinds = ", ".join(kind.value for kind in ProcessKind)
    parser = _ArgumentParser(
        prog="admissionsim",
        description="Simulate a producer -> dispatcher -> consumer pipeline under admission control.",
        epilog=f"process kinds: {kinds}",
    )
    parser.add_argument("horizon", type=float, help="Simulated duration (s)")
    parser.add_argument("producer_kind", help="Producer inter-arrival process")
    parser.add_argument("producer_rate", type=float, help="Producer rate (req/s)")
    parser.add_argument("dispatcher_kind", help="Dispatcher attempt process")
    parser.add_argument("consumer_kind", help="Consumer service-time process")
    parser.add_argument("consumer_rate", type=float, help="Consumer rate (req/s)")
    parser.add_argument(
        "latency_goal",
        nargs="?",
        type=_or_default(float),
        default=None,
        help=f"Latency goal (us, default {DEFAULT_LATENCY_GOAL_US:g})",
    )
    parser.add_argument(
        "goal_factor",
        nargs="?",
        type=_or_default(float),
        default=None,
        help=f"Goal factor (default {DEFAULT_GOAL_FACTOR:g})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress every simulated second")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: entropy)")
    parser.add_argument(
        "--quantum-us",
        type=float,
        default=DEFAULT_QUANTUM_S * 1e6,
        help=f"Clock step (us, default {DEFAULT_QUANTUM_S * 1e6:g})",
    )
    parser.add_argument(
        "--cap-factor",
        type=float,
        default=DEFAULT_CAP_FACTOR,
        help=f"Jitter ceiling of capdelay (default {DEFAULT_CAP_FACTOR:g})",
    )
    parser.add_argument("--compact", action="store_true", help="One-line report")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Enable console logging at this level",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    """Build the run configuration; raises ConfigurationError."""
    return PipelineConfig(
        horizon_s=args.horizon,
        producer_kind=args.producer_kind,
        producer_rate=args.producer_rate,
        dispatcher_kind=args.dispatcher_kind,
        consumer_kind=args.consumer_kind,
        consumer_rate=args.consumer_rate,
        latency_goal_us=DEFAULT_LATENCY_GOAL_US if args.latency_goal is None else args.latency_goal,
        goal_factor=DEFAULT_GOAL_FACTOR if args.goal_factor is None else args.goal_factor,
        cap_factor=args.cap_factor,
        quantum_s=args.quantum_us * 1e-6,
        seed=args.seed,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    try:
        config = config_from_args(args)
        simulation = Simulation(
            config,
            on_progress=(lambda sample: print(sample.format())) if args.verbose else None,
        )
    except ConfigurationError as e:
        print(f"{parser.prog}: configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.verbose:
        print(
            f"Consumer limit {simulation.dispatcher.limit} requests, "
            f"goal {config.latency_goal_s * 1000:g}ms factor {config.goal_factor:g}"
        )

    report = simulation.run()
    print(report.format_compact() if args.compact else report)
    return 0
