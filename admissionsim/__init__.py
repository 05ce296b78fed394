"""admissionsim: fixed-step simulator of an admission-controlled request pipeline.

A producer emits synthetic requests, a dispatcher admits them into a
consumer under a concurrency limit derived from a latency goal, and the
consumer serves them one at a time. The run reports mean / p95 / p99 / max
of total and execution latency plus peak queue depths.

Logging is silent by default; see admissionsim.logging_config.
"""

import logging

from admissionsim.config import (
    DEFAULT_CAP_FACTOR,
    DEFAULT_GOAL_FACTOR,
    DEFAULT_LATENCY_GOAL_US,
    DEFAULT_PROGRESS_INTERVAL_S,
    DEFAULT_QUANTUM_S,
    PipelineConfig,
)
from admissionsim.entities import Consumer, Dispatcher, Producer, Request, admission_limit
from admissionsim.errors import ConfigurationError
from admissionsim.instrumentation import (
    LatencySeries,
    LatencySummary,
    ProgressRecorder,
    ProgressSample,
    SimulationReport,
    StatisticsCollector,
)
from admissionsim.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from admissionsim.math import ProcessKind, StochasticProcess
from admissionsim.simulation import Simulation, SimulationState, simulate
from admissionsim.sketching import ExtendedPSquare

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "DEFAULT_CAP_FACTOR",
    "DEFAULT_GOAL_FACTOR",
    "DEFAULT_LATENCY_GOAL_US",
    "DEFAULT_PROGRESS_INTERVAL_S",
    "DEFAULT_QUANTUM_S",
    "ConfigurationError",
    "PipelineConfig",
    # Processes
    "ProcessKind",
    "StochasticProcess",
    # Pipeline
    "Consumer",
    "Dispatcher",
    "Producer",
    "Request",
    "admission_limit",
    "Simulation",
    "SimulationState",
    "simulate",
    # Statistics
    "ExtendedPSquare",
    "LatencySeries",
    "LatencySummary",
    "ProgressRecorder",
    "ProgressSample",
    "SimulationReport",
    "StatisticsCollector",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]
