"""Run configuration for the admission-control pipeline.

PipelineConfig is the single immutable description of a run: the horizon,
the three stochastic processes (producer, dispatcher, consumer), and the
admission-control parameters. It is validated on construction so that a
bad configuration never reaches the simulation loop.

Example:
    config = PipelineConfig(
        horizon_s=10.0,
        producer_kind="poisson",
        producer_rate=1000,
        dispatcher_kind="uniform",
        consumer_kind="uniform",
        consumer_rate=1000,
        latency_goal_us=4000,
    )
"""

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Any

from admissionsim.errors import ConfigurationError
from admissionsim.math.process_kind import ProcessKind

__all__ = [
    "DEFAULT_CAP_FACTOR",
    "DEFAULT_GOAL_FACTOR",
    "DEFAULT_LATENCY_GOAL_US",
    "DEFAULT_PROGRESS_INTERVAL_S",
    "DEFAULT_QUANTUM_S",
    "ConfigurationError",
    "PipelineConfig",
]

# Clock step. Must stay well below the fastest configured interval.
DEFAULT_QUANTUM_S = 1e-6

DEFAULT_LATENCY_GOAL_US = 500.0
DEFAULT_GOAL_FACTOR = 1.5
DEFAULT_CAP_FACTOR = 3.0
DEFAULT_PROGRESS_INTERVAL_S = 1.0


def _require_positive(name: str, value: float) -> None:
    # Any real scalar, numpy included; bool excluded
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable parameters of one simulation run.

    Attributes:
        horizon_s: Simulated duration in seconds.
        producer_kind: Inter-arrival process of the producer.
        producer_rate: Mean requests per second emitted by the producer.
        dispatcher_kind: Process spacing the dispatcher's admission attempts.
            Its mean period is the latency goal.
        consumer_kind: Per-request service-time process of the consumer.
        consumer_rate: Mean requests per second the consumer can complete.
        latency_goal_us: Admission window in microseconds.
        goal_factor: Multiplier applied to the latency goal when sizing the
            concurrency limit.
        cap_factor: Jitter ceiling of the capped-delay process.
        quantum_s: Fixed clock step in seconds.
        progress_interval_s: Simulated time between progress samples.
        seed: Root seed for the three random streams; None draws entropy.
    """

    horizon_s: float
    producer_kind: ProcessKind | str
    producer_rate: float
    dispatcher_kind: ProcessKind | str
    consumer_kind: ProcessKind | str
    consumer_rate: float
    latency_goal_us: float = DEFAULT_LATENCY_GOAL_US
    goal_factor: float = DEFAULT_GOAL_FACTOR
    cap_factor: float = DEFAULT_CAP_FACTOR
    quantum_s: float = DEFAULT_QUANTUM_S
    progress_interval_s: float = DEFAULT_PROGRESS_INTERVAL_S
    seed: int | None = None

    def __post_init__(self) -> None:
        for field_name in ("producer_kind", "dispatcher_kind", "consumer_kind"):
            object.__setattr__(self, field_name, ProcessKind.parse(getattr(self, field_name)))

        _require_positive("horizon_s", self.horizon_s)
        _require_positive("producer_rate", self.producer_rate)
        _require_positive("consumer_rate", self.consumer_rate)
        _require_positive("latency_goal_us", self.latency_goal_us)
        _require_positive("goal_factor", self.goal_factor)
        _require_positive("quantum_s", self.quantum_s)
        _require_positive("progress_interval_s", self.progress_interval_s)
        _require_positive("cap_factor", self.cap_factor)
        if self.cap_factor < 1.0:
            raise ConfigurationError(f"cap_factor must be >= 1.0, got {self.cap_factor}")
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral) or self.seed < 0
        ):
            raise ConfigurationError(f"seed must be a non-negative integer, got {self.seed!r}")

    @property
    def producer_interval_s(self) -> float:
        """Mean time between two emitted requests."""
        return 1.0 / self.producer_rate

    @property
    def consumer_interval_s(self) -> float:
        """Mean service time of one request."""
        return 1.0 / self.consumer_rate

    @property
    def latency_goal_s(self) -> float:
        return self.latency_goal_us * 1e-6

    def with_overrides(self, **changes: Any) -> PipelineConfig:
        """Return a copy with the given fields replaced (re-validated)."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        result = dataclasses.asdict(self)
        for field_name in ("producer_kind", "dispatcher_kind", "consumer_kind"):
            result[field_name] = getattr(self, field_name).value
        return result
