"""Interval generators driving the producer, dispatcher and consumer.

A StochasticProcess answers one question: how long until the next event?
The answer is drawn according to its ProcessKind:

- UNIFORM: always the configured period (deterministic).
- POISSON: exponentially distributed with mean = period.
- EXPDELAY: period * (1 + Exp(1)), never below the period.
- CAPDELAY: period * U(1, cap_factor), within [period, period * cap_factor].

Each instance owns a private numpy Generator so that the three processes of
a run never share a random stream. Seeds may be ints or SeedSequences; the
simulation spawns one child SeedSequence per process from the root seed.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from admissionsim.errors import ConfigurationError
from admissionsim.math.process_kind import ProcessKind

logger = logging.getLogger(__name__)

SeedLike = int | np.random.SeedSequence | None


class StochasticProcess:
    """Tagged interval generator with one sampling operation.

    Args:
        kind: Which interval policy to sample (a ProcessKind or its name).
        period: Mean (UNIFORM, POISSON) or minimum (EXPDELAY, CAPDELAY)
            interval in seconds. Must be positive.
        cap_factor: Upper jitter bound of CAPDELAY. Ignored by other kinds.
        seed: Seed for this instance's private generator.

    Raises:
        ConfigurationError: If the kind is unknown, the period is not a
            positive finite number, or cap_factor < 1.

    Example:
        service = StochasticProcess("poisson", period=0.001, seed=7)
        delay = service.get()
    """

    def __init__(
        self,
        kind: ProcessKind | str,
        period: float,
        cap_factor: float = 3.0,
        seed: SeedLike = None,
    ):
        self._kind = ProcessKind.parse(kind)
        if not math.isfinite(period) or period <= 0:
            raise ConfigurationError(f"process period must be positive, got {period}")
        if not math.isfinite(cap_factor) or cap_factor < 1.0:
            raise ConfigurationError(f"cap_factor must be >= 1.0, got {cap_factor}")

        self._period = float(period)
        self._cap_factor = float(cap_factor)
        self._rng = np.random.default_rng(seed)

        logger.debug(
            "StochasticProcess created: kind=%s period=%.9fs cap_factor=%.3f",
            self._kind.value,
            self._period,
            self._cap_factor,
        )

    @property
    def kind(self) -> ProcessKind:
        return self._kind

    @property
    def period(self) -> float:
        """Configured period in seconds."""
        return self._period

    @property
    def cap_factor(self) -> float:
        return self._cap_factor

    def get(self) -> float:
        """Sample the next interval in seconds."""
        kind = self._kind
        if kind is ProcessKind.UNIFORM:
            return self._period
        if kind is ProcessKind.POISSON:
            return float(self._rng.exponential(self._period))
        if kind is ProcessKind.EXPDELAY:
            return self._period * (1.0 + float(self._rng.exponential(1.0)))
        if kind is ProcessKind.CAPDELAY:
            return self._period * float(self._rng.uniform(1.0, self._cap_factor))
        raise AssertionError(f"unhandled process kind {kind}")

    def __repr__(self) -> str:
        return f"StochasticProcess(kind={self._kind.value!r}, period={self._period!r})"
