"""Online latency statistics for completed requests.

The consumer reports every completed request once, through
StatisticsCollector.collect(total, execution). Each of the two series keeps
a running mean, a running max and an ExtendedPSquare sketch, so memory use
is constant no matter how many requests a run completes.
"""

from __future__ import annotations

from admissionsim.instrumentation.summary import LatencySummary
from admissionsim.sketching import DEFAULT_PROBABILITIES, ExtendedPSquare


class LatencySeries:
    """Running mean, max and quantiles of one latency series.

    Every statistic returns 0.0 before the first sample.
    """

    def __init__(self, name: str):
        self.name = name
        self._sketch = ExtendedPSquare(DEFAULT_PROBABILITIES)
        self._count = 0
        self._mean = 0.0
        self._max = 0.0

    @property
    def count(self) -> int:
        return self._count

    def add(self, latency: float) -> None:
        self._count += 1
        # Incremental mean keeps precision over millions of samples
        self._mean += (latency - self._mean) / self._count
        if self._count == 1 or latency > self._max:
            self._max = latency
        self._sketch.add(latency)

    def mean(self) -> float:
        return self._mean

    def max(self) -> float:
        return self._max

    def quantile(self, q: float) -> float:
        return self._sketch.quantile(q)

    def p50(self) -> float:
        return self._sketch.quantile(0.5)

    def p95(self) -> float:
        return self._sketch.quantile(0.95)

    def p99(self) -> float:
        return self._sketch.quantile(0.99)

    def summary(self) -> LatencySummary:
        return LatencySummary(
            count=self._count,
            mean=self.mean(),
            p50=self.p50(),
            p95=self.p95(),
            p99=self.p99(),
            max=self.max(),
        )

    def __repr__(self) -> str:
        return f"LatencySeries(name={self.name!r}, count={self._count})"


class StatisticsCollector:
    """Accumulates total and execution latency of completed requests.

    Attributes:
        total: Creation-to-completion latency (queueing + service).
        execution: Dispatch-to-completion latency (service only).

    Example:
        collector = StatisticsCollector()
        collector.collect(0.004, 0.001)
        print(collector.total.p99(), collector.execution.mean())
    """

    def __init__(self) -> None:
        self.total = LatencySeries("total")
        self.execution = LatencySeries("execution")

    @property
    def count(self) -> int:
        """Number of completed requests recorded."""
        return self.total.count

    def collect(self, total_latency: float, exec_latency: float) -> None:
        """Record one completed request.

        Both latencies are non-negative durations in seconds; the caller
        guarantees it.
        """
        self.total.add(total_latency)
        self.execution.add(exec_latency)
