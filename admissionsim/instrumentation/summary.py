"""Report produced when a simulation run reaches its horizon.

SimulationReport carries the six reported statistics (mean, p95, p99, max
for total and execution latency are the headline ones) together with the
peak queue depths and stage counters. It is returned by Simulation.run().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _format_rate(rate: float) -> str:
    return str(int(rate)) if float(rate).is_integer() else f"{rate:g}"


@dataclass(frozen=True)
class LatencySummary:
    """Point-in-time statistics of one latency series, in seconds."""
    count: int
    mean: float
    p50: float
    p95: float
    p99: float
    max: float

    def format(self) -> str:
        return f"mean {self.mean:.6f}  p95 {self.p95:.6f}  p99 {self.p99:.6f}  max {self.max:.6f}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "p50": self.p50,
            "p95": self.p95,
            "p99": self.p99,
            "max": self.max,
        }


@dataclass(frozen=True)
class SimulationReport:
    """Final statistics of a completed run."""
    horizon_s: float
    producer_rate: float
    consumer_rate: float
    admission_limit: int
    peak_queued: int
    peak_in_flight: int
    generated: int
    dispatched: int
    processed: int
    total: LatencySummary
    execution: LatencySummary

    @property
    def throughput(self) -> float:
        """Completed requests per simulated second."""
        return self.processed / self.horizon_s

    def __str__(self) -> str:
        lines = [
            f"producer rate: {_format_rate(self.producer_rate)} consumer rate: {_format_rate(self.consumer_rate)} "
            f"maximum queued: {self.peak_queued} executing: {self.peak_in_flight}",
            f"total latencies: {self.total.format()}",
            f"exec latencies:  {self.execution.format()}",
        ]
        return "\n".join(lines)

    def format_compact(self) -> str:
        """Single-line rendering, one run per line for rate sweeps."""
        return (
            f"{_format_rate(self.producer_rate)} {_format_rate(self.consumer_rate)}  {self.total.format()}"
            f"  max_queued {self.peak_queued}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "horizon_s": self.horizon_s,
            "producer_rate": self.producer_rate,
            "consumer_rate": self.consumer_rate,
            "admission_limit": self.admission_limit,
            "peak_queued": self.peak_queued,
            "peak_in_flight": self.peak_in_flight,
            "generated": self.generated,
            "dispatched": self.dispatched,
            "processed": self.processed,
            "total": self.total.to_dict(),
            "execution": self.execution.to_dict(),
        }

    def to_flat_dict(self) -> dict[str, Any]:
        """Like to_dict() with latency fields flattened as total_p99 etc."""
        result = self.to_dict()
        for series in ("total", "execution"):
            for key, value in result.pop(series).items():
                result[f"{series}_{key}"] = value
        return result
