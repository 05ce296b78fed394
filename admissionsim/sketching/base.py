"""Base protocols for streaming quantile sketches.

A sketch summarises a stream of values in bounded memory and answers
approximate queries about it. Latency collection in a long run can see
millions of samples, so the collector never stores them individually; it
feeds them to a QuantileSketch instead.

- Sketch: common operations (add, item_count, memory_bytes, clear)
- QuantileSketch: quantile / percentile estimation
"""

from abc import ABC, abstractmethod


class Sketch(ABC):
    """Base protocol for single-pass, bounded-memory summaries."""

    @abstractmethod
    def add(self, value: float, count: int = 1) -> None:
        """Add a value to the sketch.

        Args:
            value: The value to add.
            count: Number of occurrences to add (default 1).
        """

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Approximate memory footprint in bytes. Independent of item_count."""

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Total number of values added."""

    @abstractmethod
    def clear(self) -> None:
        """Reset the sketch to its initial empty state."""


class QuantileSketch(Sketch):
    """Protocol for sketches that estimate quantiles (p50, p95, p99)."""

    @abstractmethod
    def quantile(self, q: float) -> float:
        """Estimate the value at quantile q.

        Args:
            q: Quantile in [0, 1]; 0.95 is the 95th percentile.

        Returns:
            Estimated value, or 0.0 if nothing was added yet.

        Raises:
            ValueError: If q is not in [0, 1].
        """

    def percentile(self, p: float) -> float:
        """Convenience wrapper taking a percentile in [0, 100]."""
        if not 0 <= p <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {p}")
        return self.quantile(p / 100.0)
