"""Extended P² estimator for streaming quantiles.

The P² algorithm keeps a handful of markers whose heights approximate the
values at chosen cumulative probabilities. Each new observation shifts the
markers' positions; markers that drift more than one rank away from their
desired position are moved by piecewise-parabolic (P²) interpolation,
falling back to linear interpolation when the parabola would break the
ordering of heights. The extended variant tracks several quantiles at
once with 2k + 3 markers for k target probabilities.

Key properties:
- Space: O(k) markers, independent of the number of observations
- Update: O(k) per observation
- Query: O(log k)
- Min and max are exact (the outer markers are the extremes)

Until 2k + 3 observations have been seen the estimator holds them
verbatim and answers queries exactly.

References:
    Jain, Chlamtac. "The P² algorithm for dynamic calculation of quantiles
    and histograms without storing observations" (1985)
    Raatikainen. "Simultaneous estimation of several percentiles" (1987)
"""

from __future__ import annotations

import bisect
import math
from collections.abc import Iterable

from admissionsim.sketching.base import QuantileSketch

DEFAULT_PROBABILITIES = (0.5, 0.95, 0.99)

_FLOAT_BYTES = 8


class ExtendedPSquare(QuantileSketch):
    """Multi-quantile P² estimator.

    Args:
        probabilities: Target cumulative probabilities, each in (0, 1).
            Queries at these probabilities return a marker height directly;
            other quantiles are linearly interpolated between markers.

    Raises:
        ValueError: If probabilities is empty or has a value outside (0, 1).

    Example:
        sketch = ExtendedPSquare((0.5, 0.95, 0.99))
        for latency in latencies:
            sketch.add(latency)
        p99 = sketch.quantile(0.99)
    """

    def __init__(self, probabilities: Iterable[float] = DEFAULT_PROBABILITIES):
        targets = sorted({float(p) for p in probabilities})
        if not targets:
            raise ValueError("At least one target probability is required")
        for p in targets:
            if not 0.0 < p < 1.0:
                raise ValueError(f"Target probabilities must be in (0, 1), got {p}")

        self._probabilities = tuple(targets)

        # 0, p1/2, p1, (p1+p2)/2, p2, ..., pk, (1+pk)/2, 1
        marker_probs = [0.0]
        previous = 0.0
        for p in targets:
            marker_probs.append((previous + p) / 2)
            marker_probs.append(p)
            previous = p
        marker_probs.append((previous + 1.0) / 2)
        marker_probs.append(1.0)
        self._marker_probs = tuple(marker_probs)

        self._heights: list[float] = []
        self._positions: list[int] = []
        self._count = 0

    @property
    def probabilities(self) -> tuple[float, ...]:
        """Target probabilities tracked exactly by a marker."""
        return self._probabilities

    @property
    def marker_count(self) -> int:
        return len(self._marker_probs)

    @property
    def item_count(self) -> int:
        return self._count

    @property
    def memory_bytes(self) -> int:
        # heights, positions and marker probabilities
        return 3 * self.marker_count * _FLOAT_BYTES

    @property
    def min(self) -> float | None:
        """Smallest value seen, or None if empty."""
        return self._heights[0] if self._heights else None

    @property
    def max(self) -> float | None:
        """Largest value seen, or None if empty."""
        return self._heights[-1] if self._heights else None

    def add(self, value: float, count: int = 1) -> None:
        """Add a value to the estimator.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        for _ in range(count):
            self._add_one(float(value))

    def _add_one(self, x: float) -> None:
        self._count += 1
        markers = self.marker_count
        heights = self._heights

        if self._count <= markers:
            bisect.insort(heights, x)
            if self._count == markers:
                self._positions = list(range(markers))
            return

        positions = self._positions

        # Locate the cell [heights[k], heights[k+1]) holding x
        if x < heights[0]:
            heights[0] = x
            cell = 0
        elif x >= heights[-1]:
            heights[-1] = x
            cell = markers - 2
        else:
            cell = bisect.bisect_right(heights, x) - 1

        for i in range(cell + 1, markers):
            positions[i] += 1

        scale = self._count - 1
        for i in range(1, markers - 1):
            drift = self._marker_probs[i] * scale - positions[i]
            if (drift >= 1 and positions[i + 1] - positions[i] > 1) or (
                drift <= -1 and positions[i - 1] - positions[i] < -1
            ):
                step = 1 if drift > 0 else -1
                candidate = self._parabolic(i, step)
                if heights[i - 1] < candidate < heights[i + 1]:
                    heights[i] = candidate
                else:
                    heights[i] = self._linear(i, step)
                positions[i] += step

    def _parabolic(self, i: int, step: int) -> float:
        q, n = self._heights, self._positions
        return q[i] + step / (n[i + 1] - n[i - 1]) * (
            (n[i] - n[i - 1] + step) * (q[i + 1] - q[i]) / (n[i + 1] - n[i])
            + (n[i + 1] - n[i] - step) * (q[i] - q[i - 1]) / (n[i] - n[i - 1])
        )

    def _linear(self, i: int, step: int) -> float:
        q, n = self._heights, self._positions
        return q[i] + step * (q[i + step] - q[i]) / (n[i + step] - n[i])

    def quantile(self, q: float) -> float:
        """Estimate the value at quantile q.

        Returns 0.0 when nothing has been added.

        Raises:
            ValueError: If q is not in [0, 1].
        """
        if not 0 <= q <= 1:
            raise ValueError(f"Quantile must be in [0, 1], got {q}")
        if self._count == 0:
            return 0.0

        heights = self._heights
        if self._count <= self.marker_count:
            # Exact: heights still holds every observation, sorted
            rank = q * (len(heights) - 1)
            lower = math.floor(rank)
            upper = min(lower + 1, len(heights) - 1)
            return heights[lower] + (heights[upper] - heights[lower]) * (rank - lower)

        probs = self._marker_probs
        index = bisect.bisect_left(probs, q)
        if index < len(probs) and math.isclose(probs[index], q, abs_tol=1e-12):
            return heights[index]
        left = index - 1
        fraction = (q - probs[left]) / (probs[index] - probs[left])
        return heights[left] + (heights[index] - heights[left]) * fraction

    def clear(self) -> None:
        self._heights = []
        self._positions = []
        self._count = 0

    def __repr__(self) -> str:
        return f"ExtendedPSquare(probabilities={self._probabilities!r}, count={self._count})"
