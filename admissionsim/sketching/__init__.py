"""Streaming quantile estimation with bounded memory.

Example:
    from admissionsim.sketching import ExtendedPSquare

    sketch = ExtendedPSquare((0.5, 0.95, 0.99))
    for latency in latencies:
        sketch.add(latency)
    print(f"p99: {sketch.percentile(99)}")
"""

from admissionsim.sketching.base import QuantileSketch, Sketch
from admissionsim.sketching.p_square import DEFAULT_PROBABILITIES, ExtendedPSquare

__all__ = [
    "DEFAULT_PROBABILITIES",
    "ExtendedPSquare",
    "QuantileSketch",
    "Sketch",
]
