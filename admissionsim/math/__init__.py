"""Interval generators for the simulated pipeline stages."""

from admissionsim.math.process_kind import ProcessKind
from admissionsim.math.stochastic_process import StochasticProcess

__all__ = [
    "ProcessKind",
    "StochasticProcess",
]
