from enum import Enum

from admissionsim.errors import ConfigurationError


class ProcessKind(Enum):
    UNIFORM = "uniform"    # Constant interval equal to the period
    POISSON = "poisson"    # Exponential interval, mean = period
    EXPDELAY = "expdelay"  # period * (1 + Exp(1)): hard floor, long tail
    CAPDELAY = "capdelay"  # period * U(1, cap_factor): hard floor, bounded jitter

    @classmethod
    def parse(cls, name: "ProcessKind | str") -> "ProcessKind":
        """Resolve a kind from its command-line name (case-insensitive)."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ConfigurationError(f"unknown process {name!r} (expected one of: {choices})") from None
