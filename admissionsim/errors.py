"""Exceptions raised by admissionsim."""


class ConfigurationError(ValueError):
    """Raised when a pipeline cannot be built from the given parameters.

    Always raised at construction time, before any simulated time elapses.
    """
