from dataclasses import dataclass


@dataclass(slots=True)
class Request:
    """One unit of synthetic work moving through the pipeline.

    Timestamps are simulated seconds. A request is held by exactly one
    queue at a time: the dispatcher's pending queue, then the consumer's
    in-flight queue, and it is dropped once its latencies are collected.
    Invariant: created_at <= dispatched_at <= completed_at once set.
    """
    created_at: float
    dispatched_at: float | None = None
    completed_at: float | None = None

    @property
    def total_latency(self) -> float | None:
        """Creation to completion, or None while unfinished."""
        if self.completed_at is None:
            return None
        return self.completed_at - self.created_at

    @property
    def execution_latency(self) -> float | None:
        """Dispatch to completion, or None while unfinished."""
        if self.completed_at is None or self.dispatched_at is None:
            return None
        return self.completed_at - self.dispatched_at
