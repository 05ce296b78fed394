"""Single virtual server completing admitted requests in FIFO order.

The consumer serves one request at a time. Its service process decides the
gap between two successive completions, so its completion rate is exactly
1 / mean(service time) while it has work. Requests that are in flight but
not at the head are waiting for the server, not being served in parallel;
how many may pile up is bounded only by the dispatcher's admission limit.
"""

from __future__ import annotations

import logging
from collections import deque

from admissionsim.entities.request import Request
from admissionsim.instrumentation.collector import StatisticsCollector
from admissionsim.math.stochastic_process import StochasticProcess

logger = logging.getLogger(__name__)


class Consumer:
    """Completes requests and reports their latencies.

    Args:
        process: Service-time process. Its period is the mean service
            interval (1 / consumer rate).
        collector: Receives (total, execution) latency of each completion.
    """

    def __init__(self, process: StochasticProcess, collector: StatisticsCollector):
        self._process = process
        self._collector = collector
        self._in_flight: deque[Request] = deque()
        self._next_completion = 0.0
        self._processed = 0

    @property
    def service_interval(self) -> float:
        """Mean service time of one request in seconds."""
        return self._process.period

    @property
    def in_flight(self) -> int:
        """Requests admitted but not yet completed."""
        return len(self._in_flight)

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def next_completion(self) -> float:
        return self._next_completion

    def execute(self, now: float, request: Request) -> None:
        """Admit a request; called by the dispatcher only."""
        if not self._in_flight:
            self._next_completion = now + self._process.get()
        request.dispatched_at = now
        self._in_flight.append(request)

    def tick(self, now: float) -> None:
        """Complete every request whose service time has elapsed by now."""
        while self._in_flight and now >= self._next_completion:
            request = self._in_flight.popleft()
            request.completed_at = now
            self._collector.collect(now - request.created_at, now - request.dispatched_at)
            self._processed += 1
            self._next_completion += self._process.get()
