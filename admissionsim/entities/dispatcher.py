"""Admission control between the producer and the consumer.

The dispatcher holds every produced request in an unbounded FIFO and, at
instants chosen by its own process, moves requests to the consumer until the
consumer has `limit` requests in flight. The limit is sized so that a full
in-flight queue drains within the latency goal stretched by the goal factor:

    limit = floor(latency_goal * goal_factor / consumer_service_interval)

The pending queue is deliberately unbounded: overload shows up as a growing
backlog rather than as dropped requests.
"""

from __future__ import annotations

import logging
import math
from collections import deque

from admissionsim.entities.consumer import Consumer
from admissionsim.entities.request import Request
from admissionsim.errors import ConfigurationError
from admissionsim.math.stochastic_process import StochasticProcess

logger = logging.getLogger(__name__)

# Absorbs float error in products such as 0.002 * 1.5 / 0.001
_LIMIT_TOLERANCE = 1e-9


def admission_limit(latency_goal: float, goal_factor: float, service_interval: float) -> int:
    """Number of requests the consumer may hold in flight."""
    return math.floor(latency_goal * goal_factor / service_interval + _LIMIT_TOLERANCE)


class Dispatcher:
    """Gate enforcing at most `limit` concurrently admitted requests.

    Args:
        process: Cadence of admission attempts. Its period is the latency
            goal.
        consumer: Downstream consumer receiving admitted requests.
        latency_goal: Admission window in seconds.
        goal_factor: Multiplier applied to the latency goal.

    Raises:
        ConfigurationError: If the computed limit is zero, i.e. the consumer
            cannot finish even one request within the stretched goal.
    """

    def __init__(
        self,
        process: StochasticProcess,
        consumer: Consumer,
        latency_goal: float,
        goal_factor: float,
    ):
        self._process = process
        self._consumer = consumer
        self._pending: deque[Request] = deque()
        self._next_attempt = 0.0
        self._dispatched = 0
        self._limit = admission_limit(latency_goal, goal_factor, consumer.service_interval)

        logger.debug(
            "Consumer limit %d requests, goal %.3fms factor %g",
            self._limit,
            latency_goal * 1000,
            goal_factor,
        )
        if self._limit == 0:
            raise ConfigurationError(
                f"consumer rate too low relative to latency goal: a {consumer.service_interval * 1e6:g}us "
                f"service interval does not fit in {latency_goal * 1e6:g}us x {goal_factor:g}"
            )

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def queued(self) -> int:
        """Requests waiting for admission."""
        return len(self._pending)

    @property
    def dispatched(self) -> int:
        return self._dispatched

    def queue(self, now: float) -> Request:
        """Append a new pending request created at `now`."""
        request = Request(created_at=now)
        self._pending.append(request)
        return request

    def tick(self, now: float) -> None:
        """Admit pending requests if an attempt is due."""
        if now < self._next_attempt:
            return
        self._next_attempt += self._process.get()

        while self._pending and self._consumer.in_flight < self._limit:
            self._consumer.execute(now, self._pending.popleft())
            self._dispatched += 1
