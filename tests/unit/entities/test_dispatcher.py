"""Tests for Dispatcher and the admission limit."""

import pytest

from admissionsim import (
    ConfigurationError,
    Consumer,
    Dispatcher,
    StatisticsCollector,
    StochasticProcess,
    admission_limit,
)


def _pipeline(consumer_period=0.001, goal=0.002, factor=1.5):
    consumer = Consumer(StochasticProcess("uniform", consumer_period), StatisticsCollector())
    dispatcher = Dispatcher(StochasticProcess("uniform", goal), consumer, latency_goal=goal, goal_factor=factor)
    return dispatcher, consumer


class TestAdmissionLimit:
    @pytest.mark.parametrize(
        "goal,factor,interval,expected",
        [
            (0.002, 1.5, 0.001, 3),
            (0.0005, 1.5, 0.0005, 1),
            (0.0005, 1.5, 0.001, 0),
            (0.002, 10.0, 0.001, 20),
            (0.001, 1.0, 0.001, 1),
        ],
    )
    def test_values(self, goal, factor, interval, expected):
        assert admission_limit(goal, factor, interval) == expected

    def test_zero_limit_rejected(self):
        with pytest.raises(ConfigurationError, match="consumer rate too low"):
            _pipeline(consumer_period=0.001, goal=0.0005, factor=1.5)

    def test_limit_of_one_accepted(self):
        dispatcher, _ = _pipeline(consumer_period=0.0005, goal=0.0005, factor=1.5)

        assert dispatcher.limit == 1


class TestDispatcher:
    def test_queue_returns_pending_request(self):
        dispatcher, _ = _pipeline()

        request = dispatcher.queue(0.25)

        assert request.created_at == 0.25
        assert request.dispatched_at is None
        assert dispatcher.queued == 1

    def test_admits_up_to_limit(self):
        dispatcher, consumer = _pipeline()
        for _ in range(5):
            dispatcher.queue(0.0)

        dispatcher.tick(0.0)

        assert consumer.in_flight == 3
        assert dispatcher.queued == 2
        assert dispatcher.dispatched == 3

    def test_admission_follows_cadence(self):
        """Between attempts nothing is admitted even when the consumer has room."""
        dispatcher, consumer = _pipeline()
        for _ in range(5):
            dispatcher.queue(0.0)
        dispatcher.tick(0.0)

        consumer.tick(0.0015)
        assert consumer.in_flight == 2

        dispatcher.tick(0.0015)
        assert dispatcher.queued == 2

        dispatcher.tick(0.002)
        assert consumer.in_flight == 3
        assert dispatcher.queued == 1

    def test_fifo_order(self):
        dispatcher, consumer = _pipeline()
        requests = [dispatcher.queue(t * 1e-4) for t in range(4)]

        dispatcher.tick(0.0)

        assert [r.dispatched_at for r in requests] == [0.0, 0.0, 0.0, None]
        consumer.tick(0.001)
        assert requests[0].completed_at == pytest.approx(0.001)
        assert requests[1].completed_at is None

    def test_pending_queue_is_unbounded(self):
        dispatcher, consumer = _pipeline()
        for _ in range(50_000):
            dispatcher.queue(0.0)

        dispatcher.tick(0.0)

        assert dispatcher.queued == 50_000 - 3
        assert consumer.in_flight == 3

    def test_empty_tick_is_harmless(self):
        dispatcher, consumer = _pipeline()

        dispatcher.tick(0.0)

        assert dispatcher.dispatched == 0
        assert consumer.in_flight == 0
