"""
Shared pytest fixtures for admissionsim tests.
"""

import logging
from pathlib import Path

import pytest

from admissionsim import PipelineConfig


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture
def make_config():
    """
    Factory for PipelineConfig with test-friendly defaults: uniform
    processes at 1000 req/s, a 2ms latency goal (admission limit 3), a 20us
    clock step and a fixed seed. Override any field by keyword.
    """

    def _make(**overrides) -> PipelineConfig:
        fields = dict(
            horizon_s=1.0,
            producer_kind="uniform",
            producer_rate=1000,
            dispatcher_kind="uniform",
            consumer_kind="uniform",
            consumer_rate=1000,
            latency_goal_us=2000,
            goal_factor=1.5,
            quantum_s=20e-6,
            seed=1234,
        )
        fields.update(overrides)
        return PipelineConfig(**fields)

    return _make


@pytest.fixture(autouse=True)
def reset_admissionsim_logging():
    """Reset the library logger to its silent default around each test."""
    logger = logging.getLogger("admissionsim")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
