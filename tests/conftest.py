"""Pytest configuration for the MLFQ scheduler simulator tests.

Charts are rendered with the non-interactive Agg backend so visualization
tests never open a window.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from core.process import Process
from core.queue import Queue
from core.scheduler_base import QueueType, SchedulerConfig
from schedulers import MLFQScheduler


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for a single component"
    )
    config.addinivalue_line(
        "markers", "integration: Tests running whole simulations end to end"
    )


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def config():
    """Default scheduler configuration (quanta 10, 30, 50; blocking 50; tick 10)."""
    return SchedulerConfig()


@pytest.fixture
def scheduler(config):
    """Create an empty MLFQ scheduler."""
    return MLFQScheduler(config=config)


@pytest.fixture
def cpu_queue():
    """Create a tier-0 CPU queue with quantum 10."""
    return Queue(10, 0, QueueType.CPU_QUEUE)


@pytest.fixture
def blocking_queue():
    """Create a blocking queue with budget 50."""
    return Queue(50, 0, QueueType.BLOCKING_QUEUE)


@pytest.fixture
def make_process():
    """Factory for processes with a given execution pattern."""
    def _make(pid, *pattern):
        return Process(pid, list(pattern))
    return _make
