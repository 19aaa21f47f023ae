"""Pytest configuration and shared fixtures."""

import threading

import pytest

from servicebox.core.container import Container
from servicebox.logging_config import configure_logging


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session", autouse=True)
def _debug_logging():
    """Route structlog through stdlib logging so caplog sees container events."""
    configure_logging(level="DEBUG", colors=False)


class CountingFactory:
    """Callable provider that records how often it ran."""

    def __init__(self, make=object):
        self.make = make
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, container):
        with self._lock:
            self.calls += 1
        return self.make()


@pytest.fixture
def container():
    return Container()


@pytest.fixture
def counting():
    """Build ``CountingFactory`` providers."""
    return CountingFactory
