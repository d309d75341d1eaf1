"""Pytest fixtures for publisher tests."""

import pytest
from loguru import logger

from pubnode import AsyncPublisher, Publisher


class Recorder:
    """Listener that remembers every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args):
        self.calls.append(args)

    @property
    def values(self) -> list:
        """First argument of each call."""
        return [args[0] if args else None for args in self.calls]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def publisher() -> Publisher:
    return Publisher("ping", sync=True)


@pytest.fixture
def children():
    """Synchronous completed/failed children with a recorder on each."""
    completed = Publisher("save.completed", sync=True)
    failed = Publisher("save.failed", sync=True)
    completed_calls = Recorder()
    failed_calls = Recorder()
    completed.listen(completed_calls)
    failed.listen(failed_calls)
    return completed, failed, completed_calls, failed_calls


@pytest.fixture
def async_publisher(children) -> AsyncPublisher:
    completed, failed, _, _ = children
    return AsyncPublisher("save", completed=completed, failed=failed, sync=True)
