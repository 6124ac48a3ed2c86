"""Shared fixtures: every test gets its own isolated network."""

import pytest

from py_mock_socket.bridge import NetworkBridge
from py_mock_socket.scheduler import TaskQueue


@pytest.fixture
def queue() -> TaskQueue:
    """Return a fresh task queue."""
    return TaskQueue()


@pytest.fixture
def bridge(queue: TaskQueue) -> NetworkBridge:
    """Return an empty bridge driven by the ``queue`` fixture."""
    return NetworkBridge(scheduler=queue)
