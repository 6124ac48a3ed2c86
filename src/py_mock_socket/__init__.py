"""py-mock-socket — an in-process WebSocket simulation for tests.

Re-exports public symbols so callers can write::

    from py_mock_socket import NetworkBridge, Server, WebSocket

The optional Flask inspector lives in ``py_mock_socket.web`` and is
not imported here, so Flask is only needed when it is used.
"""

from py_mock_socket.bridge import NetworkBridge, default_bridge, reset_default_bridge
from py_mock_socket.close_codes import CloseCode
from py_mock_socket.errors import (
    AddressInUseError,
    InvalidArgumentError,
    InvalidStateError,
    MockSocketError,
    SchedulerError,
)
from py_mock_socket.event_target import EventTarget, PrimaryHandler
from py_mock_socket.events import (
    CloseEvent,
    Event,
    MessageEvent,
    make_close_event,
    make_event,
    make_message_event,
)
from py_mock_socket.logging import LogEntry, Logger, LogLevel
from py_mock_socket.scheduler import AsyncioScheduler, Scheduler, TaskQueue
from py_mock_socket.server import Server
from py_mock_socket.uri import normalize_url
from py_mock_socket.websocket import ReadyState, WebSocket

__all__ = [
    "AddressInUseError",
    "AsyncioScheduler",
    "CloseCode",
    "CloseEvent",
    "Event",
    "EventTarget",
    "InvalidArgumentError",
    "InvalidStateError",
    "LogEntry",
    "LogLevel",
    "Logger",
    "MessageEvent",
    "MockSocketError",
    "NetworkBridge",
    "PrimaryHandler",
    "ReadyState",
    "Scheduler",
    "SchedulerError",
    "Server",
    "TaskQueue",
    "WebSocket",
    "default_bridge",
    "make_close_event",
    "make_event",
    "make_message_event",
    "normalize_url",
    "reset_default_bridge",
]
