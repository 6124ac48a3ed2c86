"""The network bridge — a registry pairing clients with servers.

There is no real network, so something has to play its part: when a
client connects to ``ws://localhost/chat`` it needs to find the server
listening there, and when it sends a message the message has to reach
that server.  The **NetworkBridge** is that something.

It keeps, for each normalised URL:

    - **At most one server** listening at that address.
    - **An ordered list of clients** attached to that address.

The bridge does not own the endpoints: it only remembers them for
lookup until they are removed.  Every lookup reflects the latest
attach or remove immediately; there is no caching.

Policy on conflicts: a second server at an occupied address is
rejected with ``AddressInUseError``, the way ``bind()`` fails with
EADDRINUSE on a real OS.

The bridge also carries the scheduler and logger its endpoints share,
so a test can build an isolated network with one ``NetworkBridge()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from py_mock_socket.errors import AddressInUseError
from py_mock_socket.logging import Logger, LogLevel
from py_mock_socket.scheduler import Scheduler, TaskQueue
from py_mock_socket.uri import normalize_url

if TYPE_CHECKING:
    from py_mock_socket.server import Server
    from py_mock_socket.websocket import WebSocket


@dataclass
class _Connection:
    """Registry entry for one address."""

    server: Server | None = None
    clients: list[WebSocket] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when nothing is attached at this address."""
        return self.server is None and not self.clients


class NetworkBridge:
    """Route connections and messages between in-process endpoints."""

    def __init__(
        self,
        *,
        scheduler: Scheduler | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create an empty bridge.

        Args:
            scheduler: Runs deferred handshakes; a new ``TaskQueue``
                when omitted.
            logger: Receives diagnostics from every attached endpoint.

        """
        self._connections: dict[str, _Connection] = {}
        self._scheduler: Scheduler = scheduler if scheduler is not None else TaskQueue()
        self._logger = logger if logger is not None else Logger()

    @property
    def scheduler(self) -> Scheduler:
        """Return the scheduler endpoints defer their handshakes to."""
        return self._scheduler

    @property
    def logger(self) -> Logger:
        """Return the shared diagnostic logger."""
        return self._logger

    def attach_server(self, server: Server, url: str) -> Server:
        """Register *server* as the listener at *url*.

        Raises:
            AddressInUseError: If another server already listens there.

        """
        key = normalize_url(url)
        connection = self._connections.setdefault(key, _Connection())
        if connection.server is not None:
            msg = f"A mock server is already listening on {key}"
            raise AddressInUseError(msg)
        connection.server = server
        self._logger.log(LogLevel.DEBUG, f"Server listening on {key}", source="bridge", url=key)
        return server

    def attach_client(self, client: WebSocket, url: str) -> Server | None:
        """Attach *client* at *url* and return the server there, if any."""
        key = normalize_url(url)
        connection = self._connections.setdefault(key, _Connection())
        if client not in connection.clients:
            connection.clients.append(client)
        self._logger.log(LogLevel.DEBUG, f"Client attached to {key}", source="bridge", url=key)
        return connection.server

    def server_lookup(self, url: str) -> Server | None:
        """Return the server listening at *url*, or None."""
        connection = self._connections.get(normalize_url(url))
        return connection.server if connection is not None else None

    def clients_lookup(self, url: str) -> list[WebSocket]:
        """Return a snapshot of the clients attached at *url*."""
        connection = self._connections.get(normalize_url(url))
        return list(connection.clients) if connection is not None else []

    def remove_server(self, url: str) -> None:
        """Detach the server at *url*; attached clients stay registered."""
        key = normalize_url(url)
        connection = self._connections.get(key)
        if connection is None or connection.server is None:
            return
        connection.server = None
        self._logger.log(LogLevel.DEBUG, f"Server removed from {key}", source="bridge", url=key)
        self._prune(key)

    def remove_client(self, client: WebSocket, url: str) -> None:
        """Detach *client* from *url*; a no-op if it is not attached."""
        key = normalize_url(url)
        connection = self._connections.get(key)
        if connection is None or client not in connection.clients:
            return
        connection.clients.remove(client)
        self._logger.log(LogLevel.DEBUG, f"Client removed from {key}", source="bridge", url=key)
        self._prune(key)

    def addresses(self) -> list[str]:
        """Return every address with a server or client attached."""
        return sorted(self._connections)

    def _prune(self, key: str) -> None:
        """Drop the entry for *key* once nothing is attached."""
        connection = self._connections.get(key)
        if connection is not None and connection.is_empty():
            del self._connections[key]

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"NetworkBridge(addresses={len(self._connections)})"


# -- Default bridge ------------------------------------------------------------

_default_bridge: NetworkBridge | None = None


def default_bridge() -> NetworkBridge:
    """Return the bridge used by endpoints created without one."""
    global _default_bridge  # noqa: PLW0603
    if _default_bridge is None:
        _default_bridge = NetworkBridge()
    return _default_bridge


def reset_default_bridge() -> NetworkBridge:
    """Replace the default bridge with a fresh, empty one and return it."""
    global _default_bridge  # noqa: PLW0603
    _default_bridge = NetworkBridge()
    return _default_bridge
