"""The client endpoint — a simulated WebSocket.

``WebSocket`` mirrors the browser's WebSocket API as closely as Python
allows, so code written against a real socket can be tested without a
network.  Its lifecycle follows the standard four-state machine:

    CONNECTING → OPEN → CLOSING → CLOSED

Construction attaches the socket to the network bridge straight away,
but the outcome of the handshake is **deferred** to a later scheduler
turn.  That leaves the caller time to register ``open`` / ``error``
handlers after the constructor returns:

    - **Server listening** — the server sees ``connection`` first, then
      the client sees ``open``.  The server learns about its new peer
      before the client believes it is open, so a ``send()`` inside the
      client's open handler always has somewhere to go.
    - **Nobody listening** (or the server stopped before the handshake
      turn) — the client goes straight to CLOSED and sees ``error``
      followed by ``close``.  No exception is raised, matching how
      browsers report a refused connection.

CLOSING is only ever passed through inside ``close()``; it is never
observed between turns.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import TYPE_CHECKING

from py_mock_socket.bridge import NetworkBridge, default_bridge
from py_mock_socket.close_codes import CloseCode, is_sendable
from py_mock_socket.errors import InvalidArgumentError, InvalidStateError
from py_mock_socket.event_target import EventTarget, PrimaryHandler
from py_mock_socket.events import make_close_event, make_event, make_message_event
from py_mock_socket.logging import LogLevel
from py_mock_socket.uri import normalize_url

if TYPE_CHECKING:
    from py_mock_socket.server import Server

# -- Constants (no magic numbers) -------------------------------------------

DEFAULT_BINARY_TYPE = "blob"
BINARY_TYPES = frozenset({"blob", "arraybuffer"})
REFUSED_CLOSE_CODE = CloseCode.NORMAL
MAX_REASON_BYTES = 123


class ReadyState(IntEnum):
    """The four states of a WebSocket connection."""

    CONNECTING = 0
    OPEN = 1
    CLOSING = 2
    CLOSED = 3


def select_protocol(protocols: str | Sequence[str] | None) -> str:
    """Pick the sub-protocol a socket reports.

    A string is used as-is; a non-empty list or tuple contributes its
    first entry; anything else means no protocol.
    """
    if isinstance(protocols, str):
        return protocols
    if isinstance(protocols, (list, tuple)) and protocols and isinstance(protocols[0], str):
        return protocols[0]
    return ""


class WebSocket(EventTarget):
    """A client endpoint connected through a ``NetworkBridge``."""

    CONNECTING = ReadyState.CONNECTING
    OPEN = ReadyState.OPEN
    CLOSING = ReadyState.CLOSING
    CLOSED = ReadyState.CLOSED

    def __init__(
        self,
        url: str,
        protocols: str | Sequence[str] = "",
        *,
        bridge: NetworkBridge | None = None,
    ) -> None:
        """Create a socket and start connecting to *url*.

        Args:
            url: Address of the server to connect to.
            protocols: A sub-protocol name or a list of them.
            bridge: The network to connect through; the default bridge
                when omitted.

        Raises:
            InvalidArgumentError: If *url* is missing or malformed.

        """
        if not url:
            msg = "Failed to construct 'WebSocket': 1 argument required, but only 0 present."
            raise InvalidArgumentError(msg)

        self._bridge = bridge if bridge is not None else default_bridge()
        super().__init__(logger=self._bridge.logger)

        self._url = normalize_url(url)
        self._protocol = select_protocol(protocols)
        self._binary_type = DEFAULT_BINARY_TYPE
        self._ready_state = ReadyState.CONNECTING

        self._onopen = PrimaryHandler(self, "open")
        self._onmessage = PrimaryHandler(self, "message")
        self._onclose = PrimaryHandler(self, "close")
        self._onerror = PrimaryHandler(self, "error")

        server = self._bridge.attach_client(self, self._url)

        def handshake(sock: WebSocket) -> None:
            sock._finish_handshake(server)

        self._bridge.scheduler.defer(handshake, self)

    # -- Properties ----------------------------------------------------------

    @property
    def url(self) -> str:
        """Return the normalised URL this socket connects to."""
        return self._url

    @property
    def protocol(self) -> str:
        """Return the selected sub-protocol ("" when none)."""
        return self._protocol

    @property
    def ready_state(self) -> ReadyState:
        """Return the current connection state."""
        return self._ready_state

    @property
    def extensions(self) -> str:
        """Return the negotiated extensions (never any in the simulation)."""
        return ""

    @property
    def bridge(self) -> NetworkBridge:
        """Return the bridge this socket is attached through."""
        return self._bridge

    @property
    def onopen(self) -> PrimaryHandler:
        """Return the primary ``open`` slot."""
        return self._onopen

    @property
    def onmessage(self) -> PrimaryHandler:
        """Return the primary ``message`` slot."""
        return self._onmessage

    @property
    def onclose(self) -> PrimaryHandler:
        """Return the primary ``close`` slot."""
        return self._onclose

    @property
    def onerror(self) -> PrimaryHandler:
        """Return the primary ``error`` slot."""
        return self._onerror

    @property
    def binary_type(self) -> str:
        """Return how binary messages would be exposed ("blob" by default)."""
        return self._binary_type

    @binary_type.setter
    def binary_type(self, value: str) -> None:
        """Set the binary type; stored only, payloads pass through untouched.

        Raises:
            InvalidArgumentError: If *value* is not "blob" or "arraybuffer".

        """
        if value not in BINARY_TYPES:
            msg = f"binary_type must be one of {sorted(BINARY_TYPES)}, got {value!r}"
            raise InvalidArgumentError(msg)
        self._binary_type = value

    # -- Operations ----------------------------------------------------------

    def send(self, data: object) -> None:
        """Send *data* to the server at this socket's URL.

        If no server is listening any more, or the listening server is
        not the one this socket connected to, the data is silently
        dropped, like bytes written to a connection the peer has gone
        away from.

        Raises:
            InvalidStateError: If the socket is CLOSING or CLOSED.

        """
        if self._ready_state in {ReadyState.CLOSING, ReadyState.CLOSED}:
            msg = "WebSocket is already in CLOSING or CLOSED state"
            raise InvalidStateError(msg)

        server = self._bridge.server_lookup(self._url)
        if server is None:
            return
        if self._ready_state is ReadyState.OPEN and not server._has_peer(self):
            return
        event = make_message_event("message", self._url, data, target=server, source=self)
        server.dispatch_event(event, data)

    def close(self, code: int = CloseCode.NORMAL, reason: str = "") -> None:
        """Close the connection.

        Does nothing unless the socket is OPEN.  Otherwise the socket
        leaves the bridge, becomes CLOSED, and receives a ``close``
        event; the server that accepted it receives the same event.

        Raises:
            InvalidArgumentError: If *code* is not 1000 or in 3000-4999,
                or *reason* is not a string of at most 123 UTF-8 bytes.

        """
        if not is_sendable(code):
            msg = f"The close code must be 1000 or between 3000 and 4999, got {code}"
            raise InvalidArgumentError(msg)
        if not isinstance(reason, str):
            msg = f"The close reason must be a string, got {type(reason).__name__}"
            raise InvalidArgumentError(msg)
        if len(reason.encode("utf-8")) > MAX_REASON_BYTES:
            msg = f"The close reason must not be longer than {MAX_REASON_BYTES} UTF-8 bytes"
            raise InvalidArgumentError(msg)

        if self._ready_state is not ReadyState.OPEN:
            return

        server = self._bridge.server_lookup(self._url)
        accepted = server is not None and server._release(self)
        self._bridge.remove_client(self, self._url)

        self._ready_state = ReadyState.CLOSING
        event = make_close_event("close", target=self, code=code, reason=reason)
        self._ready_state = ReadyState.CLOSED
        self.dispatch_event(event)

        if server is not None and accepted:
            server.dispatch_event(event, self)

    # -- Bridge callbacks ----------------------------------------------------

    def _finish_handshake(self, server: Server | None) -> None:
        """Complete the deferred connection attempt."""
        if self._ready_state is not ReadyState.CONNECTING:
            return

        if server is not None and server.listening:
            server._accept(self)
            self._ready_state = ReadyState.OPEN
            server.dispatch_event(make_event("connection", target=server), server, self)
            self.dispatch_event(make_event("open", target=self))
            return

        self._ready_state = ReadyState.CLOSED
        self._bridge.remove_client(self, self._url)
        self.dispatch_event(make_event("error", target=self))
        self.dispatch_event(
            make_close_event("close", target=self, code=REFUSED_CLOSE_CODE, was_clean=False),
        )
        self.logger.log(
            LogLevel.WARNING,
            f"WebSocket connection to '{self._url}' failed",
            source="websocket",
            url=self._url,
        )

    def _server_closed(self, code: int, reason: str) -> None:
        """Close this socket because its server shut down."""
        if self._ready_state is ReadyState.CLOSED:
            return
        self._bridge.remove_client(self, self._url)
        self._ready_state = ReadyState.CLOSED
        self.dispatch_event(make_close_event("close", target=self, code=code, reason=reason))

    def _deliver(self, data: object, origin: str, source: object) -> bool:
        """Dispatch a message from the server; False if not OPEN."""
        if self._ready_state is not ReadyState.OPEN:
            return False
        self.dispatch_event(make_message_event("message", origin, data, target=self, source=source))
        return True

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"WebSocket(url={self._url!r}, ready_state={self._ready_state.name})"
