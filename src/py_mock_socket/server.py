"""The server endpoint — the listening side of a simulated connection.

A ``Server`` claims a URL on a network bridge.  Clients created for
that URL connect to it, and the server observes them through events:

    - ``connection`` — ``handler(event, server, client)`` when a client
      finishes its handshake.
    - ``message`` — ``handler(event, data)``; ``event.source`` is the
      client that sent it, so the server can reply with
      ``server.send(reply, to=event.source)``.
    - ``close`` — ``handler(event, client)`` when a client closes, and
      ``handler(event)`` when the server itself closes.

The extra arguments are positional, so a handler must accept them: a
``close`` handler that serves both cases is ``handler(event, *extra)``.
A handler that only takes the event fails with ``TypeError``, which is
logged like any other listener failure.  Servers never dispatch
``error``.

Only one server may listen on an address at a time; a second one gets
``AddressInUseError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_mock_socket.bridge import NetworkBridge, default_bridge
from py_mock_socket.close_codes import CloseCode
from py_mock_socket.event_target import EventTarget, PrimaryHandler
from py_mock_socket.events import make_close_event
from py_mock_socket.logging import LogLevel
from py_mock_socket.uri import normalize_url

if TYPE_CHECKING:
    from py_mock_socket.websocket import WebSocket


class Server(EventTarget):
    """A mock server listening on one address of a ``NetworkBridge``.

    The server keeps its own list of peers: a client joins it when its
    handshake completes and leaves it when either side closes.  Only
    peers can be sent to, and only peers' ``close`` events reach it.
    """

    def __init__(self, url: str, *, bridge: NetworkBridge | None = None) -> None:
        """Create a server and start listening on *url*.

        Raises:
            InvalidArgumentError: If *url* is missing or malformed.
            AddressInUseError: If another server listens on *url*.

        """
        self._bridge = bridge if bridge is not None else default_bridge()
        super().__init__(logger=self._bridge.logger)
        self._url = normalize_url(url)
        self._peers: list[WebSocket] = []

        self._onconnection = PrimaryHandler(self, "connection")
        self._onmessage = PrimaryHandler(self, "message")
        self._onclose = PrimaryHandler(self, "close")

        self._bridge.attach_server(self, self._url)
        self._listening = True

    @property
    def url(self) -> str:
        """Return the normalised URL this server listens on."""
        return self._url

    @property
    def listening(self) -> bool:
        """Return True while the server is registered on the bridge."""
        return self._listening

    @property
    def bridge(self) -> NetworkBridge:
        """Return the bridge this server is attached to."""
        return self._bridge

    @property
    def onconnection(self) -> PrimaryHandler:
        """Return the primary ``connection`` slot."""
        return self._onconnection

    @property
    def onmessage(self) -> PrimaryHandler:
        """Return the primary ``message`` slot."""
        return self._onmessage

    @property
    def onclose(self) -> PrimaryHandler:
        """Return the primary ``close`` slot."""
        return self._onclose

    def clients(self) -> list[WebSocket]:
        """Return the peers this server accepted and still holds."""
        return list(self._peers)

    def send(self, data: object, *, to: WebSocket | None = None) -> int:
        """Send *data* to one peer, or broadcast it to every peer.

        A recipient that is not one of this server's peers, or is no
        longer OPEN, is skipped.

        Args:
            data: The payload, delivered untouched.
            to: A single recipient; all peers when omitted.

        Returns:
            The number of clients the message was delivered to.

        """
        if to is not None and to not in self._peers:
            return 0
        recipients = [to] if to is not None else self.clients()
        return sum(1 for client in recipients if client._deliver(data, self._url, self))

    def stop(self) -> None:
        """Stop listening and let go of every peer.

        Peers are not closed: they stay OPEN, but nothing they send
        reaches this server and it can no longer send to them.
        """
        if not self._listening:
            return
        self._bridge.remove_server(self._url)
        self._listening = False
        self._peers.clear()

    def close(self, code: int = CloseCode.NORMAL, reason: str = "") -> None:
        """Shut the server down, closing every peer first.

        Each peer becomes CLOSED and receives a ``close`` event with
        *code* and *reason*; then the server stops listening and
        dispatches ``close`` on itself.  Closing twice does nothing.
        """
        if not self._listening:
            return
        peers = self.clients()
        self._peers.clear()
        for client in peers:
            client._server_closed(code, reason)
        self.stop()
        self.logger.log(
            LogLevel.INFO,
            f"Server on {self._url} closed ({len(peers)} client(s) disconnected)",
            source="server",
            url=self._url,
        )
        self.dispatch_event(make_close_event("close", target=self, code=code, reason=reason))

    # -- Client callbacks ----------------------------------------------------

    def _accept(self, client: WebSocket) -> None:
        """Record *client* as a peer once its handshake completes."""
        if client not in self._peers:
            self._peers.append(client)

    def _release(self, client: WebSocket) -> bool:
        """Forget *client*; True if it was a peer."""
        if client not in self._peers:
            return False
        self._peers.remove(client)
        return True

    def _has_peer(self, client: WebSocket) -> bool:
        return client in self._peers

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"Server(url={self._url!r}, listening={self._listening}, peers={len(self._peers)})"
