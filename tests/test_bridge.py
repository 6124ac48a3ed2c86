"""Tests for the network bridge registry."""

import pytest

from py_mock_socket.bridge import NetworkBridge, default_bridge, reset_default_bridge
from py_mock_socket.errors import AddressInUseError
from py_mock_socket.scheduler import TaskQueue


class _Endpoint:
    """Stand-in endpoint; the bridge only stores references."""


class TestServers:
    """Verify server registration."""

    def test_attach_and_lookup(self, bridge: NetworkBridge) -> None:
        """An attached server is found at its address."""
        server = _Endpoint()
        assert bridge.attach_server(server, "ws://x/echo") is server  # type: ignore[arg-type]
        assert bridge.server_lookup("ws://x/echo") is server

    def test_lookup_normalises(self, bridge: NetworkBridge) -> None:
        """Equivalent spellings resolve to the same server."""
        server = _Endpoint()
        bridge.attach_server(server, "ws://X:80")  # type: ignore[arg-type]
        assert bridge.server_lookup("ws://x/") is server

    def test_second_server_rejected(self, bridge: NetworkBridge) -> None:
        """Only one server may listen on an address."""
        first = _Endpoint()
        bridge.attach_server(first, "ws://x/")  # type: ignore[arg-type]
        with pytest.raises(AddressInUseError):
            bridge.attach_server(_Endpoint(), "ws://x/")  # type: ignore[arg-type]
        assert bridge.server_lookup("ws://x/") is first

    def test_remove_server(self, bridge: NetworkBridge) -> None:
        """A removed server is no longer found; the address can be reused."""
        bridge.attach_server(_Endpoint(), "ws://x/")  # type: ignore[arg-type]
        bridge.remove_server("ws://x/")
        assert bridge.server_lookup("ws://x/") is None
        replacement = _Endpoint()
        bridge.attach_server(replacement, "ws://x/")  # type: ignore[arg-type]
        assert bridge.server_lookup("ws://x/") is replacement

    def test_remove_server_keeps_clients(self, bridge: NetworkBridge) -> None:
        """Detaching the server leaves clients registered."""
        client = _Endpoint()
        bridge.attach_server(_Endpoint(), "ws://x/")  # type: ignore[arg-type]
        bridge.attach_client(client, "ws://x/")  # type: ignore[arg-type]
        bridge.remove_server("ws://x/")
        assert bridge.clients_lookup("ws://x/") == [client]

    def test_lookup_unknown(self, bridge: NetworkBridge) -> None:
        """Unknown addresses give None / empty, never an error."""
        assert bridge.server_lookup("ws://nowhere/") is None
        assert bridge.clients_lookup("ws://nowhere/") == []


class TestClients:
    """Verify client registration."""

    def test_attach_returns_server(self, bridge: NetworkBridge) -> None:
        """Attaching a client reports the listening server."""
        server = _Endpoint()
        bridge.attach_server(server, "ws://x/")  # type: ignore[arg-type]
        assert bridge.attach_client(_Endpoint(), "ws://x/") is server  # type: ignore[arg-type]

    def test_attach_without_server(self, bridge: NetworkBridge) -> None:
        """No server means None, not an error."""
        assert bridge.attach_client(_Endpoint(), "ws://x/") is None  # type: ignore[arg-type]

    def test_clients_in_attach_order(self, bridge: NetworkBridge) -> None:
        """Clients are listed in the order they attached."""
        a, b = _Endpoint(), _Endpoint()
        bridge.attach_client(a, "ws://x/")  # type: ignore[arg-type]
        bridge.attach_client(b, "ws://x/")  # type: ignore[arg-type]
        assert bridge.clients_lookup("ws://x/") == [a, b]

    def test_attach_twice_is_one_entry(self, bridge: NetworkBridge) -> None:
        """The same client is only listed once."""
        a = _Endpoint()
        bridge.attach_client(a, "ws://x/")  # type: ignore[arg-type]
        bridge.attach_client(a, "ws://x/")  # type: ignore[arg-type]
        assert bridge.clients_lookup("ws://x/") == [a]

    def test_lookup_is_a_snapshot(self, bridge: NetworkBridge) -> None:
        """Mutating the returned list does not touch the registry."""
        bridge.attach_client(_Endpoint(), "ws://x/")  # type: ignore[arg-type]
        bridge.clients_lookup("ws://x/").clear()
        assert len(bridge.clients_lookup("ws://x/")) == 1

    def test_remove_client(self, bridge: NetworkBridge) -> None:
        """A removed client disappears immediately."""
        a, b = _Endpoint(), _Endpoint()
        bridge.attach_client(a, "ws://x/")  # type: ignore[arg-type]
        bridge.attach_client(b, "ws://x/")  # type: ignore[arg-type]
        bridge.remove_client(a, "ws://x/")  # type: ignore[arg-type]
        assert bridge.clients_lookup("ws://x/") == [b]

    def test_remove_unknown_client_is_noop(self, bridge: NetworkBridge) -> None:
        """Removing a client that is not attached does nothing."""
        bridge.remove_client(_Endpoint(), "ws://x/")  # type: ignore[arg-type]
        assert bridge.addresses() == []


class TestAddresses:
    """Verify entry bookkeeping."""

    def test_empty_entries_are_pruned(self, bridge: NetworkBridge) -> None:
        """An address with nothing attached is forgotten."""
        client = _Endpoint()
        bridge.attach_client(client, "ws://x/")  # type: ignore[arg-type]
        assert bridge.addresses() == ["ws://x/"]
        bridge.remove_client(client, "ws://x/")  # type: ignore[arg-type]
        assert bridge.addresses() == []

    def test_separate_addresses(self, bridge: NetworkBridge) -> None:
        """Different paths are different addresses."""
        bridge.attach_server(_Endpoint(), "ws://x/a")  # type: ignore[arg-type]
        assert bridge.server_lookup("ws://x/b") is None
        assert bridge.addresses() == ["ws://x/a"]

    def test_registrations_are_logged(self, bridge: NetworkBridge) -> None:
        """Attaches are recorded at DEBUG level."""
        bridge.attach_server(_Endpoint(), "ws://x/")  # type: ignore[arg-type]
        assert bridge.logger.filter(source="bridge")


class TestDefaultBridge:
    """Verify the shared default bridge."""

    def test_default_is_shared(self) -> None:
        """default_bridge returns the same instance each time."""
        assert default_bridge() is default_bridge()

    def test_reset_replaces(self) -> None:
        """reset_default_bridge installs a fresh bridge."""
        old = default_bridge()
        new = reset_default_bridge()
        assert new is not old
        assert default_bridge() is new

    def test_default_scheduler_is_task_queue(self) -> None:
        """A bridge without a scheduler uses a TaskQueue."""
        assert isinstance(NetworkBridge().scheduler, TaskQueue)
