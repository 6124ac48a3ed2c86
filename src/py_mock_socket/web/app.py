"""Flask application factory for the network inspector.

The ``create_app`` function wraps a bridge and returns a Flask app
with two endpoints:

- ``GET /api/connections`` — list addresses, servers, and clients.
- ``POST /api/send`` — broadcast data from a listening server.
"""

from __future__ import annotations

from flask import Flask, Response, jsonify, request

from py_mock_socket.bridge import NetworkBridge, default_bridge
from py_mock_socket.errors import InvalidArgumentError

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404


def create_app(bridge: NetworkBridge | None = None) -> Flask:
    """Create a Flask application inspecting *bridge*.

    Args:
        bridge: The network to expose; the default bridge when omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    network = bridge if bridge is not None else default_bridge()

    app = Flask(__name__)

    @app.route("/api/connections")
    def connections() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return every known address with its server and clients."""
        payload = [
            {
                "url": url,
                "listening": network.server_lookup(url) is not None,
                "clients": [
                    {"protocol": client.protocol, "ready_state": client.ready_state.name}
                    for client in network.clients_lookup(url)
                ],
            }
            for url in network.addresses()
        ]
        return jsonify({"connections": payload})

    @app.route("/api/send", methods=["POST"])
    def send() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Broadcast a message from the server listening at a URL.

        Expects JSON body: ``{"url": "...", "data": ...}``

        Returns:
            JSON with the number of clients the message reached.

        """
        body = request.get_json(silent=True)
        if body is None or "url" not in body or "data" not in body:
            return jsonify({"error": "Missing 'url' or 'data' field"}), _HTTP_BAD_REQUEST

        try:
            server = network.server_lookup(body["url"])
        except InvalidArgumentError as exc:
            return jsonify({"error": str(exc)}), _HTTP_BAD_REQUEST
        if server is None:
            return jsonify({"error": f"No server listening on {body['url']}"}), _HTTP_NOT_FOUND

        return jsonify({"delivered": server.send(body["data"])})

    return app
