"""URL normalisation — turning an address into a registry key.

Clients and servers find each other by URL, so two spellings of the
same address must produce the same key.  ``WS://Example.com:80`` and
``ws://example.com/`` are the same place.

Normalisation rules:
    - The scheme and host are lower-cased.
    - ``http`` and ``https`` are upgraded to ``ws`` and ``wss``, as
      browsers do.
    - The default port for the scheme (80 or 443) is dropped.
    - An empty path becomes ``/``.
    - The query string is kept; fragments are rejected.
"""

from urllib.parse import urlsplit, urlunsplit

from py_mock_socket.errors import InvalidArgumentError

SCHEME_UPGRADES: dict[str, str] = {"http": "ws", "https": "wss"}

DEFAULT_PORTS: dict[str, int] = {"ws": 80, "wss": 443}


def normalize_url(url: str) -> str:
    """Return the canonical form of a WebSocket URL.

    Args:
        url: The address as written by the caller.

    Returns:
        The normalised URL string, used as the registry key.

    Raises:
        InvalidArgumentError: If the URL is empty, has no host, uses a
            scheme other than ws/wss/http/https, has a fragment, or
            has an invalid port.

    """
    if not url or not isinstance(url, str):
        msg = "A WebSocket URL is required"
        raise InvalidArgumentError(msg)

    parts = urlsplit(url.strip())
    scheme = SCHEME_UPGRADES.get(parts.scheme.lower(), parts.scheme.lower())
    if scheme not in DEFAULT_PORTS:
        msg = f"The URL's scheme must be 'ws' or 'wss', got {parts.scheme!r} in {url!r}"
        raise InvalidArgumentError(msg)
    if parts.fragment:
        msg = f"The URL contains a fragment identifier: {url!r}"
        raise InvalidArgumentError(msg)
    if not parts.hostname:
        msg = f"The URL has no host: {url!r}"
        raise InvalidArgumentError(msg)

    try:
        port = parts.port
    except ValueError as exc:
        msg = f"The URL has an invalid port: {url!r}"
        raise InvalidArgumentError(msg) from exc

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    netloc = host if port in {None, DEFAULT_PORTS[scheme]} else f"{host}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))
