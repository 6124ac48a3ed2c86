"""Event targets — listener registration and dispatch.

Every endpoint (client or server) is an event target.  Application code
subscribes to an event type with ``add_event_listener`` and the
endpoint calls every subscriber when it dispatches an event of that
type.

Key properties:
    - **Ordered** — listeners fire in registration order.
    - **Duplicates allowed** — registering the same handler twice makes
      it fire twice.
    - **Isolated failures** — if one listener raises, the exception is
      logged and the remaining listeners still run.  The dispatcher's
      caller never sees the exception, just as a browser reports an
      uncaught error in one ``onmessage`` handler without breaking the
      socket.

The ``on<type>`` shortcuts (``onopen``, ``onmessage``, ...) are
``PrimaryHandler`` slots: a single replaceable handler per type,
layered on top of the ordinary listener list.
"""

from collections.abc import Callable

from py_mock_socket.events import Event
from py_mock_socket.logging import Logger, LogLevel

Listener = Callable[..., object]


class EventTarget:
    """A per-endpoint table of listeners keyed by event type."""

    def __init__(self, *, logger: Logger | None = None) -> None:
        """Create a target with no listeners.

        Args:
            logger: Where listener failures are reported.  A private
                logger is created when none is given.

        """
        self._listeners: dict[str, list[Listener]] = {}
        self._logger = logger if logger is not None else Logger()

    @property
    def logger(self) -> Logger:
        """Return the logger listener failures are reported to."""
        return self._logger

    def add_event_listener(self, type: str, handler: Listener) -> None:  # noqa: A002
        """Append *handler* to the listeners for *type*."""
        self._listeners.setdefault(type, []).append(handler)

    def remove_event_listener(self, type: str, handler: Listener) -> None:  # noqa: A002
        """Remove the first registration of *handler* for *type*, if any."""
        handlers = self._listeners.get(type)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self._listeners[type]

    def listeners(self, type: str) -> list[Listener]:  # noqa: A002
        """Return a copy of the handlers registered for *type*."""
        return list(self._listeners.get(type, []))

    def dispatch_event(self, event: Event, *extra: object) -> bool:
        """Call every listener for ``event.type`` with the event and *extra*.

        Each listener is called as ``handler(event, *extra)``; one that
        cannot take the extra arguments fails with ``TypeError`` and is
        logged like any other failure.

        The listener list is snapshotted first, so handlers added or
        removed during dispatch take effect from the next event.

        Returns:
            True if every listener returned without raising.

        """
        ok = True
        for handler in self.listeners(event.type):
            try:
                handler(event, *extra)
            except Exception as exc:  # noqa: BLE001
                ok = False
                self._logger.log(
                    LogLevel.ERROR,
                    f"Uncaught {type(exc).__name__} in '{event.type}' listener: {exc}",
                    source="event_target",
                    error=exc,
                )
        return ok


class PrimaryHandler:
    """The single ``on<type>`` handler slot of an event target.

    Setting the slot swaps the previous primary handler out of the
    target's listener list and registers the new one; listeners added
    with ``add_event_listener`` are never touched.

    A primary handler is called exactly like any other listener, as
    ``handler(event, *extra)``.  Where the endpoint passes extra context
    (a server's ``connection``, ``message`` and ``close`` events) the
    handler must accept it.
    """

    def __init__(self, target: EventTarget, type: str) -> None:  # noqa: A002
        """Create an empty slot for *type* on *target*."""
        self._target = target
        self._type = type
        self._handler: Listener | None = None

    @property
    def type(self) -> str:
        """Return the event type this slot handles."""
        return self._type

    def get(self) -> Listener | None:
        """Return the current primary handler, or None."""
        return self._handler

    def set(self, handler: Listener | None) -> None:
        """Replace the primary handler (None clears it)."""
        if self._handler is not None:
            self._target.remove_event_listener(self._type, self._handler)
        self._handler = handler
        if handler is not None:
            self._target.add_event_listener(self._type, handler)

    def clear(self) -> None:
        """Remove the primary handler."""
        self.set(None)

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return f"PrimaryHandler(type={self._type!r}, handler={self._handler!r})"
