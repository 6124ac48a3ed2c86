"""Exception taxonomy for the simulated socket network.

Real socket APIs fail in two very different ways:

    - **Synchronously** — the caller did something invalid (a missing
      URL, sending on a closed socket).  These raise immediately.
    - **Asynchronously** — the remote side is not there.  Browsers never
      raise for a refused connection; they fire ``error`` and ``close``
      events instead.

Only the first kind lives here.  A refused connection is modelled as
an event sequence on the socket, not as an exception.

Each error also inherits from the closest built-in exception so that
callers who already catch ``ValueError`` or ``OSError`` keep working.
"""


class MockSocketError(Exception):
    """Base class for every error raised by the simulated network."""


class InvalidArgumentError(MockSocketError, ValueError):
    """Raise when a URL, protocol, or event type is missing or malformed."""


class InvalidStateError(MockSocketError, RuntimeError):
    """Raise when an operation is not allowed in the socket's current state."""


class AddressInUseError(MockSocketError, OSError):
    """Raise when a second server tries to listen on an occupied address."""


class SchedulerError(MockSocketError):
    """Raise when the deferred task queue cannot drain."""
