"""Event records — the immutable values handed to listeners.

Every notification in the simulated network is an event record:

    - **Event** — a bare notification (``open``, ``error``, ``connection``).
    - **MessageEvent** — carries a payload and the URL it came from.
    - **CloseEvent** — carries the close code, a reason, and whether
      the close was clean.

Records are frozen dataclasses.  A fresh record is built for each
dispatch and nobody can mutate it afterwards, so a listener can keep a
reference without worrying that a later dispatch changes it.
"""

from dataclasses import dataclass

from py_mock_socket.close_codes import CloseCode
from py_mock_socket.errors import InvalidArgumentError


@dataclass(frozen=True, kw_only=True)
class Event:
    """A bare event with a type and the endpoint it was fired at."""

    type: str
    target: object | None = None

    def __post_init__(self) -> None:
        """Reject records without a usable type discriminator."""
        if not isinstance(self.type, str) or not self.type:
            msg = f"Event type must be a non-empty string, got {self.type!r}"
            raise InvalidArgumentError(msg)


@dataclass(frozen=True, kw_only=True)
class MessageEvent(Event):
    """A message travelling from one endpoint to the other.

    Attributes:
        origin: The URL of the connection the message travelled over.
        data: The payload, passed through untouched.
        source: The endpoint that sent the message.

    """

    origin: str = ""
    data: object = None
    source: object | None = None


@dataclass(frozen=True, kw_only=True)
class CloseEvent(Event):
    """A connection ending."""

    code: int = CloseCode.NORMAL
    reason: str = ""
    was_clean: bool = True


def make_event(type: str, target: object | None = None) -> Event:  # noqa: A002
    """Build a bare event record."""
    return Event(type=type, target=target)


def make_message_event(
    type: str,  # noqa: A002
    origin: str,
    data: object,
    target: object | None = None,
    source: object | None = None,
) -> MessageEvent:
    """Build a message event record."""
    return MessageEvent(type=type, origin=origin, data=data, target=target, source=source)


def make_close_event(
    type: str,  # noqa: A002
    target: object | None = None,
    code: int = CloseCode.NORMAL,
    reason: str = "",
    *,
    was_clean: bool = True,
) -> CloseEvent:
    """Build a close event record."""
    return CloseEvent(type=type, target=target, code=code, reason=reason, was_clean=was_clean)
