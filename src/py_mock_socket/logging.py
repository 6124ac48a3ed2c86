"""Diagnostics from the simulated network.

A browser has nowhere to raise a refused connection or an exception
thrown by an ``onmessage`` handler, so it prints them to the developer
console and carries on.  The mock network does the same, except that
the "console" is a list a test can assert against::

    WebSocket("ws://nobody/", bridge=bridge)
    bridge.scheduler.run_pending()
    assert bridge.logger.filter(min_level=LogLevel.WARNING)

One ``Logger`` belongs to each ``NetworkBridge`` and is shared by every
endpoint attached through it.  Entries record which component spoke
(``source``), the address involved when there is one (``url``), and
the exception when a listener failed (``error``).
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How serious a diagnostic is; higher values are more severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One diagnostic.

    Attributes:
        level: Severity.
        message: What happened.
        source: "bridge", "websocket", "server" or "event_target".
        url: The address concerned, if any.
        error: The exception a listener raised, if any.

    """

    level: LogLevel
    message: str
    source: str
    url: str | None = None
    error: BaseException | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``, with the URL appended."""
        text = f"[{self.level.name}] {self.source}: {self.message}"
        return text if self.url is None else f"{text} ({self.url})"


class Logger:
    """Collect diagnostics in the order they were reported."""

    def __init__(self) -> None:
        """Create a logger with nothing recorded."""
        self._entries: list[LogEntry] = []

    def __len__(self) -> int:
        """Return the number of recorded entries."""
        return len(self._entries)

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every entry, oldest first."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        url: str | None = None,
        error: BaseException | None = None,
    ) -> None:
        """Record a diagnostic."""
        self._entries.append(
            LogEntry(level=level, message=message, source=source, url=url, error=error),
        )

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        url: str | None = None,
    ) -> list[LogEntry]:
        """Return the entries that match every criterion given.

        Args:
            min_level: Keep entries at or above this severity.
            source: Keep entries from this component.
            url: Keep entries about this address.

        """
        return [
            entry
            for entry in self._entries
            if (min_level is None or entry.level >= min_level)
            and (source is None or entry.source == source)
            and (url is None or entry.url == url)
        ]

    def errors(self) -> list[BaseException]:
        """Return the exceptions attached to entries, oldest first."""
        return [entry.error for entry in self._entries if entry.error is not None]

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()
