"""Deferred invocation — running a callback on a later turn.

A freshly constructed socket must not fire ``open`` (or ``error``)
straight away.  Application code always registers its handlers *after*
the constructor returns::

    sock = WebSocket("ws://localhost/chat")
    sock.onopen.set(on_open)   # must be in place before "open" fires

So the handshake is **deferred**: posted to a cooperative scheduler and
run on a later turn, once the current synchronous code has finished.

Two schedulers are provided:
    - **TaskQueue** — an explicit FIFO queue driven by the caller with
      ``run_pending()``.  Deterministic; the default, and what tests use.
    - **AsyncioScheduler** — posts zero-delay callbacks to an asyncio
      event loop with ``call_soon``, for code that already runs one.

Neither supports cancellation: once a task is scheduled it runs.
"""

import asyncio
from collections import deque
from collections.abc import Callable
from functools import partial
from typing import Any, Protocol, TypeVar

from py_mock_socket.errors import SchedulerError

DEFAULT_MAX_TURNS = 1000

T = TypeVar("T")


class Scheduler(Protocol):
    """Anything that can run a callback on a future turn."""

    def defer(self, callback: Callable[[T], Any], receiver: T) -> None:
        """Schedule ``callback(receiver)`` for a later turn."""
        ...


class TaskQueue:
    """A single-threaded cooperative task queue.

    Each call to ``run_pending()`` is one **turn**: it runs the tasks
    that were queued before the turn began, in FIFO order.  Tasks
    deferred while a turn is running wait for the next turn, so a
    deferred callback never runs inside the turn that scheduled it.
    """

    def __init__(self) -> None:
        """Create an empty queue."""
        self._tasks: deque[Callable[[], Any]] = deque()
        self._turns = 0

    @property
    def pending(self) -> int:
        """Return the number of tasks waiting to run."""
        return len(self._tasks)

    @property
    def turns(self) -> int:
        """Return how many turns have run so far."""
        return self._turns

    def defer(self, callback: Callable[[T], Any], receiver: T) -> None:
        """Queue ``callback(receiver)`` for the next turn."""
        self._tasks.append(partial(callback, receiver))

    def run_pending(self) -> int:
        """Run one turn and return the number of tasks executed.

        An exception raised by a task propagates to the caller; the
        tasks behind it stay queued.
        """
        batch = len(self._tasks)
        self._turns += 1
        for _ in range(batch):
            task = self._tasks.popleft()
            task()
        return batch

    def run_until_idle(self, *, max_turns: int = DEFAULT_MAX_TURNS) -> int:
        """Run turns until the queue is empty.

        Args:
            max_turns: Upper bound on turns, to catch tasks that keep
                rescheduling themselves.

        Returns:
            The total number of tasks executed.

        Raises:
            SchedulerError: If the queue is still busy after *max_turns*.

        """
        total = 0
        for _ in range(max_turns):
            if not self._tasks:
                return total
            total += self.run_pending()
        if self._tasks:
            msg = f"Task queue still has {len(self._tasks)} task(s) after {max_turns} turns"
            raise SchedulerError(msg)
        return total


class AsyncioScheduler:
    """Defer callbacks onto an asyncio event loop.

    With no explicit loop, the running loop is looked up each time
    ``defer`` is called, so one scheduler works across ``asyncio.run``
    invocations.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Create a scheduler bound to *loop* (or to the running loop)."""
        self._loop = loop

    def defer(self, callback: Callable[[T], Any], receiver: T) -> None:
        """Post ``callback(receiver)`` as a zero-delay loop callback.

        Raises:
            SchedulerError: If no loop was given and none is running.

        """
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as exc:
                msg = "AsyncioScheduler.defer() needs a running event loop"
                raise SchedulerError(msg) from exc
        loop.call_soon(callback, receiver)
