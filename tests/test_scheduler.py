"""Tests for deferred invocation.

A deferred callback must never run inside the turn that scheduled it;
it runs on a later turn, in the order it was scheduled.
"""

import asyncio

import pytest

from py_mock_socket.errors import SchedulerError
from py_mock_socket.scheduler import AsyncioScheduler, TaskQueue


class TestTaskQueue:
    """Verify the explicit cooperative queue."""

    def test_defer_does_not_run_immediately(self) -> None:
        """Deferring only queues the callback."""
        queue = TaskQueue()
        log: list[str] = []
        queue.defer(log.append, "ran")
        assert log == []
        assert queue.pending == 1

    def test_run_pending_runs_with_receiver(self) -> None:
        """The callback receives its bound receiver."""
        queue = TaskQueue()
        log: list[str] = []
        queue.defer(log.append, "ran")
        assert queue.run_pending() == 1
        assert log == ["ran"]

    def test_fifo_order(self) -> None:
        """Tasks run in the order they were deferred."""
        queue = TaskQueue()
        log: list[int] = []
        for n in range(3):
            queue.defer(log.append, n)
        queue.run_pending()
        assert log == [0, 1, 2]

    def test_tasks_deferred_during_turn_wait(self) -> None:
        """A task scheduled by a running task waits for the next turn."""
        queue = TaskQueue()
        log: list[str] = []

        def outer(name: str) -> None:
            log.append(name)
            queue.defer(log.append, "inner")

        queue.defer(outer, "outer")
        queue.run_pending()
        assert log == ["outer"]
        queue.run_pending()
        assert log == ["outer", "inner"]

    def test_run_until_idle(self) -> None:
        """run_until_idle drains chained tasks."""
        queue = TaskQueue()
        log: list[str] = []
        queue.defer(lambda _: queue.defer(log.append, "second"), None)
        assert queue.run_until_idle() == 2  # noqa: PLR2004
        assert log == ["second"]
        assert queue.pending == 0

    def test_run_until_idle_detects_runaway(self) -> None:
        """A task that always reschedules itself is reported."""
        queue = TaskQueue()

        def forever(q: TaskQueue) -> None:
            q.defer(forever, q)

        queue.defer(forever, queue)
        with pytest.raises(SchedulerError):
            queue.run_until_idle(max_turns=5)

    def test_task_error_propagates(self) -> None:
        """A failing task raises out of run_pending, later tasks stay queued."""
        queue = TaskQueue()
        log: list[str] = []

        def broken(_: object) -> None:
            msg = "task bug"
            raise RuntimeError(msg)

        queue.defer(broken, None)
        queue.defer(log.append, "after")
        with pytest.raises(RuntimeError, match="task bug"):
            queue.run_pending()
        assert queue.pending == 1
        queue.run_pending()
        assert log == ["after"]

    def test_turns_are_counted(self) -> None:
        """Each run_pending call is one turn."""
        queue = TaskQueue()
        queue.run_pending()
        queue.run_pending()
        assert queue.turns == 2  # noqa: PLR2004


class TestAsyncioScheduler:
    """Verify the asyncio adapter."""

    def test_runs_on_later_loop_iteration(self) -> None:
        """Callbacks run after the current coroutine yields."""
        log: list[str] = []

        async def main() -> None:
            scheduler = AsyncioScheduler()
            scheduler.defer(log.append, "deferred")
            log.append("sync")
            await asyncio.sleep(0)
            log.append("resumed")

        asyncio.run(main())
        assert log == ["sync", "deferred", "resumed"]

    def test_requires_running_loop(self) -> None:
        """Without a loop there is nowhere to post the callback."""
        with pytest.raises(SchedulerError):
            AsyncioScheduler().defer(print, "x")
