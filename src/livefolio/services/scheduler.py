"""Periodic timer on the asyncio event loop."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[object]]


@dataclass
class TimerHandle:
    """Cancel handle returned by AsyncioScheduler.start()."""

    task: asyncio.Task
    running: set[asyncio.Task] = field(default_factory=set)

    @property
    def cancelled(self) -> bool:
        return self.task.cancelled() or self.task.done()


class AsyncioScheduler:
    """
    Fires a coroutine callback every `interval_seconds`.

    Each tick launches the callback as its own task, so a slow callback never
    delays the timer; the callback decides whether to ignore overlapping ticks.
    """

    def start(
        self,
        interval_seconds: float,
        callback: Callback,
        *,
        run_immediately: bool = False,
    ) -> TimerHandle:
        running: set[asyncio.Task] = set()
        task = asyncio.get_running_loop().create_task(
            self._run(interval_seconds, callback, run_immediately, running),
            name="periodic-timer",
        )
        return TimerHandle(task=task, running=running)

    def cancel(self, handle: TimerHandle) -> None:
        """Stop future ticks. Callbacks already running are left to finish."""
        handle.task.cancel()

    async def join(self, handle: TimerHandle) -> None:
        """Wait for a cancelled timer to stop and for the callbacks it launched."""
        await asyncio.gather(handle.task, *handle.running, return_exceptions=True)

    async def _run(
        self,
        interval_seconds: float,
        callback: Callback,
        run_immediately: bool,
        running: set[asyncio.Task],
    ) -> None:
        if run_immediately:
            self._fire(callback, running)
        while True:
            await asyncio.sleep(interval_seconds)
            self._fire(callback, running)

    @staticmethod
    def _fire(callback: Callback, running: set[asyncio.Task]) -> None:
        task = asyncio.get_running_loop().create_task(_guarded(callback))
        running.add(task)
        task.add_done_callback(running.discard)


async def _guarded(callback: Callback) -> None:
    try:
        await callback()
    except Exception:  # noqa: BLE001 - a failing tick must not kill the timer
        logger.exception("Scheduled callback failed")
