"""
Delayed callback scheduling.

The retry state machine never sleeps itself; it asks a Scheduler to run a
callback later, so tests can drive time by hand.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        ...


class _AsyncioTimer:
    """Cancels the pending timer, or the callback task once it is running."""

    def __init__(self):
        self.timer: Optional[asyncio.TimerHandle] = None
        self.task: Optional[asyncio.Future] = None

    def cancel(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
        if self.task is not None and not self.task.done():
            self.task.cancel()


def _log_failure(task: asyncio.Future) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Scheduled callback failed: {exc!r}", exc_info=exc)


class AsyncioScheduler:
    """Scheduler backed by the running event loop."""

    def call_later(self, delay: float, callback: Callback) -> _AsyncioTimer:
        loop = asyncio.get_running_loop()
        handle = _AsyncioTimer()

        def fire():
            handle.task = asyncio.ensure_future(callback())
            handle.task.add_done_callback(_log_failure)

        handle.timer = loop.call_later(delay, fire)
        return handle
