"""Coalescing scheduler: one latest-wins timer per logical key.

Scheduling work for a key whose timer has not fired yet replaces the
pending work; only the most recent callback runs, once the coalescing
window has elapsed without another schedule for that key. Work that has
already started is never cancelled.
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

Work = Callable[[], Awaitable[None]]


class CoalescingScheduler:
    """Debounce async work per key.

    Args:
        window_s: Coalescing window in seconds. Edits arriving within this
            window of each other collapse into a single run.
    """

    def __init__(self, window_s: float = 0.3) -> None:
        if window_s < 0:
            raise ValueError("window_s must be non-negative")
        self._window_s = window_s
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._running: set[asyncio.Task[None]] = set()

    @property
    def window_s(self) -> float:
        return self._window_s

    def schedule(self, key: str, work: Work) -> None:
        """Arm (or re-arm) the timer for ``key`` with ``work``."""
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
            logger.debug("Coalesced pending work", key=key)

        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(self._window_s, self._fire, key, work)

    def cancel(self, key: str) -> bool:
        """Drop pending (not yet started) work for ``key``."""
        handle = self._timers.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        return key in self._timers

    @property
    def idle(self) -> bool:
        """No timer armed and no work running."""
        return not self._timers and not self._running

    async def drain(self) -> None:
        """Wait until every armed timer has fired and its work completed."""
        while not self.idle:
            if self._running:
                await asyncio.wait(set(self._running))
            else:
                await asyncio.sleep(max(self._window_s / 4, 0.001))

    def _fire(self, key: str, work: Work) -> None:
        self._timers.pop(key, None)
        task = asyncio.ensure_future(work())
        self._running.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task[None]) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Scheduled work failed",
                error=str(error),
                error_type=type(error).__name__,
            )
