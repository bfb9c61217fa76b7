"""Repeating callbacks on the asyncio event loop.

The timer only needs two things from a scheduler: a millisecond clock and a
way to run a callback every N milliseconds until cancelled.  Tests swap in a
scheduler driven by synthetic time through the same interface.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class RepeatingHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def clock(self) -> int: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingHandle: ...


class RepeatingCall:
    """Runs *callback* every *interval_ms* on the running event loop.

    Deadlines are computed from the first one, so slow callbacks do not
    accumulate drift.  An exception from *callback* is logged and the next
    deadline still fires.  :meth:`cancel` is synchronous: once it returns the
    callback never runs again, even when called from inside the callback.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._interval = interval_ms / 1000
        self._callback = callback
        self._cancelled = False
        self._task: asyncio.Task | None = asyncio.get_running_loop().create_task(self._run())

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        try:
            while not self._cancelled:
                deadline += self._interval
                await asyncio.sleep(max(deadline - loop.time(), 0))
                if self._cancelled:
                    break
                try:
                    self._callback()
                except Exception:
                    logger.exception("repeating callback failed; continuing at next deadline")
        except asyncio.CancelledError:
            pass


class LoopScheduler:
    """Default scheduler: ``time.monotonic()`` clock and :class:`RepeatingCall`.

    ``call_every`` must be invoked while an event loop is running.
    """

    def clock(self) -> int:
        return int(time.monotonic() * 1000)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingCall:
        return RepeatingCall(interval_ms, callback)
