"""Shared test helpers for mytimer: synthetic-time scheduler and event recorder."""

from __future__ import annotations

from collections.abc import Callable

from mytimer.core.timer import Timer


class ManualHandle:
    """Repeating registration driven by :class:`ManualScheduler`."""

    def __init__(self, interval_ms: int, callback: Callable[[], None], first_due: int) -> None:
        self.interval_ms = interval_ms
        self.callback = callback
        self.next_due = first_due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler on synthetic time: nothing happens until :meth:`advance`."""

    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now
        self.handles: list[ManualHandle] = []

    def clock(self) -> int:
        return self.now

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(interval_ms, callback, self.now + interval_ms)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ms: int) -> None:
        """Move the clock forward by *ms*, firing every tick that falls due."""
        target = self.now + ms
        while True:
            due = [h for h in self.active if h.next_due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.next_due)
            self.now = handle.next_due
            handle.next_due += handle.interval_ms
            handle.callback()
        self.now = target


class Recorder:
    """Listener that records every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def __getattr__(self, name: str) -> Callable[[], None]:
        if name.startswith("on_"):
            return lambda: self.events.append(name[3:])
        raise AttributeError(name)

    def count(self, event_name: str) -> int:
        return self.events.count(event_name)


ALL_EVENTS = (
    "sessionStarted",
    "sessionStopped",
    "sessionPaused",
    "currentTime",
    "sessionChanged",
    "timerReset",
)


def subscribe_all(timer: Timer, recorder: Recorder) -> None:
    for event_name in ALL_EVENTS:
        timer.event.subscribe(recorder, event_name, f"on_{event_name}")
