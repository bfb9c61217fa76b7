"""Publish/subscribe channel used by the timer to announce state changes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from mytimer.core.errors import InvalidEventName

logger = logging.getLogger(__name__)

SESSION_STARTED = "sessionStarted"
SESSION_STOPPED = "sessionStopped"
SESSION_PAUSED = "sessionPaused"
CURRENT_TIME = "currentTime"
SESSION_CHANGED = "sessionChanged"
TIMER_RESET = "timerReset"

EVENTS = (
    SESSION_STARTED,
    SESSION_STOPPED,
    SESSION_PAUSED,
    CURRENT_TIME,
    SESSION_CHANGED,
    TIMER_RESET,
)


@dataclass(eq=False)
class _Registration:
    listener: object
    method_name: str | None

    def resolve(self) -> Callable[[], object]:
        if self.method_name is None:
            return self.listener  # type: ignore[return-value]
        return getattr(self.listener, self.method_name)


class Subscription:
    """Handle returned by :meth:`EventChannel.subscribe`."""

    def __init__(self, channel: EventChannel, event_name: str, registration: _Registration) -> None:
        self._channel = channel
        self._event_name = event_name
        self._registration: _Registration | None = registration

    @property
    def active(self) -> bool:
        return self._registration is not None

    def remove(self) -> None:
        """Delete this registration.  Removing twice is a no-op."""
        if self._registration is None:
            return
        self._channel._discard(self._event_name, self._registration)
        self._registration = None


class EventChannel:
    """Synchronous event delivery in registration order.

    Listeners run on the caller's stack while :meth:`publish` executes; an
    exception raised by a listener propagates to whoever triggered the
    event.
    """

    def __init__(self, events: Iterable[str] = EVENTS) -> None:
        self._listeners: dict[str, list[_Registration]] = {name: [] for name in events}

    def subscribe(
        self, listener: object, event_name: str, method_name: str | None = None
    ) -> Subscription:
        """Register *listener* for *event_name*.

        When *method_name* is given, ``getattr(listener, method_name)()`` is
        called on each publication (looked up at delivery time); otherwise
        *listener* itself must be callable.
        """
        registrations = self._registrations(event_name)
        registration = _Registration(listener, method_name)
        registrations.append(registration)
        return Subscription(self, event_name, registration)

    def publish(self, event_name: str) -> None:
        """Invoke every live registration for *event_name*."""
        registrations = self._registrations(event_name)
        logger.debug("publish %s to %d listener(s)", event_name, len(registrations))
        # Snapshot so listeners added during delivery wait for the next event.
        for registration in list(registrations):
            if registration not in registrations:
                continue
            registration.resolve()()

    def listener_count(self, event_name: str) -> int:
        return len(self._registrations(event_name))

    def _registrations(self, event_name: str) -> list[_Registration]:
        try:
            return self._listeners[event_name]
        except KeyError:
            raise InvalidEventName(f"unknown event: {event_name!r}") from None

    def _discard(self, event_name: str, registration: _Registration) -> None:
        registrations = self._listeners[event_name]
        for index, candidate in enumerate(registrations):
            if candidate is registration:
                del registrations[index]
                return
