"""Timer -- the public state machine wrapping a :class:`TimerState`.

States
------
IDLE      Fresh timer, nothing counted yet.
RUNNING   Counting; ``currentTime`` is published every interval.
PAUSED    Progress frozen; ``start()`` resumes in place.
STOPPED   Session finished or stopped; ``start()`` counts from zero again.

Transitions
-----------
IDLE | STOPPED -> RUNNING   (start, elapsed time zeroed)
PAUSED -> RUNNING          (start, elapsed time kept)
RUNNING -> PAUSED          (pause)
RUNNING | PAUSED -> STOPPED (stop, or automatically when the session completes)

``reset()`` zeroes the elapsed time from any state without changing it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from mytimer.core import duration, events
from mytimer.core.errors import ConversionError, InvalidToggleMethod
from mytimer.core.events import EventChannel
from mytimer.core.options import parse_options
from mytimer.core.scheduler import LoopScheduler, RepeatingHandle, Scheduler
from mytimer.core.state import Direction, RunState, Step, TimerState

logger = logging.getLogger(__name__)

_TOGGLE_METHODS = frozenset({"stop", "pause"})


class Timer:
    """Countdown / count-up timer publishing its progress through :attr:`event`.

    Parameters
    ----------
    options:
        Optional mapping with ``steps``, ``direction`` and ``count_units``
        (see :func:`mytimer.core.options.parse_options`).  Malformed fields
        are logged and replaced by defaults; construction never raises.
    scheduler:
        Source of the clock and of the repeating tick.  Defaults to
        :class:`~mytimer.core.scheduler.LoopScheduler`, which requires
        ``start()`` to be called from a running asyncio event loop.
    """

    def __init__(
        self, options: Mapping | None = None, *, scheduler: Scheduler | None = None
    ) -> None:
        self._scheduler: Scheduler = scheduler if scheduler is not None else LoopScheduler()
        self._state = TimerState(clock=self._scheduler.clock)
        parse_options(options).apply(self._state)
        self._ticker: RepeatingHandle | None = None
        self.event = EventChannel()

    # -- read-only properties ------------------------------------------------

    @property
    def status(self) -> RunState:
        return self._state.run_state

    @property
    def session(self) -> int:
        """Session length in milliseconds."""
        return self._state.session_ms

    @property
    def interval(self) -> int:
        """Interval length in milliseconds."""
        return self._state.interval_ms

    @property
    def direction(self) -> Direction:
        return self._state.direction

    @property
    def count_units(self) -> tuple[str, ...]:
        return self._state.count_units

    # -- controls ------------------------------------------------------------

    def start(self) -> Timer | bool:
        """Start counting, or resume after a pause.

        Returns ``False`` without side effects when already running.
        """
        if self._state.run_state == RunState.RUNNING:
            return False
        # Register first: the tick cannot fire before this call returns.
        self._ticker = self._scheduler.call_every(self._state.interval_ms, self._on_tick)
        if self._state.run_state != RunState.PAUSED:
            self._state.reset_times()
        self._state.mark_running()
        logger.debug("timer started, %d ms elapsed", self._state.accumulated_ms)
        self.event.publish(events.SESSION_STARTED)
        return self

    def stop(self) -> Timer | bool:
        """Stop the session.  Returns ``False`` unless running or paused."""
        if not self._state.is_active:
            return False
        self._cancel_ticker()
        self._state.mark_stopped()
        logger.debug("timer stopped at %d ms", self._state.accumulated_ms)
        self.event.publish(events.SESSION_STOPPED)
        return self

    def pause(self) -> Timer | bool:
        """Freeze progress.  Returns ``False`` unless running."""
        if self._state.run_state != RunState.RUNNING:
            return False
        self._cancel_ticker()
        self._state.mark_paused()
        logger.debug("timer paused at %d ms", self._state.accumulated_ms)
        self.event.publish(events.SESSION_PAUSED)
        return self

    def reset(self) -> None:
        """Zero the elapsed time; the run state and any active tick are kept."""
        self._state.reset_times()
        self.event.publish(events.TIMER_RESET)

    def change_step(
        self,
        step: Step | str,
        value: object = None,
        unit: str | None = None,
        sign: int = 1,
        increment: int = 0,
    ) -> bool:
        """Set or adjust the session or interval length.

        ``increment=1`` adds ``sign * value`` to the current length,
        ``increment=0`` replaces it with ``sign * value``.  The result is
        clamped at zero.  A negative change to a step that is already zero
        returns ``False``.  While running or paused, the session is only
        changed when the new length exceeds the time already elapsed;
        otherwise nothing happens and ``False`` is returned.

        An interval change is stored for the next ``start()`` but does not
        reschedule the tick already running.

        Raises :class:`~mytimer.core.errors.InvalidStepTarget` for unknown
        step names.
        """
        step = Step.parse(step)
        if sign not in (1, -1):
            sign = 1
        if increment not in (0, 1):
            increment = 0
        if sign < 0 and self._state.step_value(step) == 0:
            return False

        try:
            delta = duration.convert(value, unit) * sign
        except ConversionError as exc:
            logger.warning("%s not changed: %s", step.value, exc)
            return False

        new_value = max(self._state.step_value(step) * increment + delta, 0)

        if step is Step.INTERVAL:
            if new_value == 0:
                logger.warning("interval not changed: must be greater than zero")
                return False
            self._state.set_step(step, new_value)
            return True

        if self._state.is_active and new_value <= self._state.elapsed_ms():
            logger.debug(
                "session change to %d ms dropped, %d ms already elapsed",
                new_value,
                self._state.elapsed_ms(),
            )
            return False
        self._state.set_step(step, new_value)
        self.event.publish(events.SESSION_CHANGED)
        self.event.publish(events.CURRENT_TIME)
        return True

    def toggle(self, method: str = "stop") -> None:
        """Call ``stop()`` or ``pause()``; if that was a no-op, ``start()`` instead.

        Errors raised by the timer operations are logged, not propagated.
        """
        if method not in _TOGGLE_METHODS:
            raise InvalidToggleMethod(f"toggle() supports 'stop' or 'pause', got {method!r}")
        operation = self.stop if method == "stop" else self.pause
        try:
            if not operation():
                self.start()
        except Exception as exc:
            logger.warning("toggle(%s) failed: %s", method, exc)

    # -- derived time accessors ---------------------------------------------

    def elapsed_ms(self) -> int:
        return self._state.elapsed_ms()

    def remaining_ms(self) -> int:
        return self._state.remaining_ms()

    def current_ms(self) -> int:
        """Displayed time: elapsed when counting up, remaining when counting down."""
        return self._state.current_ms()

    def is_session_complete(self) -> bool:
        return self._state.is_session_complete()

    def time_parts(self) -> dict[str, int]:
        """:meth:`current_ms` broken down into :attr:`count_units`."""
        return duration.split(self.current_ms(), self._state.count_units)

    def formatted(self) -> str:
        """:meth:`current_ms` as ``M:SS`` (or ``H:MM:SS``)."""
        return duration.format_clock(self.current_ms())

    # -- private helpers -----------------------------------------------------

    def _on_tick(self) -> None:
        if self._state.is_session_complete():
            self.stop()
            return
        logger.debug("tick at %d ms", self._state.now_ms)
        self.event.publish(events.CURRENT_TIME)

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
