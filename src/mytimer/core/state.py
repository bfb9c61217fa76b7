"""Timer state -- the elapsed-time bookkeeping behind :class:`~mytimer.core.timer.Timer`.

Elapsed time is kept as *banked* milliseconds from finished run segments
plus the live delta since the current segment began.  Pausing banks the
live delta and freezes progress; resuming opens a new segment without
touching what was banked, so a paused interval never counts as elapsed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import Enum

from mytimer.core import duration
from mytimer.core.errors import (
    ConversionError,
    InvalidStateError,
    InvalidStepTarget,
    InvalidStepValue,
)

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Possible run states of a timer."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


class Direction(Enum):
    """Whether the displayed time counts toward or away from the session length."""

    UP = "up"
    DOWN = "down"


class Step(Enum):
    """Adjustable step lengths."""

    SESSION = "session"
    INTERVAL = "interval"

    @classmethod
    def parse(cls, step: Step | str) -> Step:
        """Return the :class:`Step` named by *step*, or raise ``InvalidStepTarget``."""
        if isinstance(step, cls):
            return step
        try:
            return cls(step)
        except ValueError:
            raise InvalidStepTarget(f"unknown step: {step!r}") from None


DEFAULT_SESSION_MS = 25 * 60 * 1000
DEFAULT_INTERVAL_MS = 1000
DEFAULT_COUNT_UNITS = ("hours", "minutes", "seconds")

_ACTIVE_STATES = frozenset({RunState.RUNNING, RunState.PAUSED})


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def validate_step(step: Step | str, raw_value: object, unit: str | None = None) -> int:
    """Convert *raw_value* in *unit* to milliseconds valid for *step*.

    The session must be non-negative, the interval strictly positive.
    Raises :class:`InvalidStepValue` when conversion fails or a constraint
    is violated.
    """
    step = Step.parse(step)
    try:
        value = duration.convert(raw_value, unit)
    except ConversionError as exc:
        raise InvalidStepValue(f"{step.value}: {exc}") from exc

    if value < 0:
        raise InvalidStepValue(f"{step.value} must not be negative, got {value} ms")
    if step is Step.INTERVAL and value == 0:
        raise InvalidStepValue("interval must be greater than zero")
    return value


class TimerState:
    """Session/interval lengths, direction and elapsed-time accounting.

    Contains no scheduling and no events -- it only answers "how much time
    has been counted" and validates step values.  *clock* returns
    milliseconds and defaults to ``time.monotonic()``.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock: Callable[[], int] = clock if clock is not None else _monotonic_ms
        self.session_ms: int = DEFAULT_SESSION_MS
        self.interval_ms: int = DEFAULT_INTERVAL_MS
        self.direction: Direction = Direction.DOWN
        self.count_units: tuple[str, ...] = DEFAULT_COUNT_UNITS
        self.run_state: RunState = RunState.IDLE
        self.start_ms: int | None = None
        self.accumulated_ms: int = 0
        self.now_ms: int = self._clock()

    # -- steps ---------------------------------------------------------------

    def set_step(self, step: Step | str, raw_value: object, unit: str | None = None) -> None:
        """Validate with :func:`validate_step` and commit a new length for *step*.

        On :class:`InvalidStepValue` the stored value is untouched.
        """
        step = Step.parse(step)
        value = validate_step(step, raw_value, unit)
        if step is Step.INTERVAL:
            self.interval_ms = value
        else:
            self.session_ms = value
        logger.debug("%s set to %d ms", step.value, value)

    def step_value(self, step: Step | str) -> int:
        """Return the current length of *step* in milliseconds."""
        if Step.parse(step) is Step.INTERVAL:
            return self.interval_ms
        return self.session_ms

    # -- transitions ---------------------------------------------------------

    def mark_running(self) -> None:
        """Open a new run segment starting now."""
        self.start_ms = self.sample()
        self.run_state = RunState.RUNNING

    def mark_paused(self) -> None:
        """Bank the live segment and freeze progress.  Valid only while RUNNING."""
        self._require_state("pause", frozenset({RunState.RUNNING}))
        self._bank_live_segment()
        self.run_state = RunState.PAUSED

    def mark_stopped(self) -> None:
        """Bank any live segment, clamp to the session and stop.

        Valid from RUNNING or PAUSED.
        """
        self._require_state("stop", _ACTIVE_STATES)
        if self.run_state == RunState.RUNNING:
            self._bank_live_segment()
        self.accumulated_ms = min(self.accumulated_ms, self.session_ms)
        self.run_state = RunState.STOPPED

    def reset_times(self) -> None:
        """Zero the elapsed time without changing the run state."""
        self.accumulated_ms = 0
        self.start_ms = self.sample()

    # -- queries -------------------------------------------------------------

    def sample(self) -> int:
        """Refresh and return the last sampled clock value."""
        self.now_ms = self._clock()
        return self.now_ms

    def elapsed_ms(self) -> int:
        """Counted milliseconds, clamped to ``[0, session_ms]``."""
        elapsed = self.accumulated_ms
        if self.run_state == RunState.RUNNING and self.start_ms is not None:
            elapsed += self.sample() - self.start_ms
        return min(max(elapsed, 0), self.session_ms)

    def remaining_ms(self) -> int:
        return self.session_ms - self.elapsed_ms()

    def current_ms(self) -> int:
        """Elapsed when counting up, remaining when counting down."""
        if self.direction == Direction.UP:
            return self.elapsed_ms()
        return self.remaining_ms()

    def is_session_complete(self) -> bool:
        return self.elapsed_ms() >= self.session_ms

    @property
    def is_active(self) -> bool:
        """True while RUNNING or PAUSED."""
        return self.run_state in _ACTIVE_STATES

    # -- private helpers -----------------------------------------------------

    def _bank_live_segment(self) -> None:
        if self.start_ms is not None:
            self.accumulated_ms += max(self.sample() - self.start_ms, 0)
        self.start_ms = None

    def _require_state(self, method: str, valid: frozenset[RunState]) -> None:
        """Raise ``InvalidStateError`` if the current state is not in *valid*."""
        if self.run_state not in valid:
            raise InvalidStateError(f"{method}() is not valid from {self.run_state.value} state")
