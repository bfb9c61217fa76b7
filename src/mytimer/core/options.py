"""Construction options for :class:`~mytimer.core.timer.Timer`.

Options are forgiving: every malformed field is ignored with a warning and
the default is kept, so building a timer never fails because of its input.

Usage::

    options = parse_options({
        "steps": {"session": {"value": 5, "units": "minutes"}},
        "direction": "up",
    })
    options.apply(state)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from mytimer.core import duration
from mytimer.core.errors import ConversionError, InvalidStepValue
from mytimer.core.state import (
    DEFAULT_COUNT_UNITS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_SESSION_MS,
    Direction,
    Step,
    TimerState,
    validate_step,
)

logger = logging.getLogger(__name__)

INITIALISED_WITH_DEFAULTS = "Invalid %s option (%r), initialised with defaults."


@dataclass
class TimerOptions:
    """Validated construction values."""

    session_ms: int = DEFAULT_SESSION_MS
    interval_ms: int = DEFAULT_INTERVAL_MS
    direction: Direction = Direction.DOWN
    count_units: tuple[str, ...] = field(default=DEFAULT_COUNT_UNITS)

    def apply(self, state: TimerState) -> None:
        """Copy these values onto a fresh *state*."""
        state.set_step(Step.SESSION, self.session_ms)
        state.set_step(Step.INTERVAL, self.interval_ms)
        state.direction = self.direction
        state.count_units = self.count_units


def parse_options(raw: Mapping | None) -> TimerOptions:
    """Build :class:`TimerOptions` from a user-supplied mapping.

    Recognised keys are ``steps``, ``direction`` and ``count_units``
    (``countUnits`` is accepted too).  Unknown keys are ignored silently.
    """
    options = TimerOptions()
    if raw is None:
        return options
    if not isinstance(raw, Mapping):
        logger.warning(INITIALISED_WITH_DEFAULTS, "timer", raw)
        return options

    steps = raw.get("steps")
    if steps is not None:
        if isinstance(steps, Mapping):
            _parse_steps(steps, options)
        else:
            logger.warning(INITIALISED_WITH_DEFAULTS, "steps", steps)

    if raw.get("direction") is not None:
        _parse_direction(raw["direction"], options)

    units = raw.get("count_units", raw.get("countUnits"))
    if units is not None:
        _parse_count_units(units, options)

    return options


def _parse_steps(steps: Mapping, options: TimerOptions) -> None:
    for step in Step:
        step_options = steps.get(step.value)
        if step_options is None:
            continue
        if not isinstance(step_options, Mapping):
            logger.warning(INITIALISED_WITH_DEFAULTS, step.value, step_options)
            continue
        try:
            unit = step_options.get("units", step_options.get("unit"))
            value = validate_step(step, step_options.get("value"), unit)
        except InvalidStepValue:
            logger.warning(INITIALISED_WITH_DEFAULTS, step.value, dict(step_options))
            continue
        if step is Step.SESSION:
            options.session_ms = value
        else:
            options.interval_ms = value


def _parse_direction(raw: object, options: TimerOptions) -> None:
    if isinstance(raw, Direction):
        options.direction = raw
        return
    try:
        options.direction = Direction(str(raw).strip().lower())
    except ValueError:
        logger.warning(INITIALISED_WITH_DEFAULTS, "direction", raw)


def _parse_count_units(raw: object, options: TimerOptions) -> None:
    if isinstance(raw, str):
        raw = (raw,)
    try:
        units = tuple(dict.fromkeys(duration.normalize_unit(u) for u in raw))
    except (TypeError, ConversionError):
        logger.warning(INITIALISED_WITH_DEFAULTS, "count_units", raw)
        return
    if not units:
        logger.warning(INITIALISED_WITH_DEFAULTS, "count_units", raw)
        return
    options.count_units = units
