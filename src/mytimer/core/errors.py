"""Exceptions raised by the timer core."""


class TimerError(Exception):
    """Base class for every error raised by mytimer."""


class InvalidStateError(TimerError):
    """Raised when a state transition is attempted from the wrong run state."""


class ConversionError(TimerError, ValueError):
    """Raised when a duration cannot be converted to milliseconds."""


class InvalidUnit(ConversionError):
    """Raised for an unknown time unit."""


class InvalidValue(ConversionError):
    """Raised for a duration value that is not a finite number."""


class InvalidStepValue(TimerError, ValueError):
    """Raised when a step (session or interval) receives an unusable value."""


class InvalidStepTarget(TimerError, ValueError):
    """Raised when a step name is not one of the known steps."""


class InvalidEventName(TimerError, ValueError):
    """Raised when subscribing to an event the timer never publishes."""


class InvalidToggleMethod(TimerError, ValueError):
    """Raised when ``toggle`` is asked to dispatch to an unsupported operation."""
