"""mytimer: a countdown / count-up timer with a publish/subscribe event channel."""

from mytimer.core.errors import (
    InvalidStepTarget,
    InvalidStepValue,
    InvalidUnit,
    InvalidValue,
    TimerError,
)
from mytimer.core.state import Direction, RunState, Step
from mytimer.core.timer import Timer

__version__ = "0.1.0"

__all__ = [
    "Direction",
    "InvalidStepTarget",
    "InvalidStepValue",
    "InvalidUnit",
    "InvalidValue",
    "RunState",
    "Step",
    "Timer",
    "TimerError",
    "__version__",
]
