"""Shared pytest fixtures for mytimer tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from helpers import ManualScheduler, Recorder
from mytimer.core.timer import Timer


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_timer(scheduler: ManualScheduler) -> Callable[..., Timer]:
    """Factory for timers running on the manual scheduler."""

    def factory(options: dict | None = None) -> Timer:
        return Timer(options, scheduler=scheduler)

    return factory


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
