"""Tests for tolerant construction-option parsing."""

import logging
from unittest.mock import patch

import pytest

from mytimer.core.options import TimerOptions, parse_options
from mytimer.core.state import (
    DEFAULT_COUNT_UNITS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_SESSION_MS,
    Direction,
)
from mytimer.core.timer import Timer


@pytest.fixture(autouse=True)
def _capture_warnings(caplog):
    caplog.set_level(logging.WARNING, logger="mytimer")


class TestValidOptions:
    def test_none_gives_defaults(self) -> None:
        assert parse_options(None) == TimerOptions()

    def test_all_fields(self) -> None:
        options = parse_options(
            {
                "steps": {
                    "session": {"value": 90, "units": "seconds"},
                    "interval": {"value": 250, "units": "ms"},
                },
                "direction": "UP",
                "count_units": ["minutes", "s"],
            }
        )
        assert options.session_ms == 90_000
        assert options.interval_ms == 250
        assert options.direction == Direction.UP
        assert options.count_units == ("minutes", "seconds")

    def test_camel_case_count_units(self) -> None:
        assert parse_options({"countUnits": "seconds"}).count_units == ("seconds",)

    def test_direction_enum_is_accepted(self) -> None:
        assert parse_options({"direction": Direction.UP}).direction == Direction.UP

    def test_steps_are_validated_without_reading_the_clock(self) -> None:
        with patch("mytimer.core.state.time") as mock_time:
            options = parse_options(
                {"steps": {"session": {"value": 2, "units": "minutes"}, "interval": {"value": 0}}}
            )
        mock_time.monotonic.assert_not_called()
        assert options.session_ms == 120_000
        assert options.interval_ms == DEFAULT_INTERVAL_MS

    def test_unknown_keys_are_ignored(self, caplog) -> None:
        assert parse_options({"colour": "red"}) == TimerOptions()
        assert caplog.records == []


class TestMalformedOptions:
    def test_not_a_mapping(self, caplog) -> None:
        assert parse_options(["steps"]) == TimerOptions()
        assert "initialised with defaults" in caplog.text

    def test_bad_session_keeps_default_and_good_interval(self, caplog) -> None:
        options = parse_options(
            {
                "steps": {
                    "session": {"value": -5, "units": "minutes"},
                    "interval": {"value": 2, "units": "seconds"},
                }
            }
        )
        assert options.session_ms == DEFAULT_SESSION_MS
        assert options.interval_ms == 2000
        assert len(caplog.records) == 1

    @pytest.mark.parametrize(
        "steps",
        [
            "fast",
            {"interval": 5},
            {"interval": {"value": 0}},
            {"interval": {"value": 1, "units": "lightyears"}},
        ],
    )
    def test_bad_interval(self, steps, caplog) -> None:
        options = parse_options({"steps": steps})
        assert options.interval_ms == DEFAULT_INTERVAL_MS
        assert "initialised with defaults" in caplog.text

    def test_bad_direction(self, caplog) -> None:
        assert parse_options({"direction": "sideways"}).direction == Direction.DOWN
        assert "direction" in caplog.text

    @pytest.mark.parametrize("units", [["minutes", "eons"], [], 42])
    def test_bad_count_units(self, units, caplog) -> None:
        assert parse_options({"count_units": units}).count_units == DEFAULT_COUNT_UNITS
        assert "count_units" in caplog.text

    def test_timer_construction_never_raises(self, caplog) -> None:
        timer = Timer({"steps": {"session": "nonsense"}, "direction": 7, "countUnits": 3})
        assert timer.session == DEFAULT_SESSION_MS
        assert timer.direction == Direction.DOWN
        assert timer.count_units == DEFAULT_COUNT_UNITS
        assert len(caplog.records) == 3
