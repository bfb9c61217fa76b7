"""CLI entry point for mytimer.

Uses Click to expose the ``mytimer`` command group.  ``mytimer run`` drives
a :class:`~mytimer.core.timer.Timer` on an asyncio event loop and echoes
its progress until the session completes.
"""

from __future__ import annotations

import asyncio
import logging
import sys

import click

import mytimer
from mytimer.core import duration, events
from mytimer.core.errors import ConversionError
from mytimer.core.state import Direction
from mytimer.core.timer import Timer

_UNITS = click.Choice(sorted(duration.UNIT_MS), case_sensitive=False)


class _Echo:
    """Listener that prints timer events to the terminal."""

    def __init__(self, timer: Timer, done: asyncio.Event) -> None:
        self._timer = timer
        self._done = done

    def on_tick(self) -> None:
        click.echo(self._timer.formatted())

    def on_stopped(self) -> None:
        click.echo("Session complete")
        self._done.set()


async def _run_timer(options: dict) -> None:
    done = asyncio.Event()
    timer = Timer(options)
    echo = _Echo(timer, done)
    timer.event.subscribe(echo, events.CURRENT_TIME, "on_tick")
    timer.event.subscribe(echo, events.SESSION_STOPPED, "on_stopped")
    timer.start()
    try:
        await done.wait()
    finally:
        timer.stop()


@click.group()
@click.version_option(version=mytimer.__version__, prog_name="mytimer")
@click.option("-v", "--verbose", is_flag=True, help="Log state transitions and ticks.")
def cli(verbose: bool) -> None:
    """mytimer: a countdown / count-up timer for the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--session", "session_value", type=float, default=25, show_default=True)
@click.option("--units", "session_units", type=_UNITS, default="minutes", show_default=True)
@click.option("--interval", "interval_value", type=float, default=1, show_default=True)
@click.option("--interval-units", type=_UNITS, default="seconds", show_default=True)
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction]),
    default=Direction.DOWN.value,
    show_default=True,
)
def run(
    session_value: float,
    session_units: str,
    interval_value: float,
    interval_units: str,
    direction: str,
) -> None:
    """Run a timer until the session completes (Ctrl-C stops it)."""
    try:
        session_ms = duration.convert(session_value, session_units)
        interval_ms = duration.convert(interval_value, interval_units)
    except ConversionError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)
    if session_ms < 0 or interval_ms <= 0:
        click.echo("session must be >= 0 and interval > 0", err=True)
        sys.exit(1)

    options = {
        "steps": {
            "session": {"value": session_ms, "units": "milliseconds"},
            "interval": {"value": interval_ms, "units": "milliseconds"},
        },
        "direction": direction,
    }
    try:
        asyncio.run(_run_timer(options))
    except KeyboardInterrupt:
        click.echo("Stopped", err=True)
        sys.exit(130)
