"""Command line entry point for clockit.

Usage:
    clockit -c 5:00              # countdown from five minutes
    clockit -c 0:75:90           # overflow is fine: 1:16:30
    clockit -s                   # stopwatch
    clockit -p                   # Pomodoro with configured defaults
    clockit -p 50/10/4           # 50 min work, 10 min break, 4 cycles
    clockit -p 30//8             # 30 min work, default break, 8 cycles
    clockit --init-config        # write the default config file
"""

from __future__ import annotations

import logging
import sys
import termios
from pathlib import Path

import click
from rich.console import Console

from . import __version__
from .config import APP_NAME, Config, Palette, get_config_path, load_config, write_default_config
from .display import FrameBuilder, TerminalDisplay
from .duration import parse_duration, parse_pomodoro
from .engine import Countdown, Pomodoro, Stopwatch, TimerEngine, TimerMode
from .errors import ParseError
from .keys import KeyReader
from .loop import LoopOutcome, LoopSettings, RenderLoop

logger = logging.getLogger(APP_NAME)

LOG_FILENAME = "clockit.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

console = Console()


def configure_logging(verbose: bool, log_path: Path | None = None) -> None:
    """Warnings go to stderr; ``--verbose`` adds a debug log file.

    Nothing below WARNING is written to the terminal because the timer
    owns the whole screen while it runs.
    """
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(stderr_handler)

    if verbose:
        log_path = log_path or Path(click.get_app_dir(APP_NAME)) / LOG_FILENAME
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)


def build_mode(countdown: str | None, stopwatch: bool, pomodoro: str | None, config: Config) -> tuple[TimerMode, int]:
    """Resolve the CLI choice into a timer mode and its refresh rate (ms)."""
    chosen = [name for name, used in (("-c", countdown is not None), ("-s", stopwatch), ("-p", pomodoro is not None)) if used]
    if not chosen:
        raise click.UsageError("No valid command specified. Use -c/--countdown TIME, -s/--stopwatch, or -p/--pomodoro")
    if len(chosen) > 1:
        raise click.UsageError(f"Choose only one timer mode, got {' and '.join(chosen)}")

    if countdown is not None:
        try:
            total_seconds = parse_duration(countdown)
        except ParseError as e:
            raise click.BadParameter(str(e), param_hint="'-c' / '--countdown'") from e
        if total_seconds == 0:
            raise click.BadParameter(
                "Please specify a valid countdown time greater than zero.",
                param_hint="'-c' / '--countdown'",
            )
        return Countdown(target=total_seconds), config.countdown_refresh_rate

    if stopwatch:
        return Stopwatch(), config.stopwatch_refresh_rate

    settings = config.pomodoro
    try:
        plan = parse_pomodoro(pomodoro, settings.work_duration, settings.break_duration, settings.cycles)
    except ParseError as e:
        raise click.BadParameter(str(e), param_hint="'-p' / '--pomodoro'") from e
    if settings.sound_enabled:
        logger.debug("sound_enabled is set but sound notifications are not implemented")
    mode = Pomodoro(work=plan.work_seconds, break_=plan.break_seconds, max_cycles=plan.max_cycles)
    return mode, settings.refresh_rate


def run_timer(mode: TimerMode, refresh_ms: int, config: Config) -> tuple[LoopOutcome, TimerEngine]:
    engine = TimerEngine(mode, hold_on_phase_change=isinstance(mode, Pomodoro))
    settings = LoopSettings(
        refresh_ms=refresh_ms,
        blink_separator=config.blink_separator,
        blink_every=config.blink_every,
    )
    frames = FrameBuilder(Palette.from_config(config), hours_width=config.hours_width)
    logger.info("Starting %s (refresh %dms)", type(mode).__name__, refresh_ms)

    with KeyReader() as keys, TerminalDisplay(console) as display:
        loop = RenderLoop(engine, settings, frames, display, keys)
        outcome = loop.run()

    logger.info("Timer ended: %s", outcome.value)
    return outcome, engine


def summary(mode: TimerMode, engine: TimerEngine, outcome: LoopOutcome) -> str:
    if isinstance(mode, Stopwatch):
        return "Stopwatch stopped!"
    if isinstance(mode, Pomodoro):
        return f"Pomodoro timer ended. Completed {engine.completed_cycles} full cycles."
    if outcome == LoopOutcome.QUIT and not engine.is_finished:
        return "Timer stopped."
    return "Timer complete!"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-c", "--countdown", metavar="TIME", help="Start a countdown timer in HH:MM:SS, MM:SS or SS format.")
@click.option("-s", "--stopwatch", is_flag=True, help="Start a stopwatch.")
@click.option(
    "-p",
    "--pomodoro",
    is_flag=False,
    flag_value="",
    default=None,
    metavar="[WORK/BREAK/CYCLES]",
    help="Start a Pomodoro timer; minutes of work/break and number of cycles, each optional.",
)
@click.option("--init-config", is_flag=True, help="Generate a default config file.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of the default location.",
)
@click.option("-v", "--verbose", is_flag=True, help="Write a debug log next to the config file.")
@click.version_option(__version__, prog_name=APP_NAME)
def main(
    countdown: str | None,
    stopwatch: bool,
    pomodoro: str | None,
    init_config: bool,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """A beautiful ASCII art timer for the terminal."""

    configure_logging(verbose)
    path = config_path or get_config_path()

    if init_config:
        written, created = write_default_config(path)
        if created:
            click.echo(f"Created default configuration at: {written}")
        else:
            click.echo(f"Configuration already exists at: {written}")
        return

    config = load_config(path)
    mode, refresh_ms = build_mode(countdown, stopwatch, pomodoro, config)

    try:
        outcome, engine = run_timer(mode, refresh_ms, config)
    except (OSError, termios.error) as e:
        logger.debug("Terminal error", exc_info=True)
        raise click.ClickException(f"Terminal error: {e}") from e

    click.echo(summary(mode, engine, outcome))


if __name__ == "__main__":  # pragma: no cover
    main()
