"""Frames and the terminal they are drawn on.

A :class:`Frame` is a plain description of one screen. The loop builds
frames with :class:`FrameBuilder` and hands them to a display; only
:class:`TerminalDisplay` knows about rich.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.align import Align
from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.text import Text

from .config import Palette
from .duration import format_duration, format_stopwatch
from .engine import Countdown, Phase, Pomodoro, Stopwatch, TimerEngine
from .glyphs import render_line


EXIT_HINT = "Press q or Ctrl+C to exit"
CONTINUE_HINT = "Press q or Ctrl+C to exit, any other key to continue"

TIMES_UP_BANNER: tuple[str, ...] = (
    "┌┬┐┬┌┬┐┌─┐ ┬┌─┐  ┬ ┬┌─┐┬",
    " │ ││││├┤  │└─┐  │ │├─┘│",
    " ┴ ┴┴ ┴└─┘ ┴└─┘  └─┘┴  o",
)

HEADER_ROWS = 2


@dataclass(frozen=True)
class Frame:
    rows: tuple[str, ...]
    style: str
    hint: str
    hint_style: str
    status: str | None = None

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @property
    def height(self) -> int:
        return len(self.rows)


def session_name(phase: Phase, cycle: int) -> str:
    if phase == Phase.WORK:
        return f"Work Session #{cycle}"
    return f"Break #{cycle}"


def blank_rows(rows: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(" " * len(row) for row in rows)


class FrameBuilder:
    """Turns engine state into frames using the configured palette."""

    def __init__(self, palette: Palette, hours_width: int = 0):
        self.palette = palette
        self.hours_width = hours_width

    def timer_frame(self, engine: TimerEngine, blink_on: bool, centiseconds: int = 0) -> Frame:
        mode = engine.mode
        seconds = engine.elapsed_or_remaining
        status = None

        if isinstance(mode, Stopwatch):
            text = format_stopwatch(seconds, centiseconds, self.hours_width)
            style = self.palette.stopwatch
        elif isinstance(mode, Countdown):
            text = format_duration(seconds, self.hours_width)
            style = self.palette.countdown
        elif isinstance(mode, Pomodoro):
            text = format_duration(seconds, self.hours_width)
            phase = engine.phase or Phase.WORK
            style = self.palette.pomodoro_work if phase == Phase.WORK else self.palette.pomodoro_break
            status = f"Current: {session_name(phase, engine.cycle)}"
        else:
            raise TypeError(f"Unknown timer mode: {mode!r}")

        return Frame(
            rows=tuple(render_line(text, blink_on)),
            style=style,
            hint=EXIT_HINT,
            hint_style=self.palette.ui_text,
            status=status,
        )

    def phase_complete_frame(self, finished: Phase, cycle: int) -> Frame:
        return Frame(
            rows=(f"{session_name(finished, cycle)} Complete!",),
            style=f"bold {self.palette.times_up}",
            hint=CONTINUE_HINT,
            hint_style=self.palette.ui_text,
        )

    def times_up_frame(self, visible: bool = True) -> Frame:
        rows = TIMES_UP_BANNER if visible else blank_rows(TIMES_UP_BANNER)
        return Frame(
            rows=rows,
            style=f"bold {self.palette.times_up}",
            hint=EXIT_HINT,
            hint_style=self.palette.ui_text,
        )

    def pomodoro_complete_frame(self, cycles: int, visible: bool = True) -> Frame:
        plural = "" if cycles == 1 else "s"
        rows = ("POMODORO COMPLETE!", f"{cycles} cycle{plural} finished")
        if not visible:
            rows = blank_rows(rows)
        return Frame(
            rows=rows,
            style=f"bold {self.palette.times_up}",
            hint=EXIT_HINT,
            hint_style=self.palette.ui_text,
        )


def render_frame(frame: Frame) -> Layout:
    """Build the rich renderable for a frame: header on top, art centered."""
    header = Text(frame.hint, style=frame.hint_style)
    if frame.status:
        header.append("\n")
        header.append(frame.status, style=frame.hint_style)

    body = Text("\n".join(frame.rows), style=frame.style, no_wrap=True)

    layout = Layout()
    layout.split_column(
        Layout(header, name="header", size=HEADER_ROWS),
        Layout(Align.center(body, vertical="middle"), name="body"),
    )
    return layout


class TerminalDisplay:
    """Draws frames in place on the alternate screen."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._live: Live | None = None

    def __enter__(self) -> "TerminalDisplay":
        self._live = Live(
            console=self.console,
            screen=True,
            auto_refresh=False,
            transient=True,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        self._live.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def draw(self, frame: Frame) -> None:
        if self._live is None:
            raise RuntimeError("TerminalDisplay used outside of its context")
        self._live.update(render_frame(frame), refresh=True)
