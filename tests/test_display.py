"""Tests for frame building and rich rendering."""

import io

import pytest
from rich.console import Console
from rich.layout import Layout

from clockit.display import (
    CONTINUE_HINT,
    EXIT_HINT,
    TIMES_UP_BANNER,
    Frame,
    FrameBuilder,
    TerminalDisplay,
    render_frame,
    session_name,
)
from clockit.engine import Countdown, Phase, Pomodoro, Stopwatch, TimerEngine
from clockit.glyphs import GLYPH_HEIGHT, GLYPH_WIDTH, render_line


class TestTimerFrame:
    def test_countdown_frame(self, palette):
        frame = FrameBuilder(palette).timer_frame(TimerEngine(Countdown(target=65)), blink_on=True)
        assert frame.rows == tuple(render_line("01:05"))
        assert frame.style == "cyan"
        assert frame.hint == EXIT_HINT
        assert frame.hint_style == "white"
        assert frame.status is None
        assert frame.height == GLYPH_HEIGHT
        assert frame.width == 5 * GLYPH_WIDTH

    def test_stopwatch_shows_centiseconds(self, palette):
        engine = TimerEngine(Stopwatch())
        engine.tick(3)
        frame = FrameBuilder(palette).timer_frame(engine, blink_on=True, centiseconds=42)
        assert frame.rows == tuple(render_line("00:03.42"))
        assert frame.style == "green"

    def test_blink_off_hides_separators(self, palette):
        frame = FrameBuilder(palette).timer_frame(TimerEngine(Countdown(target=65)), blink_on=False)
        assert frame.rows == tuple(render_line("01:05", blink_on=False))

    def test_hours_width(self, palette):
        frame = FrameBuilder(palette, hours_width=2).timer_frame(TimerEngine(Countdown(target=65)), True)
        assert frame.rows == tuple(render_line("00:01:05"))

    def test_pomodoro_work_frame(self, palette):
        frame = FrameBuilder(palette).timer_frame(TimerEngine(Pomodoro(work=1500, break_=300)), True)
        assert frame.rows == tuple(render_line("25:00"))
        assert frame.style == "magenta"
        assert frame.status == "Current: Work Session #1"

    def test_pomodoro_break_frame(self, palette):
        engine = TimerEngine(Pomodoro(work=1500, break_=300))
        engine.advance()
        frame = FrameBuilder(palette).timer_frame(engine, True)
        assert frame.style == "blue"
        assert frame.status == "Current: Break #1"


class TestBannerFrames:
    def test_session_names(self):
        assert session_name(Phase.WORK, 3) == "Work Session #3"
        assert session_name(Phase.BREAK, 2) == "Break #2"

    def test_phase_complete_frame(self, palette):
        frame = FrameBuilder(palette).phase_complete_frame(Phase.WORK, 1)
        assert frame.rows == ("Work Session #1 Complete!",)
        assert frame.style == "bold red"
        assert frame.hint == CONTINUE_HINT

    def test_times_up_flash_keeps_size(self, palette):
        builder = FrameBuilder(palette)
        shown = builder.times_up_frame(visible=True)
        hidden = builder.times_up_frame(visible=False)
        assert shown.rows == TIMES_UP_BANNER
        assert hidden.rows != shown.rows
        assert [len(r) for r in hidden.rows] == [len(r) for r in shown.rows]
        assert all(not r.strip() for r in hidden.rows)

    def test_pomodoro_complete_frame(self, palette):
        frame = FrameBuilder(palette).pomodoro_complete_frame(4)
        assert frame.rows == ("POMODORO COMPLETE!", "4 cycles finished")
        single = FrameBuilder(palette).pomodoro_complete_frame(1)
        assert single.rows[1] == "1 cycle finished"


class TestRenderFrame:
    def render_text(self, frame: Frame, width: int = 60, height: int = 12) -> str:
        console = Console(file=io.StringIO(), width=width, height=height, color_system=None)
        with console.capture() as capture:
            console.print(render_frame(frame), height=height)
        return capture.get()

    def test_returns_layout(self, palette):
        frame = FrameBuilder(palette).timer_frame(TimerEngine(Countdown(target=5)), True)
        assert isinstance(render_frame(frame), Layout)

    def test_header_and_art_rendered(self, palette):
        frame = FrameBuilder(palette).timer_frame(TimerEngine(Pomodoro(work=60, break_=60)), True)
        text = self.render_text(frame)
        lines = text.splitlines()
        assert lines[0].startswith(EXIT_HINT)
        assert lines[1].startswith("Current: Work Session #1")
        for row in frame.rows:
            assert row.strip() in text

    def test_art_is_centered(self, palette):
        frame = FrameBuilder(palette).times_up_frame()
        lines = self.render_text(frame).splitlines()
        banner_line = next(line for line in lines if TIMES_UP_BANNER[0] in line)
        assert banner_line.index(TIMES_UP_BANNER[0]) > 0


class TestTerminalDisplay:
    def test_draw_outside_context_fails(self, palette):
        display = TerminalDisplay(Console(file=io.StringIO()))
        with pytest.raises(RuntimeError):
            display.draw(FrameBuilder(palette).times_up_frame())

    def test_draw_inside_context(self, palette):
        output = io.StringIO()
        console = Console(file=output, width=60, height=12, force_terminal=True)
        with TerminalDisplay(console) as display:
            display.draw(FrameBuilder(palette).times_up_frame())
        assert EXIT_HINT in output.getvalue()
        assert display._live is None
