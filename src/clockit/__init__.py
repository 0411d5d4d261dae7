"""clockit: large ASCII-art countdown, stopwatch and Pomodoro timer for the terminal."""

__version__ = "0.3.0"

from .duration import (
    PomodoroPlan,
    format_duration,
    format_stopwatch,
    normalize,
    parse_duration,
    parse_pomodoro,
    split_duration,
)
from .engine import (
    Countdown,
    EngineStatus,
    Phase,
    Pomodoro,
    Stopwatch,
    TickResult,
    TimerEngine,
    TimerEvent,
)
from .errors import MalformedInputError, ParseError, RenderError, UnsupportedGlyphError
from .glyphs import render_line

__all__ = [
    "Countdown",
    "EngineStatus",
    "MalformedInputError",
    "ParseError",
    "Phase",
    "Pomodoro",
    "PomodoroPlan",
    "RenderError",
    "Stopwatch",
    "TickResult",
    "TimerEngine",
    "TimerEvent",
    "UnsupportedGlyphError",
    "format_duration",
    "format_stopwatch",
    "normalize",
    "parse_duration",
    "parse_pomodoro",
    "render_line",
    "split_duration",
    "__version__",
]
