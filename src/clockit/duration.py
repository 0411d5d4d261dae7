"""Duration codec: parse user time strings and format seconds for display.

Durations are plain non-negative ``int`` seconds. Parsing never rejects
an oversized component (``90`` seconds, ``75`` minutes); the flat
conversion in :func:`normalize` is what carries overflow into the
larger units, so ``0:75:90`` and ``1:16:30`` are the same duration.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedInputError

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * 60

MAX_TIME_FIELDS = 3
MAX_POMODORO_FIELDS = 3


@dataclass(frozen=True)
class PomodoroPlan:
    work_seconds: int
    break_seconds: int
    max_cycles: int | None  # None = unbounded


def _parse_field(part: str, original: str) -> int:
    value = part.strip()
    if not value or not value.isdigit() or not value.isascii():
        raise MalformedInputError(original, "Invalid time format. Use HH:MM:SS, MM:SS, or SS")
    return int(value)


def split_duration(text: str) -> tuple[int, int, int]:
    """Split ``SS``, ``MM:SS`` or ``HH:MM:SS`` into raw (h, m, s) components."""

    if text is None or not text.strip():
        raise MalformedInputError(text or "", "Empty time")

    parts = text.split(":")
    if len(parts) > MAX_TIME_FIELDS:
        raise MalformedInputError(text, "Too many fields. Use HH:MM:SS, MM:SS, or SS")

    values = [_parse_field(part, text) for part in parts]
    # Right-align so "5:00" is (0, 5, 0) and "90" is (0, 0, 90)
    values = [0] * (MAX_TIME_FIELDS - len(values)) + values
    return values[0], values[1], values[2]


def normalize(hours: int, minutes: int, seconds: int) -> int:
    """Flatten raw components into total seconds."""
    return hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + seconds


def parse_duration(text: str) -> int:
    """Parse a user time string into total seconds."""
    return normalize(*split_duration(text))


def format_duration(seconds: int, hours_width: int = 0) -> str:
    """Format seconds as ``MM:SS`` or ``H:MM:SS``.

    With ``hours_width`` 0 the hour field only appears once it is
    non-zero; a positive width always shows it, zero-padded. Hours grow
    without bound past 23.
    """
    if seconds < 0:
        raise ValueError(f"Duration cannot be negative: {seconds}")

    hours, rest = divmod(int(seconds), SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, SECONDS_PER_MINUTE)
    if hours_width > 0:
        return f"{hours:0{hours_width}d}:{minutes:02d}:{secs:02d}"
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_stopwatch(seconds: int, centiseconds: int, hours_width: int = 0) -> str:
    """Stopwatch readout: :func:`format_duration` plus ``.CC``."""
    if not 0 <= centiseconds < 100:
        raise ValueError(f"Centiseconds out of range: {centiseconds}")
    return f"{format_duration(seconds, hours_width)}.{centiseconds:02d}"


def parse_pomodoro(
    text: str | None,
    default_work: int,
    default_break: int,
    default_cycles: int,
) -> PomodoroPlan:
    """Parse ``WORK/BREAK/CYCLES`` (minutes, minutes, count).

    Every field is optional: ``"50/10"``, ``"30//8"`` and ``""`` are all
    valid, with blanks taken from the defaults. Zero cycles means the
    Pomodoro runs until quit.
    """
    fields = (text or "").split("/")
    if len(fields) > MAX_POMODORO_FIELDS:
        raise MalformedInputError(text or "", "Too many fields. Use WORK/BREAK/CYCLES")
    fields += [""] * (MAX_POMODORO_FIELDS - len(fields))

    defaults = (default_work, default_break, default_cycles)
    values = []
    for field, default in zip(fields, defaults):
        field = field.strip()
        if not field:
            values.append(default)
            continue
        if not field.isdigit() or not field.isascii():
            raise MalformedInputError(text or "", "Invalid Pomodoro format. Use WORK/BREAK/CYCLES")
        values.append(int(field))

    work, brk, cycles = values
    if work <= 0 or brk <= 0:
        raise MalformedInputError(text or "", "Work and break lengths must be at least one minute")

    return PomodoroPlan(
        work_seconds=work * SECONDS_PER_MINUTE,
        break_seconds=brk * SECONDS_PER_MINUTE,
        max_cycles=cycles if cycles > 0 else None,
    )
