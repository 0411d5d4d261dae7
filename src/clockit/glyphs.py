"""ASCII-art digit font and line composition."""

from __future__ import annotations

from .errors import UnsupportedGlyphError

GLYPH_HEIGHT = 5
GLYPH_WIDTH = 5

SEPARATORS = frozenset(":.")

BLANK: tuple[str, ...] = (" " * GLYPH_WIDTH,) * GLYPH_HEIGHT

GLYPHS: dict[str, tuple[str, ...]] = {
    "0": (
        ".---.",
        "|   |",
        "|   |",
        "|   |",
        "'---'",
    ),
    "1": (
        "  .  ",
        "  |  ",
        "  |  ",
        "  |  ",
        "  |  ",
    ),
    "2": (
        ".---.",
        "    |",
        ".---.",
        "|    ",
        "'---'",
    ),
    "3": (
        ".---.",
        "    |",
        ".---.",
        "    |",
        "'---'",
    ),
    "4": (
        "|   |",
        "|   |",
        "'---|",
        "    |",
        "    |",
    ),
    "5": (
        ".---.",
        "|    ",
        "'---.",
        "    |",
        "'---'",
    ),
    "6": (
        ".---.",
        "|    ",
        "|---.",
        "|   |",
        "'---'",
    ),
    "7": (
        ".---.",
        "    |",
        "    |",
        "    |",
        "    |",
    ),
    "8": (
        ".---.",
        "|   |",
        "|---.",
        "|   |",
        "'---'",
    ),
    "9": (
        ".---.",
        "|   |",
        "'---|",
        "    |",
        "'---'",
    ),
    ":": (
        "     ",
        "  o  ",
        "     ",
        "  o  ",
        "     ",
    ),
    ".": (
        "     ",
        "     ",
        "     ",
        "     ",
        "  o  ",
    ),
    " ": BLANK,
}


def glyph_for(char: str) -> tuple[str, ...]:
    """Return the rows for a single character."""
    try:
        return GLYPHS[char]
    except KeyError:
        raise UnsupportedGlyphError(char) from None


def render_line(text: str, blink_on: bool = True) -> list[str]:
    """Compose ``text`` into ``GLYPH_HEIGHT`` rows of ASCII art.

    Separators render blank when ``blink_on`` is false; the blank keeps
    the same width so the digits never shift.
    """
    glyphs = []
    for char in text:
        glyph = glyph_for(char)
        if char in SEPARATORS and not blink_on:
            glyph = BLANK
        glyphs.append(glyph)

    return ["".join(glyph[row] for glyph in glyphs) for row in range(GLYPH_HEIGHT)]
