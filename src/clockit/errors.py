"""Exceptions raised by the clockit core."""

from __future__ import annotations


class ParseError(ValueError):
    """Base class for user input that could not be parsed."""


class MalformedInputError(ParseError):
    """A duration or Pomodoro string is empty, non-numeric or has too many fields."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"{reason}: {text!r}")


class RenderError(Exception):
    """Base class for ASCII rendering failures."""


class UnsupportedGlyphError(RenderError, KeyError):
    """A character has no glyph in the digit font."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(char)

    def __str__(self) -> str:
        return f"No glyph for character {self.char!r}"
