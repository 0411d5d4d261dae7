"""Non-blocking keyboard input for the render loop."""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty
from collections import deque
from typing import TextIO

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "Q", "\x03"})
READ_CHUNK = 1024


def is_quit_key(key: str | None) -> bool:
    return key is not None and key in QUIT_KEYS


class KeyReader:
    """Puts the terminal in cbreak mode and polls it without blocking.

    When the stream is not a terminal (piped input, tests) the reader
    still polls with ``select`` but leaves terminal modes alone.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdin
        self._saved_attrs: list | None = None
        self._closed = False
        self._pending: deque[str] = deque()

    def __enter__(self) -> "KeyReader":
        if self._stream.isatty():
            fd = self._stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            logger.debug("Terminal switched to cbreak mode")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._saved_attrs is None:
            return
        termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
        self._saved_attrs = None
        logger.debug("Terminal settings restored")

    def poll(self, timeout: float = 0.0) -> str | None:
        """Return one pending key, or ``None`` if nothing arrives within ``timeout``.

        Everything readable is drained from the descriptor at once and
        queued, so several keys pressed within one interval are all
        delivered on successive polls.
        """
        if self._pending:
            return self._pending.popleft()
        if self._closed:
            return None

        fd = self._stream.fileno()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        data = os.read(fd, READ_CHUNK)
        if not data:
            # EOF on a pipe; stop polling instead of spinning on it
            self._closed = True
            return None
        self._pending.extend(data.decode("utf-8", errors="replace"))
        return self._pending.popleft()
