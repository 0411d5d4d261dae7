"""Cooperative render/input loop.

One iteration per refresh interval, strictly in this order: wait for the
next tick boundary, poll the keyboard, tick the engine, draw the frame,
toggle the blink state. Nothing blocks longer than one interval, so a
quit key is seen within one refresh.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from .display import Frame, FrameBuilder
from .engine import Phase, TimerEngine, TimerEvent
from .keys import is_quit_key

logger = logging.getLogger(__name__)

BLINK_PERIOD_MS = 500
BANNER_FLASHES = 5
BANNER_FLASH_MS = 500


class LoopOutcome(str, Enum):
    QUIT = "quit"
    COMPLETED = "completed"


class KeySource(Protocol):
    def poll(self) -> str | None: ...


class FrameSink(Protocol):
    def draw(self, frame: Frame) -> None: ...


def default_blink_every(refresh_ms: int) -> int:
    """Refresh intervals per blink toggle, about every half second."""
    return max(1, round(BLINK_PERIOD_MS / refresh_ms))


@dataclass
class LoopSettings:
    refresh_ms: int
    blink_separator: bool = False
    blink_every: int = 0  # 0 = default_blink_every(refresh_ms)

    def __post_init__(self) -> None:
        if self.refresh_ms <= 0:
            raise ValueError(f"refresh_ms must be positive, got {self.refresh_ms}")
        if self.blink_every <= 0:
            self.blink_every = default_blink_every(self.refresh_ms)

    @property
    def interval(self) -> float:
        return self.refresh_ms / 1000


class RenderLoop:
    """Drives a :class:`TimerEngine` against the wall clock and a display.

    ``clock`` must be monotonic; ``sleep`` and ``keys`` are injected so
    the loop can run against a fake clock in tests.
    """

    def __init__(
        self,
        engine: TimerEngine,
        settings: LoopSettings,
        frames: FrameBuilder,
        display: FrameSink,
        keys: KeySource,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.engine = engine
        self.settings = settings
        self.frames = frames
        self.display = display
        self.keys = keys
        self._clock = clock
        self._sleep = sleep

        self.blink_on = True
        self._start = 0.0
        self._iteration = 0
        self._anchor = 0.0
        self._applied = 0

    # ---- Public ----

    def run(self) -> LoopOutcome:
        try:
            return self._run()
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return LoopOutcome.QUIT

    # ---- Scheduling ----

    def _run(self) -> LoopOutcome:
        self._start = self._clock()
        self._anchor = self._start
        self._iteration = 0
        self._applied = 0
        self.display.draw(self.frames.timer_frame(self.engine, self.blink_on))

        while True:
            self._iteration += 1
            self._wait_for_tick()

            key = self.keys.poll()
            if is_quit_key(key):
                logger.info("Quit requested")
                return LoopOutcome.QUIT

            if self.engine.awaiting_advance:
                if key is None:
                    continue
                self._resume_after_hold()

            elapsed = self._elapsed()
            result = self.engine.tick(self._due_seconds(elapsed))
            self._draw_timer(elapsed)
            self._toggle_blink()

            if TimerEvent.TIMES_UP in result.events:
                logger.info("Countdown finished")
                return self._flash(self.frames.times_up_frame)
            if TimerEvent.POMODORO_COMPLETE in result.events:
                logger.info("Pomodoro finished after %d cycles", self.engine.completed_cycles)
                cycles = self.engine.completed_cycles
                return self._flash(lambda visible: self.frames.pomodoro_complete_frame(cycles, visible))
            if TimerEvent.PHASE_CHANGED in result.events:
                logger.info("Phase changed: %s -> %s", result.old_phase, result.new_phase)
                if self.engine.awaiting_advance:
                    self.display.draw(
                        self.frames.phase_complete_frame(result.old_phase or Phase.WORK, result.finished_cycle or 1)
                    )

    def _wait_for_tick(self) -> None:
        """Sleep until the next boundary, measured from the loop start."""
        interval = self.settings.interval
        deadline = self._start + self._iteration * interval
        now = self._clock()
        if now - deadline > interval:
            # Too far behind (suspended terminal, slow draw): rebase instead of bursting
            self._iteration = int((now - self._start) / interval) + 1
            deadline = self._start + self._iteration * interval
        delay = deadline - now
        if delay > 0:
            self._sleep(delay)

    def _elapsed(self) -> float:
        return max(0.0, self._clock() - self._anchor)

    def _due_seconds(self, elapsed: float) -> int:
        """Whole seconds owed to the engine since the anchor."""
        due = int(elapsed)
        steps = due - self._applied
        self._applied = due
        return max(0, steps)

    def _resume_after_hold(self) -> None:
        self.engine.advance()
        self._anchor = self._clock()
        self._applied = 0
        logger.info("Resumed %s", self.engine.phase)

    # ---- Drawing ----

    def _draw_timer(self, elapsed: float) -> None:
        blink_on = self.blink_on if self.settings.blink_separator else True
        centiseconds = int(elapsed * 100) % 100
        self.display.draw(self.frames.timer_frame(self.engine, blink_on, centiseconds))

    def _toggle_blink(self) -> None:
        if self._iteration % self.settings.blink_every == 0:
            self.blink_on = not self.blink_on

    def _flash(self, make_frame: Callable[[bool], Frame]) -> LoopOutcome:
        """Flash a terminal banner, still honouring the quit key."""
        flash_seconds = BANNER_FLASH_MS / 1000
        for i in range(BANNER_FLASHES):
            self.display.draw(make_frame(i % 2 == 0))
            until = self._clock() + flash_seconds
            while True:
                if is_quit_key(self.keys.poll()):
                    logger.info("Quit requested")
                    return LoopOutcome.QUIT
                remaining = until - self._clock()
                if remaining <= 0:
                    break
                self._sleep(min(remaining, self.settings.interval))
        self.display.draw(make_frame(True))
        return LoopOutcome.COMPLETED
