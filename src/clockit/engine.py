"""Timer engine: pure logic, no I/O.

All durations are integer seconds. One call to ``tick()`` is one second
of timer time; the render loop decides when a second has passed.
Each mode's behaviour is a pure function over ``(EngineState, mode)``
so it can be tested without a clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union


class Phase(str, Enum):
    WORK = "work"
    BREAK = "break"


class EngineStatus(str, Enum):
    RUNNING = "running"
    FINISHED = "finished"


class TimerEvent(Enum):
    TIMES_UP = "times_up"
    PHASE_CHANGED = "phase_changed"
    POMODORO_COMPLETE = "pomodoro_complete"


@dataclass(frozen=True)
class Countdown:
    target: int


@dataclass(frozen=True)
class Stopwatch:
    pass


@dataclass(frozen=True)
class Pomodoro:
    work: int
    break_: int
    max_cycles: int | None = None  # None = unbounded


TimerMode = Union[Countdown, Stopwatch, Pomodoro]


@dataclass(frozen=True)
class EngineState:
    elapsed_or_remaining: int
    status: EngineStatus = EngineStatus.RUNNING
    phase: Phase | None = None
    completed_cycles: int = 0
    awaiting_advance: bool = False


@dataclass
class TickResult:
    events: list[TimerEvent] = field(default_factory=list)
    old_phase: Phase | None = None
    new_phase: Phase | None = None
    finished_cycle: int | None = None

    def merge(self, other: TickResult) -> None:
        self.events.extend(other.events)
        if other.old_phase is not None:
            self.old_phase = other.old_phase
            self.new_phase = other.new_phase
            self.finished_cycle = other.finished_cycle


def initial_state(mode: TimerMode) -> EngineState:
    if isinstance(mode, Countdown):
        return EngineState(elapsed_or_remaining=max(0, mode.target))
    if isinstance(mode, Stopwatch):
        return EngineState(elapsed_or_remaining=0)
    if isinstance(mode, Pomodoro):
        return EngineState(elapsed_or_remaining=max(0, mode.work), phase=Phase.WORK)
    raise TypeError(f"Unknown timer mode: {mode!r}")


# ---- Per-mode transitions ----

def tick_countdown(state: EngineState, mode: Countdown) -> tuple[EngineState, TickResult]:
    result = TickResult()
    remaining = state.elapsed_or_remaining - 1
    if remaining <= 0:
        result.events.append(TimerEvent.TIMES_UP)
        return replace(state, elapsed_or_remaining=0, status=EngineStatus.FINISHED), result
    return replace(state, elapsed_or_remaining=remaining), result


def tick_stopwatch(state: EngineState, mode: Stopwatch) -> tuple[EngineState, TickResult]:
    return replace(state, elapsed_or_remaining=state.elapsed_or_remaining + 1), TickResult()


def tick_pomodoro(state: EngineState, mode: Pomodoro) -> tuple[EngineState, TickResult]:
    remaining = state.elapsed_or_remaining - 1
    if remaining > 0:
        return replace(state, elapsed_or_remaining=remaining), TickResult()
    return complete_phase(state, mode)


def complete_phase(state: EngineState, mode: Pomodoro) -> tuple[EngineState, TickResult]:
    """End the current Pomodoro phase and move to the next one.

    A cycle counts as completed when its break ends; reaching
    ``max_cycles`` there finishes the run.
    """
    result = TickResult(old_phase=state.phase, finished_cycle=state.completed_cycles + 1)

    if state.phase == Phase.WORK:
        result.new_phase = Phase.BREAK
        result.events.append(TimerEvent.PHASE_CHANGED)
        return replace(state, phase=Phase.BREAK, elapsed_or_remaining=mode.break_), result

    completed = state.completed_cycles + 1
    if mode.max_cycles is not None and completed >= mode.max_cycles:
        result.events.append(TimerEvent.POMODORO_COMPLETE)
        finished = replace(
            state,
            elapsed_or_remaining=0,
            completed_cycles=completed,
            status=EngineStatus.FINISHED,
        )
        return finished, result

    result.new_phase = Phase.WORK
    result.events.append(TimerEvent.PHASE_CHANGED)
    next_state = replace(
        state,
        phase=Phase.WORK,
        elapsed_or_remaining=mode.work,
        completed_cycles=completed,
    )
    return next_state, result


def step(state: EngineState, mode: TimerMode) -> tuple[EngineState, TickResult]:
    """Advance ``state`` by one second of ``mode``."""
    if state.status == EngineStatus.FINISHED or state.awaiting_advance:
        return state, TickResult()
    if isinstance(mode, Countdown):
        return tick_countdown(state, mode)
    if isinstance(mode, Stopwatch):
        return tick_stopwatch(state, mode)
    if isinstance(mode, Pomodoro):
        return tick_pomodoro(state, mode)
    raise TypeError(f"Unknown timer mode: {mode!r}")


class TimerEngine:
    """Holds the active mode and its current state.

    With ``hold_on_phase_change`` set, an automatic Pomodoro phase change
    parks the engine in ``awaiting_advance`` until :meth:`advance` is
    called; ticks are ignored in the meantime.
    """

    def __init__(self, mode: TimerMode, hold_on_phase_change: bool = False):
        self._mode: TimerMode = mode
        self._state: EngineState = initial_state(mode)
        self._hold_on_phase_change: bool = hold_on_phase_change

    # ---- Read-only properties ----

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def elapsed_or_remaining(self) -> int:
        return self._state.elapsed_or_remaining

    @property
    def status(self) -> EngineStatus:
        return self._state.status

    @property
    def is_finished(self) -> bool:
        return self._state.status == EngineStatus.FINISHED

    @property
    def phase(self) -> Phase | None:
        return self._state.phase

    @property
    def completed_cycles(self) -> int:
        return self._state.completed_cycles

    @property
    def cycle(self) -> int:
        """1-based number of the Pomodoro cycle in progress."""
        return self._state.completed_cycles + 1

    @property
    def awaiting_advance(self) -> bool:
        return self._state.awaiting_advance

    # ---- Core methods ----

    def tick(self, steps: int = 1) -> TickResult:
        """Apply ``steps`` one-second ticks, stopping early on finish or hold."""
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")

        result = TickResult()
        for _ in range(steps):
            if self.is_finished or self.awaiting_advance:
                break
            self._state, step_result = step(self._state, self._mode)
            self._hold_if_phase_changed(step_result)
            result.merge(step_result)
        return result

    def advance(self) -> TickResult:
        """Continue past a phase hold, or skip the rest of the current phase.

        Only meaningful for Pomodoro; other modes and a finished engine
        ignore it.
        """
        if not isinstance(self._mode, Pomodoro) or self.is_finished:
            return TickResult()

        if self._state.awaiting_advance:
            self._state = replace(self._state, awaiting_advance=False)
            return TickResult()

        self._state, result = complete_phase(self._state, self._mode)
        return result

    def _hold_if_phase_changed(self, result: TickResult) -> None:
        if self._hold_on_phase_change and TimerEvent.PHASE_CHANGED in result.events:
            self._state = replace(self._state, awaiting_advance=True)
