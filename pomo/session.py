"""Pure logic for the Pomodoro session state machine.

``handle(state, event)`` reads the current ``SessionState`` and one event and
returns a ``Transition``: the replacement state plus the commands the host
loop must carry out (schedule a tick, notify, beep, quit). State values are
frozen and never mutated; the host keeps the only reference that changes.

States
------
Setup                 Setup form is shown; nothing is counting down.
Running               A work or break phase is counting down (or paused).
AwaitingConfirmation  A phase finished with auto-break off; waiting for y/n.
Terminated            Quit requested or all sessions done.

Every transition that has to orphan ticks already in flight (confirm, skip,
resume, reset, a confirmed phase change) bumps ``TimerState.generation``. A
tick is honored only when its generation equals the current one.
"""

import logging
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum, auto
from typing import Optional, Tuple, Union

from .events import (
    AdjustTime,
    Beep,
    Command,
    Confirm,
    ConfirmNo,
    ConfirmYes,
    Event,
    MoveFocus,
    Notify,
    Quit,
    QuitRequested,
    Reset,
    Skip,
    ToggleAutoBreak,
    TogglePause,
)
from .ticks import TICK_QUANTUM, TickEvent, schedule_tick

logger = logging.getLogger(__name__)

NOTIFY_TITLE = "Pomodoro"
ADJUST_STEP = timedelta(minutes=1)
SETUP_FIELDS = 3  # work, break, sessions


class Phase(Enum):
    """Which half of the cycle is counting down."""
    WORK = auto()
    BREAK = auto()


class PendingTransition(Enum):
    """What answering "yes" to a confirmation prompt starts."""
    START_BREAK = auto()
    START_WORK = auto()


# ── data model ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Config:
    """Durations and session count for one run."""
    work_duration: timedelta
    break_duration: timedelta
    total_sessions: int
    auto_break: bool = True


@dataclass(frozen=True)
class SessionProgress:
    """1-based index of the current work session out of ``total``."""
    current: int
    total: int

    def advanced(self) -> "SessionProgress":
        return SessionProgress(self.current + 1, self.total)

    @property
    def exhausted(self) -> bool:
        return self.current > self.total


@dataclass(frozen=True)
class TimerState:
    remaining: timedelta
    paused: bool = False
    generation: int = 0


@dataclass(frozen=True)
class PendingConfirmation:
    transition: PendingTransition
    message: str


@dataclass(frozen=True)
class Setup:
    """Setup form state.

    ``generation`` carries the tick counter across a reset so a new run
    never reuses a generation that may still have ticks in flight.
    """
    focus: int = 0
    auto_break: bool = True
    generation: int = 0


@dataclass(frozen=True)
class Running:
    config: Config
    phase: Phase
    progress: SessionProgress
    timer: TimerState


@dataclass(frozen=True)
class AwaitingConfirmation:
    """A phase ended with auto-break off.

    ``timer`` is the countdown as it stood when the prompt was raised (with
    its generation already bumped); declining restores it unchanged.
    """
    config: Config
    phase: Phase
    progress: SessionProgress
    timer: TimerState
    pending: PendingConfirmation


@dataclass(frozen=True)
class Terminated:
    generation: int = 0


SessionState = Union[Setup, Running, AwaitingConfirmation, Terminated]


@dataclass(frozen=True)
class Transition:
    """Result of handling one event."""
    state: SessionState
    commands: Tuple[Command, ...] = ()


def generation_of(state: SessionState) -> int:
    """Return the tick generation current in ``state``."""
    if isinstance(state, (Running, AwaitingConfirmation)):
        return state.timer.generation
    return state.generation


# ── messages ──────────────────────────────────────────────────────────────


def _work_finished_message(progress: SessionProgress) -> str:
    return f"Work session {progress.current}/{progress.total} finished! Time for a break."


def _break_finished_message(progress: SessionProgress) -> str:
    return f"Break finished! Starting work session {progress.current + 1}/{progress.total}."


def _all_done_message(progress: SessionProgress) -> str:
    return f"All {progress.total} sessions completed! Great work!"


def _prompt_for(phase: Phase, progress: SessionProgress) -> PendingConfirmation:
    if phase == Phase.WORK:
        return PendingConfirmation(
            PendingTransition.START_BREAK,
            f"Work session {progress.current}/{progress.total} finished!\nStart the break?",
        )
    return PendingConfirmation(
        PendingTransition.START_WORK,
        f"Break finished!\nStart work session {progress.current + 1}/{progress.total}?",
    )


# ── transitions ───────────────────────────────────────────────────────────


def initial_transition(config: Optional[Config] = None, auto_break: bool = True) -> Transition:
    """Return the start-up transition.

    Without a config the run begins on the setup form; with one it is
    confirmed straight away, as if the form had been submitted.
    """
    if config is None:
        return Transition(Setup(auto_break=auto_break))
    return handle(Setup(auto_break=config.auto_break), Confirm(config))


def handle(state: SessionState, event: Event) -> Transition:
    """Apply ``event`` to ``state``.

    Events that mean nothing in the current state leave it unchanged and
    produce no commands.
    """
    if isinstance(state, Terminated):
        return Transition(state)
    if isinstance(event, QuitRequested):
        return Transition(Terminated(generation_of(state)), (Quit(),))

    if isinstance(state, Setup):
        return _handle_setup(state, event)
    if isinstance(state, Running):
        return _handle_running(state, event)
    return _handle_confirmation(state, event)


def _handle_setup(state: Setup, event: Event) -> Transition:
    if isinstance(event, MoveFocus):
        return Transition(replace(state, focus=(state.focus + event.delta) % SETUP_FIELDS))
    if isinstance(event, ToggleAutoBreak):
        return Transition(replace(state, auto_break=not state.auto_break))
    if isinstance(event, Confirm):
        return _start_run(event.config, state.generation + 1)
    return Transition(state)


def _start_run(config: Config, generation: int) -> Transition:
    logger.debug(
        "Starting run: work=%s break=%s sessions=%d auto_break=%s",
        config.work_duration,
        config.break_duration,
        config.total_sessions,
        config.auto_break,
    )
    running = Running(
        config=config,
        phase=Phase.WORK,
        progress=SessionProgress(1, config.total_sessions),
        timer=TimerState(config.work_duration, paused=False, generation=generation),
    )
    return Transition(running, (schedule_tick(generation),))


def _handle_running(state: Running, event: Event) -> Transition:
    timer = state.timer

    if isinstance(event, TickEvent):
        return _handle_tick(state, event)

    if isinstance(event, TogglePause):
        if timer.paused:
            # Resuming starts a new tick chain; ticks from before the pause are stale.
            generation = timer.generation + 1
            resumed = replace(state, timer=replace(timer, paused=False, generation=generation))
            return Transition(resumed, (schedule_tick(generation),))
        return Transition(replace(state, timer=replace(timer, paused=True)))

    if isinstance(event, Skip):
        return _finish_phase(state)

    if isinstance(event, AdjustTime):
        remaining = _adjusted(timer.remaining, event.direction)
        return Transition(replace(state, timer=replace(timer, remaining=remaining)))

    if isinstance(event, Reset):
        # The form widgets keep their text; only the toggle and counter carry over.
        return Transition(Setup(auto_break=state.config.auto_break, generation=timer.generation + 1))

    return Transition(state)


def _handle_tick(state: Running, event: TickEvent) -> Transition:
    timer = state.timer
    if event.generation != timer.generation:
        logger.debug("Dropping stale tick %d (current %d)", event.generation, timer.generation)
        return Transition(state)
    if timer.paused:
        return Transition(state)

    if timer.remaining > TICK_QUANTUM:
        ticked = replace(state, timer=replace(timer, remaining=timer.remaining - TICK_QUANTUM))
        return Transition(ticked, (schedule_tick(timer.generation),))
    return _finish_phase(state)


def _adjusted(remaining: timedelta, direction: int) -> timedelta:
    if direction > 0:
        return remaining + ADJUST_STEP
    if direction < 0 and remaining > ADJUST_STEP:
        return max(remaining - ADJUST_STEP, ADJUST_STEP)
    return remaining


def _finish_phase(state: Running) -> Transition:
    """End the current phase, by expiry or skip."""
    generation = state.timer.generation + 1
    logger.debug(
        "%s phase finished (session %d/%d)",
        state.phase.name,
        state.progress.current,
        state.progress.total,
    )

    if state.config.auto_break:
        advanced = _advance(state.config, state.phase, state.progress, generation)
        return Transition(advanced.state, (Beep(),) + advanced.commands)

    awaiting = AwaitingConfirmation(
        config=state.config,
        phase=state.phase,
        progress=state.progress,
        timer=replace(state.timer, generation=generation),
        pending=_prompt_for(state.phase, state.progress),
    )
    return Transition(awaiting, (Beep(),))


def _advance(config: Config, finished: Phase, progress: SessionProgress, generation: int) -> Transition:
    """Move from the ``finished`` phase to the next one, or end the run."""
    if finished == Phase.WORK:
        running = Running(
            config=config,
            phase=Phase.BREAK,
            progress=progress,
            timer=TimerState(config.break_duration, paused=False, generation=generation),
        )
        notify = Notify(NOTIFY_TITLE, _work_finished_message(progress))
        return Transition(running, (notify, schedule_tick(generation)))

    notify = Notify(NOTIFY_TITLE, _break_finished_message(progress))
    progress = progress.advanced()
    if progress.exhausted:
        logger.info("All %d sessions completed", progress.total)
        done = Notify(NOTIFY_TITLE, _all_done_message(progress))
        return Transition(Terminated(generation), (notify, done, Quit()))

    running = Running(
        config=config,
        phase=Phase.WORK,
        progress=progress,
        timer=TimerState(config.work_duration, paused=False, generation=generation),
    )
    return Transition(running, (notify, schedule_tick(generation)))


def _handle_confirmation(state: AwaitingConfirmation, event: Event) -> Transition:
    if isinstance(event, ConfirmYes):
        if state.pending.transition == PendingTransition.START_BREAK:
            finished = Phase.WORK
        else:
            finished = Phase.BREAK
        return _advance(state.config, finished, state.progress, state.timer.generation + 1)

    if isinstance(event, ConfirmNo):
        # Back to the countdown as it was; no tick is scheduled, so the
        # timer stays stalled until skip, reset or pause/resume.
        return Transition(Running(state.config, state.phase, state.progress, state.timer))

    return Transition(state)
