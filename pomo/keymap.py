"""Key names to session events."""

from typing import Optional, Sequence

from .durations import build_config
from .events import (
    AdjustTime,
    Confirm,
    ConfirmNo,
    ConfirmYes,
    Event,
    MoveFocus,
    QuitRequested,
    Reset,
    Skip,
    ToggleAutoBreak,
    TogglePause,
)
from .session import SETUP_FIELDS, AwaitingConfirmation, Running, SessionState, Setup

_QUIT_KEYS = frozenset({"q", "ctrl+c"})

_SETUP_KEYS = {
    "tab": MoveFocus(1),
    "down": MoveFocus(1),
    "shift+tab": MoveFocus(-1),
    "up": MoveFocus(-1),
    "a": ToggleAutoBreak(),
    "A": ToggleAutoBreak(),
}

_RUNNING_KEYS = {
    "space": TogglePause(),
    "s": Skip(),
    "up": AdjustTime(1),
    "down": AdjustTime(-1),
    "escape": Reset(),
}

_CONFIRM_KEYS = {
    "y": ConfirmYes(),
    "Y": ConfirmYes(),
    "n": ConfirmNo(),
    "N": ConfirmNo(),
}


def event_for_key(
    state: SessionState,
    key: str,
    form: Sequence[str] = ("", "", ""),
) -> Optional[Event]:
    """Map a key press to an event for ``state``, or None if it means nothing.

    Args:
        state: Current session state.
        key: Textual key name ("space", "shift+tab", "y", ...).
        form: Work, break and sessions text from the setup form; only read
            when ``enter`` submits it.
    """
    if key in _QUIT_KEYS:
        return QuitRequested()

    if isinstance(state, Setup):
        if key == "enter":
            if state.focus == SETUP_FIELDS - 1:
                work_text, break_text, sessions_text = form
                return Confirm(build_config(work_text, break_text, sessions_text, state.auto_break))
            return MoveFocus(1)
        return _SETUP_KEYS.get(key)
    if isinstance(state, Running):
        return _RUNNING_KEYS.get(key)
    if isinstance(state, AwaitingConfirmation):
        return _CONFIRM_KEYS.get(key)
    return None
