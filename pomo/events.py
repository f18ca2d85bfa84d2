"""Input events consumed by the session and commands it hands back."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .ticks import ScheduleTick, TickEvent

if TYPE_CHECKING:
    from .session import Config


# ── input events ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MoveFocus:
    """Move setup-form focus by ``delta`` fields (wraps around)."""
    delta: int


@dataclass(frozen=True)
class ToggleAutoBreak:
    pass


@dataclass(frozen=True)
class Confirm:
    """Leave setup and start the first work session with ``config``."""
    config: "Config"


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class AdjustTime:
    """Add (``+1``) or remove (``-1``) one minute from the countdown."""
    direction: int


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class ConfirmYes:
    pass


@dataclass(frozen=True)
class ConfirmNo:
    pass


@dataclass(frozen=True)
class QuitRequested:
    pass


Event = Union[
    TickEvent,
    MoveFocus,
    ToggleAutoBreak,
    Confirm,
    TogglePause,
    Skip,
    AdjustTime,
    Reset,
    ConfirmYes,
    ConfirmNo,
    QuitRequested,
]


# ── commands ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Notify:
    title: str
    message: str


@dataclass(frozen=True)
class Beep:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Command = Union[ScheduleTick, Notify, Beep, Quit]
