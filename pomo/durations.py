"""Parsing of free-form duration and session-count input."""

import re
from datetime import timedelta
from typing import Optional

from .session import Config

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_SESSIONS = 4

# Seconds per unit suffix.
_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

# Longer suffixes first so "ms" is not read as "m" followed by garbage.
_UNIT_PATTERN = "|".join(sorted(_UNITS, key=len, reverse=True))
_NUMBER_PATTERN = r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)"
_PART = re.compile(rf"({_NUMBER_PATTERN})({_UNIT_PATTERN})")
_STRUCTURED = re.compile(rf"([-+]?)((?:{_NUMBER_PATTERN}(?:{_UNIT_PATTERN}))+)")
_INTEGER = re.compile(r"[-+]?[0-9]+")


def _parse_structured(text: str) -> Optional[timedelta]:
    """Parse unit-suffixed syntax such as ``90s``, ``5m`` or ``1h30m``."""
    match = _STRUCTURED.fullmatch(text)
    if match is None:
        return None

    sign, body = match.groups()
    seconds = sum(float(number) * _UNITS[unit] for number, unit in _PART.findall(body))
    if sign == "-":
        seconds = -seconds
    return timedelta(seconds=seconds)


def _parse_int(text: str) -> Optional[int]:
    # ASCII digits only, no underscores.
    if _INTEGER.fullmatch(text) is None:
        return None
    return int(text)


def parse_duration(text: str, default_minutes: int) -> timedelta:
    """Convert user text into a duration, falling back to a default.

    Accepts unit-suffixed durations ("90s", "5m", "1h30m", "1.5h") or a
    bare integer, read as minutes. Empty, unparseable and non-positive
    input all yield ``default_minutes`` minutes; this never raises.

    Args:
        text: Raw user input.
        default_minutes: Minutes to use when ``text`` can't be used.
    """
    default = timedelta(minutes=default_minutes)
    text = text.strip()
    if not text:
        return default

    try:
        duration = _parse_structured(text)
        if duration is None:
            minutes = _parse_int(text)
            if minutes is not None:
                duration = timedelta(minutes=minutes)
    except OverflowError:
        # Past timedelta.max
        return default

    if duration is None or duration <= timedelta():
        return default
    return duration


def parse_sessions(text: str, default: int = DEFAULT_SESSIONS) -> int:
    """Parse a session count; zero, negative or invalid input gives ``default``."""
    count = _parse_int(text.strip())
    if count is None or count <= 0:
        return default
    return count


def build_config(
    work_text: str = "",
    break_text: str = "",
    sessions_text: str = "",
    auto_break: bool = True,
) -> Config:
    """Build a session ``Config`` from raw setup-form or command-line text."""
    return Config(
        work_duration=parse_duration(work_text, DEFAULT_WORK_MINUTES),
        break_duration=parse_duration(break_text, DEFAULT_BREAK_MINUTES),
        total_sessions=parse_sessions(sessions_text),
        auto_break=auto_break,
    )
