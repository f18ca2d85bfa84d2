"""Notification support for the Pomodoro timer.

The session only ever asks for two fire-and-forget side effects: a desktop
notification and an audible beep. Anything that goes wrong while producing
them is logged and dropped here; nothing propagates back to the caller.
"""

import logging
import platform
import subprocess
import sys
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

_NOTIFY_ERRORS = (subprocess.SubprocessError, FileNotFoundError, OSError)

_WINDOWS_SOUND = (
    "(New-Object Media.SoundPlayer "
    "'C:\\Windows\\Media\\Windows Notify System Generic.wav').PlaySync()"
)


class NotificationSink(Protocol):
    """Where session alerts go."""

    def notify(self, title: str, message: str) -> None:
        ...

    def beep(self) -> None:
        ...


def _send_bell() -> None:
    """Send terminal bell."""
    sys.stdout.write("\a")
    sys.stdout.flush()


def _send_macos_notification(title: str, message: str) -> bool:
    """Send macOS notification via osascript.

    Returns:
        True if successful, False otherwise.
    """
    script = (
        f"display notification {_applescript_string(message)} "
        f"with title {_applescript_string(title)}"
    )
    try:
        subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            timeout=5,
        )
        return True
    except _NOTIFY_ERRORS as exc:
        logger.debug("osascript notification failed: %s", exc)
        return False


def _send_linux_notification(title: str, message: str) -> bool:
    """Send Linux notification via notify-send.

    Returns:
        True if successful, False otherwise.
    """
    try:
        subprocess.run(
            ["notify-send", title, message],
            capture_output=True,
            timeout=5,
        )
        return True
    except _NOTIFY_ERRORS as exc:
        logger.debug("notify-send notification failed: %s", exc)
        return False


def _play_windows_sound() -> bool:
    """Start the stock Windows notification sound without waiting for it."""
    try:
        subprocess.Popen(
            ["powershell", "-c", _WINDOWS_SOUND],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return True
    except _NOTIFY_ERRORS as exc:
        logger.debug("Windows notification sound failed: %s", exc)
        return False


def _applescript_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class DesktopNotifier:
    """Native desktop notifications plus an audible beep.

    Args:
        bell: Callable that rings the bell on non-Windows platforms.
            Defaults to writing BEL to stdout.
        system: Platform name override, as returned by ``platform.system()``.
    """

    def __init__(
        self,
        bell: Optional[Callable[[], None]] = None,
        system: Optional[str] = None,
    ) -> None:
        self._bell = bell or _send_bell
        self._system = system or platform.system()

    def notify(self, title: str, message: str) -> None:
        if self._system == "Darwin":
            _send_macos_notification(title, message)
        elif self._system == "Linux":
            _send_linux_notification(title, message)
        else:
            # Windows and other platforms: beep only
            logger.debug("No desktop notifications on %s: %s", self._system, message)

    def beep(self) -> None:
        if self._system == "Windows":
            _play_windows_sound()
            return
        try:
            self._bell()
        except OSError as exc:
            logger.debug("Bell failed: %s", exc)


class SilentNotifier:
    """Drops every alert (``--no-notify``)."""

    def notify(self, title: str, message: str) -> None:
        logger.debug("Notification suppressed: %s", message)

    def beep(self) -> None:
        pass
