"""Textual-based UI for the Pomodoro timer.

The app is the host event loop: key bindings and scheduled ticks both go
through ``PomodoroApp.feed_event``, which hands the event to the session state
machine, stores the new state and carries out the returned commands.
"""

import logging
from datetime import timedelta
from functools import partial
from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Input, Static
from textual.worker import WorkerFailed

from .events import Beep, Command, Event, Notify, Quit
from .keymap import event_for_key
from .notifications import DesktopNotifier, NotificationSink
from .session import (
    AwaitingConfirmation,
    Phase,
    Running,
    SessionState,
    Setup,
    Terminated,
    Transition,
    handle,
    initial_transition,
)
from .ticks import ScheduleTick

logger = logging.getLogger(__name__)

WORK_COLOR = "#0087ff"
BREAK_COLOR = "#ffd700"

FIELD_IDS = ("work", "break", "sessions")

# Big digit representations (5 lines tall, 6 chars wide)
BIG_DIGITS = {
    "0": ["██████", "█    █", "█    █", "█    █", "██████"],
    "1": ["  ██  ", "  ██  ", "  ██  ", "  ██  ", "  ██  "],
    "2": ["██████", "     █", "██████", "█     ", "██████"],
    "3": ["██████", "     █", "██████", "     █", "██████"],
    "4": ["█    █", "█    █", "██████", "     █", "     █"],
    "5": ["██████", "█     ", "██████", "     █", "██████"],
    "6": ["██████", "█     ", "██████", "█    █", "██████"],
    "7": ["██████", "     █", "     █", "     █", "     █"],
    "8": ["██████", "█    █", "██████", "█    █", "██████"],
    "9": ["██████", "█    █", "██████", "     █", "██████"],
    ":": ["      ", "  ██  ", "      ", "  ██  ", "      "],
}
DIGIT_HEIGHT = 5


def format_remaining(remaining: timedelta) -> str:
    """Format as ``MM:SS``, or ``H:MM:SS`` from one hour up."""
    total = int(remaining.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def render_big_time(remaining: timedelta) -> str:
    """Render remaining time as big ASCII digits."""
    time_str = format_remaining(remaining)
    lines = []
    for row in range(DIGIT_HEIGHT):
        lines.append(" ".join(BIG_DIGITS[char][row] for char in time_str))
    return "\n".join(lines)


def timer_title(state: Running) -> str:
    if state.phase == Phase.BREAK:
        return "BREAK TIME"
    return f"WORK SESSION {state.progress.current}/{state.progress.total}"


class BigTimer(Static):
    """Big ASCII countdown, falling back to plain text when too narrow."""

    def show(self, remaining: timedelta, color: str) -> None:
        big = render_big_time(remaining)
        if self.size.width and self.size.width < len(big.splitlines()[0]):
            self.update(Text(format_remaining(remaining), style=f"bold {color}"))
        else:
            self.update(Text(big, style=color))


class PomodoroApp(App):
    """Pomodoro timer application."""

    CSS = """
    Screen {
        align: center middle;
    }
    .panel {
        width: 64;
        height: auto;
    }
    .title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: #0087ff;
        margin-bottom: 1;
    }
    .subtle {
        width: 100%;
        content-align: center middle;
        color: #999999;
    }
    .help {
        margin-top: 2;
    }
    Input {
        width: 100%;
    }
    #big-timer {
        width: 100%;
        content-align: center middle;
        margin: 1 0;
    }
    #timer.break .title {
        color: #ffd700;
    }
    """

    BINDINGS = [
        Binding("q", "key_event('q')", "Quit", priority=True),
        Binding("ctrl+c", "key_event('ctrl+c')", "Quit", show=False, priority=True),
        Binding("space", "key_event('space')", "Pause", priority=True),
        Binding("tab", "key_event('tab')", "Next field", show=False, priority=True),
        Binding("shift+tab", "key_event('shift+tab')", "Previous field", show=False, priority=True),
        Binding("up", "key_event('up')", "Up", show=False, priority=True),
        Binding("down", "key_event('down')", "Down", show=False, priority=True),
        Binding("enter", "key_event('enter')", "Start", priority=True),
        Binding("a", "key_event('a')", "Autobreak", priority=True),
        Binding("s", "key_event('s')", "Skip", priority=True),
        Binding("escape", "key_event('escape')", "Setup", priority=True),
        Binding("y", "key_event('y')", "Yes", priority=True),
        Binding("n", "key_event('n')", "No", priority=True),
    ]

    def __init__(
        self,
        initial: Optional[Transition] = None,
        notifier: Optional[NotificationSink] = None,
    ) -> None:
        super().__init__()
        self._startup = initial or initial_transition()
        self.session: SessionState = self._startup.state
        self.notifier: NotificationSink = notifier or DesktopNotifier(bell=self.bell)

    def compose(self) -> ComposeResult:
        with Vertical(id="setup", classes="panel"):
            yield Static("POMODORO SETUP", classes="title")
            yield Static("Work Duration:", classes="subtle")
            yield Input(placeholder="Work (e.g. 25, 30s)", id="work")
            yield Static("Break Duration:", classes="subtle")
            yield Input(placeholder="Break (e.g. 5m)", id="break")
            yield Static("Sessions:", classes="subtle")
            yield Input(placeholder="Sessions (e.g. 4)", id="sessions")
            yield Static(id="autobreak", classes="subtle")
            yield Static(
                "[TAB] Switch  •  [ENTER] Start  •  [a] Autobreak  •  [q] Quit",
                classes="subtle help",
            )
        with Vertical(id="timer", classes="panel"):
            yield Static(id="timer-title", classes="title")
            yield BigTimer(id="big-timer")
            yield Static(id="timer-status", classes="subtle")
            yield Static(
                "[SPACE] Pause  •  [s] Skip  •  [↑/↓] +/- 1m  •  [ESC] Setup  •  [q] Quit",
                classes="subtle help",
            )
        with Vertical(id="confirm", classes="panel"):
            yield Static("CONFIRMATION", classes="title")
            yield Static(id="confirm-message")
            yield Static("[y] Yes  •  [n] No  •  [q] Quit", classes="subtle help")
        yield Footer()

    def on_mount(self) -> None:
        self._apply(self._startup)

    # -- event loop ----------------------------------------------------------

    def feed_event(self, event: Event) -> None:
        """Feed one event through the state machine and run its commands."""
        self._apply(handle(self.session, event))

    def _apply(self, transition: Transition) -> None:
        if type(transition.state) is not type(self.session):
            logger.debug("%s -> %s", type(self.session).__name__, type(transition.state).__name__)
        self.session = transition.state
        self._refresh_view()
        for command in transition.commands:
            self._execute(command)

    def _execute(self, command: Command) -> None:
        if isinstance(command, ScheduleTick):
            self.set_timer(command.delay.total_seconds(), partial(self.feed_event, command.event()))
        elif isinstance(command, Notify):
            logger.info("%s: %s", command.title, command.message)
            self.run_worker(
                partial(self.notifier.notify, command.title, command.message),
                group="notifications",
                thread=True,
                exit_on_error=False,
            )
        elif isinstance(command, Beep):
            self.notifier.beep()
        elif isinstance(command, Quit):
            self.run_worker(self._exit_after_notifications(), group="shutdown")

    async def _exit_after_notifications(self) -> None:
        """Exit once every queued notification has been delivered."""
        pending = [worker for worker in self.workers if worker.group == "notifications"]
        for worker in pending:
            try:
                await worker.wait()
            except WorkerFailed as exc:
                logger.debug("Notification failed: %s", exc)
        self.exit()

    # -- key handling --------------------------------------------------------

    def _form_values(self) -> tuple:
        return tuple(self.query_one(f"#{field_id}", Input).value for field_id in FIELD_IDS)

    def action_key_event(self, key: str) -> None:
        event = event_for_key(self.session, key, self._form_values())
        if event is not None:
            self.feed_event(event)

    def check_action(self, action: str, parameters: tuple) -> Optional[bool]:
        # Keys the current state ignores fall through to the focused input.
        if action == "key_event" and parameters:
            return event_for_key(self.session, str(parameters[0])) is not None
        return True

    # -- view ----------------------------------------------------------------

    def _refresh_view(self) -> None:
        state = self.session
        self.query_one("#setup").display = isinstance(state, Setup)
        self.query_one("#timer").display = isinstance(state, Running)
        self.query_one("#confirm").display = isinstance(state, AwaitingConfirmation)

        if isinstance(state, Setup):
            self._refresh_setup(state)
        elif isinstance(state, Running):
            self._refresh_timer(state)
        elif isinstance(state, AwaitingConfirmation):
            self.set_focus(None)
            self.query_one("#confirm-message", Static).update(state.pending.message)
        elif isinstance(state, Terminated):
            self.set_focus(None)

        self.refresh_bindings()

    def _refresh_setup(self, state: Setup) -> None:
        status = "ON" if state.auto_break else "OFF"
        self.query_one("#autobreak", Static).update(f"Autobreak: {status}")
        self.query_one(f"#{FIELD_IDS[state.focus]}", Input).focus()

    def _refresh_timer(self, state: Running) -> None:
        self.set_focus(None)
        panel = self.query_one("#timer")
        is_break = state.phase == Phase.BREAK
        panel.set_class(is_break, "break")
        panel.set_class(not is_break, "work")

        color = BREAK_COLOR if is_break else WORK_COLOR
        self.query_one("#timer-title", Static).update(timer_title(state))
        self.query_one("#big-timer", BigTimer).show(state.timer.remaining, color)
        self.query_one("#timer-status", Static).update("PAUSED" if state.timer.paused else "RUNNING")


def run_ui(initial: Optional[Transition] = None, notifier: Optional[NotificationSink] = None) -> None:
    """Run the Pomodoro UI.

    Args:
        initial: Start-up transition; defaults to the setup form.
        notifier: Alert sink; defaults to desktop notifications.
    """
    app = PomodoroApp(initial, notifier)
    app.run()
