"""Unit tests for keymap.py."""

from datetime import timedelta

import pytest

from pomo.durations import build_config
from pomo.events import (
    AdjustTime,
    Confirm,
    ConfirmNo,
    ConfirmYes,
    MoveFocus,
    QuitRequested,
    Reset,
    Skip,
    ToggleAutoBreak,
    TogglePause,
)
from pomo.keymap import event_for_key
from pomo.session import Setup, Terminated, handle, initial_transition

RUNNING = initial_transition(build_config("1m")).state


def awaiting_state():
    running = initial_transition(build_config("1m", auto_break=False)).state
    return handle(running, Skip()).state


class TestQuitKeys:
    @pytest.mark.parametrize("key", ["q", "ctrl+c"])
    def test_quit_everywhere(self, key):
        """Quit keys work in every state."""
        for state in (Setup(), RUNNING, awaiting_state()):
            assert event_for_key(state, key) == QuitRequested()


class TestSetupKeys:
    """Test keys on the setup form."""

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("tab", MoveFocus(1)),
            ("down", MoveFocus(1)),
            ("shift+tab", MoveFocus(-1)),
            ("up", MoveFocus(-1)),
            ("a", ToggleAutoBreak()),
        ],
    )
    def test_navigation(self, key, expected):
        assert event_for_key(Setup(), key) == expected

    def test_enter_moves_to_next_field(self):
        """Enter on an earlier field advances focus."""
        assert event_for_key(Setup(focus=0), "enter") == MoveFocus(1)
        assert event_for_key(Setup(focus=1), "enter") == MoveFocus(1)

    def test_enter_on_last_field_confirms(self):
        """Enter on the sessions field submits the form."""
        event = event_for_key(Setup(focus=2, auto_break=False), "enter", ("30s", "2m", "3"))
        assert isinstance(event, Confirm)
        assert event.config.work_duration == timedelta(seconds=30)
        assert event.config.break_duration == timedelta(minutes=2)
        assert event.config.total_sessions == 3
        assert event.config.auto_break is False

    def test_timer_keys_ignored(self):
        """Typing into the form isn't a timer command."""
        assert event_for_key(Setup(), "space") is None
        assert event_for_key(Setup(), "s") is None


class TestRunningKeys:
    """Test keys while counting down."""

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("space", TogglePause()),
            ("s", Skip()),
            ("up", AdjustTime(1)),
            ("down", AdjustTime(-1)),
            ("escape", Reset()),
        ],
    )
    def test_timer_controls(self, key, expected):
        assert event_for_key(RUNNING, key) == expected

    def test_confirmation_keys_ignored(self):
        assert event_for_key(RUNNING, "y") is None


class TestConfirmationKeys:
    """Test keys at the confirmation prompt."""

    @pytest.mark.parametrize("key", ["y", "Y"])
    def test_yes(self, key):
        assert event_for_key(awaiting_state(), key) == ConfirmYes()

    @pytest.mark.parametrize("key", ["n", "N"])
    def test_no(self, key):
        assert event_for_key(awaiting_state(), key) == ConfirmNo()

    def test_timer_keys_ignored(self):
        assert event_for_key(awaiting_state(), "space") is None


def test_terminated_ignores_keys():
    """Only quit keys mean anything once the run is over."""
    assert event_for_key(Terminated(), "space") is None
