"""Tests for the command line entry point."""

import logging
from datetime import timedelta
from unittest.mock import patch

import pytest

from pomo.__main__ import main, parse_args, setup_logging
from pomo.notifications import SilentNotifier
from pomo.session import Running, Setup


class TestParseArgs:
    """Test argument parsing."""

    def test_no_arguments(self):
        args = parse_args([])
        assert args.work is None
        assert args.break_ is None
        assert args.sessions is None
        assert args.auto_break is True
        assert args.no_notify is False

    def test_positional_arguments(self):
        args = parse_args(["45m", "15m", "6"])
        assert (args.work, args.break_, args.sessions) == ("45m", "15m", "6")

    def test_flags(self):
        args = parse_args(["--no-auto-break", "--no-notify", "--debug", "--log-file", "pomo.log"])
        assert args.auto_break is False
        assert args.no_notify is True
        assert args.debug is True
        assert args.log_file == "pomo.log"

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["--version"])
        assert "pomo" in capsys.readouterr().out


class TestMain:
    """Test how main() starts the UI."""

    def test_without_work_starts_in_setup(self):
        """No work argument opens the setup form."""
        with patch("pomo.__main__.run_ui") as run_ui, patch("pomo.__main__.setup_logging"):
            assert main([]) == 0
        initial, notifier = run_ui.call_args[0]
        assert isinstance(initial.state, Setup)
        assert notifier is None

    def test_with_work_starts_running(self):
        """A work argument confirms the config immediately."""
        with patch("pomo.__main__.run_ui") as run_ui, patch("pomo.__main__.setup_logging"):
            main(["50m", "10m", "2", "--no-auto-break"])
        initial, _ = run_ui.call_args[0]
        state = initial.state
        assert isinstance(state, Running)
        assert state.timer.remaining == timedelta(minutes=50)
        assert state.config.break_duration == timedelta(minutes=10)
        assert state.progress.total == 2
        assert state.config.auto_break is False

    def test_no_notify_uses_silent_notifier(self):
        with patch("pomo.__main__.run_ui") as run_ui, patch("pomo.__main__.setup_logging"):
            main(["--no-notify"])
        _, notifier = run_ui.call_args[0]
        assert isinstance(notifier, SilentNotifier)

    def test_keyboard_interrupt_exits_cleanly(self):
        with patch("pomo.__main__.run_ui", side_effect=KeyboardInterrupt), patch(
            "pomo.__main__.setup_logging"
        ):
            assert main([]) == 0


class TestSetupLogging:
    def test_log_file(self, tmp_path):
        """--log-file writes formatted records to the file."""
        path = tmp_path / "pomo.log"
        root = logging.getLogger()
        level = root.level
        setup_logging(logging.DEBUG, str(path))
        try:
            logging.getLogger("pomo.test").debug("hello")
            for handler in logging.getLogger().handlers:
                handler.flush()
            assert "[DEBUG] pomo.test: hello" in path.read_text(encoding="utf-8")
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()
            root.setLevel(level)
