"""Unit tests for durations.py."""

from datetime import timedelta

import pytest

from pomo.durations import build_config, parse_duration, parse_sessions
from pomo.session import Config


class TestParseDuration:
    """Test free-form duration parsing."""

    def test_empty_uses_default(self):
        """Empty input gives the default minutes."""
        assert parse_duration("", 25) == timedelta(minutes=25)

    def test_whitespace_uses_default(self):
        """Whitespace-only input counts as empty."""
        assert parse_duration("   ", 5) == timedelta(minutes=5)

    def test_garbage_uses_default(self):
        """Unparseable input gives the default minutes."""
        assert parse_duration("abc", 5) == timedelta(minutes=5)

    def test_seconds_suffix(self):
        """Unit-suffixed seconds are used as-is."""
        assert parse_duration("90s", 25) == timedelta(seconds=90)

    def test_bare_integer_is_minutes(self):
        """A bare integer means minutes."""
        assert parse_duration("10", 25) == timedelta(minutes=10)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("5m", timedelta(minutes=5)),
            ("1h", timedelta(hours=1)),
            ("1h30m", timedelta(minutes=90)),
            ("1.5h", timedelta(minutes=90)),
            ("2m30s", timedelta(seconds=150)),
            ("1500ms", timedelta(seconds=1.5)),
            (" 45m ", timedelta(minutes=45)),
            ("+5m", timedelta(minutes=5)),
        ],
    )
    def test_structured_syntax(self, text, expected):
        """Number-plus-unit groups are summed."""
        assert parse_duration(text, 25) == expected

    @pytest.mark.parametrize("text", ["0", "0s", "-5m", "-3"])
    def test_non_positive_uses_default(self, text):
        """Zero and negative durations fall back to the default."""
        assert parse_duration(text, 25) == timedelta(minutes=25)

    @pytest.mark.parametrize("text", ["5 m", "m5", "5x", "1h30", "1.5"])
    def test_malformed_uses_default(self, text):
        """Anything that isn't unit groups or an integer falls back."""
        assert parse_duration(text, 7) == timedelta(minutes=7)

    @pytest.mark.parametrize("text", ["99999999999999h", "99999999999999999999"])
    def test_out_of_range_uses_default(self, text):
        """Durations too large to represent fall back instead of raising."""
        assert parse_duration(text, 5) == timedelta(minutes=5)

    @pytest.mark.parametrize("text", ["1_0", "\u0663", "\u0663m", "1_0m"])
    def test_non_ascii_digits_use_default(self, text):
        """Underscored numbers and non-ASCII digits are not integers here."""
        assert parse_duration(text, 25) == timedelta(minutes=25)


class TestParseSessions:
    """Test session count parsing."""

    def test_valid_count(self):
        assert parse_sessions("6") == 6

    @pytest.mark.parametrize("text", ["", "0", "-2", "four", "2.5", "1_0", "\u0663"])
    def test_invalid_count_uses_default(self, text):
        """Zero, negative or non-integer input gives four sessions."""
        assert parse_sessions(text) == 4

    def test_custom_default(self):
        assert parse_sessions("", default=2) == 2


class TestBuildConfig:
    """Test config assembly from raw text."""

    def test_defaults(self):
        """Empty text gives the 25/5/4 defaults with auto-break on."""
        assert build_config() == Config(
            work_duration=timedelta(minutes=25),
            break_duration=timedelta(minutes=5),
            total_sessions=4,
            auto_break=True,
        )

    def test_custom_values(self):
        config = build_config("45m", "15m", "6", auto_break=False)
        assert config.work_duration == timedelta(minutes=45)
        assert config.break_duration == timedelta(minutes=15)
        assert config.total_sessions == 6
        assert config.auto_break is False
