"""Tests for standupnote.dates module."""

from datetime import date

import pytest

from standupnote.dates import get_commit_date_range, get_previous_working_day, parse_day


class TestGetPreviousWorkingDay:
    """Tests for get_previous_working_day function."""

    @pytest.mark.parametrize(
        "today, expected",
        [
            (date(2026, 10, 19), date(2026, 10, 16)),  # Monday -> Friday
            (date(2026, 10, 20), date(2026, 10, 19)),  # Tuesday -> Monday
            (date(2026, 10, 17), date(2026, 10, 16)),  # Saturday -> Friday
            (date(2026, 10, 18), date(2026, 10, 16)),  # Sunday -> Friday
        ],
    )
    def test_previous_working_day(self, today, expected):
        """Test weekends and Mondays go back to Friday."""
        assert get_previous_working_day(today) == expected


class TestGetCommitDateRange:
    """Tests for get_commit_date_range function."""

    def test_whole_day(self):
        """Test the range covers the whole local day."""
        since, until = get_commit_date_range(date(2026, 10, 16))

        assert since.startswith("2026-10-16T00:00:00")
        assert until.startswith("2026-10-16T23:59:59")

    def test_includes_offset(self):
        """Test timestamps carry a UTC offset."""
        since, _ = get_commit_date_range(date(2026, 10, 16))
        assert "+" in since[10:] or "-" in since[10:]


class TestParseDay:
    """Tests for parse_day function."""

    def test_valid(self):
        """Test YYYY-MM-DD parsing."""
        assert parse_day("2026-10-16") == date(2026, 10, 16)

    def test_invalid(self):
        """Test invalid dates raise ValueError."""
        with pytest.raises(ValueError):
            parse_day("16/10/2026")
