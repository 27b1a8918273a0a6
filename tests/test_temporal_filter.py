"""
Unit tests for date windows, status timestamps and date shortcuts.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from models.status import CandidateStatus, TemporalMode
from schemas.records import Candidate
from utils.temporal_filter import (
    DateRange,
    format_day,
    in_range,
    parse_date,
    parse_timestamp,
    relevant_timestamp,
    resolve_date_shortcut,
    status_timestamp,
)

IST = timezone(timedelta(hours=5, minutes=30))


class TestInRange:
    """Tests for in_range boundaries."""

    def test_end_of_day_is_inclusive(self):
        """23:59:59.999 on the end date is inside the window."""
        assert in_range("2025-03-10T23:59:59.999", end="2025-03-10") is True

    def test_one_millisecond_later_is_excluded(self):
        """00:00:00.000 the next day is outside the window."""
        assert in_range("2025-03-11T00:00:00.000", end="2025-03-10") is False

    def test_start_of_day_is_inclusive(self):
        """Midnight on the start date is inside the window."""
        assert in_range("2025-03-10T00:00:00", start="2025-03-10") is True
        assert in_range("2025-03-09T23:59:59.999", start="2025-03-10") is False

    def test_no_bounds_includes_everything(self):
        """Without bounds even a missing timestamp is included."""
        assert in_range("2025-03-10T12:00:00") is True
        assert in_range(None) is True

    def test_missing_timestamp_excluded_when_range_active(self):
        """Missing or unparseable timestamps are out when any bound is set."""
        assert in_range(None, start="2025-03-10") is False
        assert in_range("not a date", end="2025-03-10") is False

    def test_zone_aware_timestamp_converted_to_report_zone(self):
        """A UTC instant late on the 10th is the 11th in IST."""
        assert in_range("2025-03-10T18:30:00Z", end="2025-03-10", tz=IST) is False
        assert in_range("2025-03-10T18:29:59.999Z", end="2025-03-10", tz=IST) is True

    def test_datetime_and_date_inputs(self):
        """datetime and date values are accepted as timestamps."""
        assert in_range(datetime(2025, 3, 10, 8, 0), start=date(2025, 3, 10), end=date(2025, 3, 10))
        assert in_range(date(2025, 3, 10), start="2025-03-10", end="2025-03-10")


class TestParsing:
    """Tests for timestamp and date parsing."""

    def test_epoch_milliseconds(self):
        """Integers are epoch milliseconds."""
        assert parse_timestamp(0, timezone.utc) == datetime(1970, 1, 1)
        assert parse_timestamp(1500, timezone.utc) == datetime(1970, 1, 1, 0, 0, 1, 500000)

    def test_truncates_to_milliseconds(self):
        """Sub-millisecond precision is dropped."""
        parsed = parse_timestamp("2025-03-10T23:59:59.999999")
        assert parsed == datetime(2025, 3, 10, 23, 59, 59, 999000)

    def test_unparseable_returns_none(self):
        """Garbage and booleans are not timestamps."""
        assert parse_timestamp("yesterday-ish") is None
        assert parse_timestamp(True) is None
        assert parse_timestamp("   ") is None

    def test_parse_date_from_iso_datetime(self):
        """A datetime string yields its calendar date."""
        assert parse_date("2025-03-10T15:00:00") == date(2025, 3, 10)
        assert parse_date(None) is None


class TestDateRange:
    """Tests for DateRange."""

    def test_inactive_range(self):
        """A range with no bounds is inactive and contains everything."""
        window = DateRange()
        assert window.is_active is False
        assert window.contains(None) is True

    def test_from_values_drops_unparseable_bounds(self):
        """Unparseable bounds are treated as absent."""
        window = DateRange.from_values("garbage", "2025-03-10")
        assert window.start is None
        assert window.end == date(2025, 3, 10)

    def test_reversed_range_matches_nothing(self):
        """start after end contains no timestamp."""
        window = DateRange(date(2025, 3, 10), date(2025, 3, 9))
        assert window.contains("2025-03-09T12:00:00") is False
        assert window.contains("2025-03-10T12:00:00") is False

    def test_to_dict(self):
        """Bounds serialize as ISO dates."""
        assert DateRange(date(2025, 3, 1), None).to_dict() == {"start": "2025-03-01", "end": None}


class TestStatusTimestamp:
    """Tests for status_timestamp and relevant_timestamp."""

    def test_joining_date_wins_for_joined(self):
        """Joined is dated by joining_date when present."""
        candidate = Candidate(
            id="c",
            status="Joined",
            joining_date="2025-03-15",
            status_history=[{"status": "Joined", "timestamp": "2025-03-14T10:00:00"}],
        )
        assert status_timestamp(candidate, CandidateStatus.JOINED) == datetime(2025, 3, 15)

    def test_selection_date_wins_for_selected(self):
        """Selected is dated by selection_date when present."""
        candidate = Candidate(id="c", status="Selected", selection_date="2025-03-11T09:30:00")
        assert status_timestamp(candidate, CandidateStatus.SELECTED) == datetime(2025, 3, 11, 9, 30)

    def test_latest_matching_history_entry(self):
        """The most recent entry for the status is used, aliases included."""
        candidate = Candidate(
            id="c",
            status="Interviewed",
            created_at="2025-03-01T09:00:00",
            status_history=[
                {"status": "Interview", "timestamp": "2025-03-03T10:00:00"},
                {"status": "Shortlisted", "timestamp": "2025-03-04T10:00:00"},
                {"status": "Interviewed", "timestamp": "2025-03-06T10:00:00"},
            ],
        )
        assert status_timestamp(candidate, CandidateStatus.INTERVIEWED) == datetime(2025, 3, 6, 10, 0)

    def test_falls_back_to_created_at(self):
        """Without a matching entry the creation time is used."""
        candidate = Candidate(id="c", status="Rejected", created_at="2025-03-01T09:00:00")
        assert status_timestamp(candidate, CandidateStatus.REJECTED) == datetime(2025, 3, 1, 9, 0)

    def test_relevant_timestamp_by_mode(self):
        """Creation mode ignores history; status mode uses it."""
        candidate = Candidate(
            id="c",
            status="Rejected",
            created_at="2025-03-01T09:00:00",
            status_history=[{"status": "Rejected", "timestamp": "2025-03-08T16:00:00"}],
        )
        creation = relevant_timestamp(candidate, CandidateStatus.REJECTED, TemporalMode.CREATION)
        status = relevant_timestamp(candidate, CandidateStatus.REJECTED, TemporalMode.STATUS)

        assert creation == datetime(2025, 3, 1, 9, 0)
        assert status == datetime(2025, 3, 8, 16, 0)


class TestDateShortcuts:
    """Tests for T/Y/W/L shortcuts (2025-03-12 is a Wednesday)."""

    TODAY = date(2025, 3, 12)

    def test_today(self):
        assert resolve_date_shortcut("T", self.TODAY) == DateRange(self.TODAY, self.TODAY)

    def test_yesterday(self):
        yesterday = date(2025, 3, 11)
        assert resolve_date_shortcut("Y", self.TODAY) == DateRange(yesterday, yesterday)

    def test_this_week_runs_monday_to_today(self):
        assert resolve_date_shortcut("W", self.TODAY) == DateRange(date(2025, 3, 10), self.TODAY)

    def test_last_week_runs_monday_to_sunday(self):
        assert resolve_date_shortcut("L", self.TODAY) == DateRange(date(2025, 3, 3), date(2025, 3, 9))

    def test_long_names_and_case(self):
        """Long names and lower case are accepted."""
        assert resolve_date_shortcut("last_week", self.TODAY) == resolve_date_shortcut("L", self.TODAY)
        assert resolve_date_shortcut("t", self.TODAY) == resolve_date_shortcut("TODAY", self.TODAY)

    def test_monday_this_week_is_just_today(self):
        monday = date(2025, 3, 10)
        assert resolve_date_shortcut("W", monday) == DateRange(monday, monday)

    def test_unknown_shortcut_raises(self):
        with pytest.raises(ValueError, match="Unknown date shortcut"):
            resolve_date_shortcut("Q", self.TODAY)


class TestFormatDay:
    """Tests for dashboard day formatting."""

    def test_format(self):
        assert format_day("2025-12-12T10:00:00") == "12-Dec-25"
        assert format_day("2025-03-01") == "01-Mar-25"

    def test_missing(self):
        assert format_day(None) == "N/A"


class TestTemporalBoundaryProperty:
    """Property tests for the end-of-day boundary."""

    @given(offset_ms=st.integers(min_value=-86_400_000, max_value=86_400_000))
    def test_end_bound_cuts_at_last_millisecond(self, offset_ms):
        """
        **Property: end bound is inclusive through 23:59:59.999**

        A timestamp is inside [.., 2025-03-10] exactly when it is at or
        before the last millisecond of that day.
        """
        last = datetime(2025, 3, 10, 23, 59, 59, 999000)
        moment = last + timedelta(milliseconds=offset_ms)

        assert in_range(moment, end="2025-03-10") is (offset_ms <= 0)

    @given(offset_ms=st.integers(min_value=-86_400_000, max_value=86_400_000))
    def test_start_bound_begins_at_midnight(self, offset_ms):
        """
        **Property: start bound is inclusive from 00:00:00.000**
        """
        midnight = datetime(2025, 3, 10)
        moment = midnight + timedelta(milliseconds=offset_ms)

        assert in_range(moment, start="2025-03-10") is (offset_ms >= 0)
