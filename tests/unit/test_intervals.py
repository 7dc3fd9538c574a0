"""Tests for the time-interval model."""
from datetime import date, time

import pytest

from clinic_booking.errors import ValidationError
from clinic_booking.services.intervals import (
    BlockedPeriod,
    Instant,
    TimeRange,
    overlaps,
    parse_date,
    parse_time,
)

D = date(2025, 4, 1)
NEXT = date(2025, 4, 2)


def t(s):
    return parse_time(s)


class TestInstants:

    def test_same_date_and_time_overlap(self):
        assert overlaps(Instant(D, t("10:00")), Instant(D, t("10:00")))

    def test_different_time_does_not_overlap(self):
        assert not overlaps(Instant(D, t("10:00")), Instant(D, t("10:15")))

    def test_different_date_does_not_overlap(self):
        assert not overlaps(Instant(D, t("10:00")), Instant(NEXT, t("10:00")))


class TestInstantAgainstRange:
    """Ranges are half-open: [start, end)."""

    @pytest.mark.parametrize("at,expected", [
        ("10:00", True),   # start is inside
        ("10:15", True),
        ("10:30", False),  # end is outside
        ("09:59", False),
    ])
    def test_half_open_membership(self, at, expected):
        rng = TimeRange(D, t("10:00"), t("10:30"))
        assert overlaps(Instant(D, t(at)), rng) is expected
        assert overlaps(rng, Instant(D, t(at))) is expected

    def test_other_date_never_overlaps(self):
        assert not overlaps(Instant(NEXT, t("10:10")), TimeRange(D, t("10:00"), t("10:30")))


class TestRanges:

    def test_back_to_back_ranges_do_not_overlap(self):
        a = TimeRange(D, t("09:00"), t("09:30"))
        b = TimeRange(D, t("09:30"), t("10:00"))
        assert not overlaps(a, b)
        assert not overlaps(b, a)

    def test_partial_overlap(self):
        assert overlaps(TimeRange(D, t("09:00"), t("09:30")), TimeRange(D, t("09:15"), t("09:45")))

    def test_containment(self):
        assert overlaps(TimeRange(D, t("09:00"), t("12:00")), TimeRange(D, t("10:00"), t("10:15")))

    def test_other_date_never_overlaps(self):
        assert not overlaps(TimeRange(D, t("09:00"), t("10:00")), TimeRange(NEXT, t("09:00"), t("10:00")))

    @pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
    def test_start_must_precede_end(self, start, end):
        with pytest.raises(ValidationError):
            TimeRange(D, t(start), t(end))


class TestBlockedPeriods:

    def test_all_day_covers_every_time_in_date_range(self):
        period = BlockedPeriod(D, NEXT)
        assert overlaps(period, Instant(NEXT, t("23:59")))
        assert overlaps(TimeRange(D, t("08:00"), t("09:00")), period)

    def test_date_range_is_inclusive_but_bounded(self):
        period = BlockedPeriod(D, NEXT)
        assert not overlaps(period, Instant(date(2025, 4, 3), t("10:00")))
        assert not overlaps(period, Instant(date(2025, 3, 31), t("10:00")))

    def test_timed_period_is_half_open(self):
        period = BlockedPeriod(D, D, t("12:00"), t("13:00"))
        assert overlaps(period, Instant(D, t("12:00")))
        assert not overlaps(period, Instant(D, t("13:00")))
        assert not overlaps(period, TimeRange(D, t("13:00"), t("14:00")))
        assert overlaps(period, TimeRange(D, t("11:30"), t("12:01")))

    def test_missing_end_time_means_all_day(self):
        assert BlockedPeriod(D, D, t("12:00"), None).all_day

    def test_blocked_periods_never_conflict_with_each_other(self):
        assert not overlaps(BlockedPeriod(D, D), BlockedPeriod(D, D))


class TestParsing:

    def test_parse_date(self):
        assert parse_date("2025-04-01") == D

    def test_parse_time(self):
        assert parse_time("09:05") == time(9, 5)

    @pytest.mark.parametrize("value", ["2025/04/01", "", None, "2025-13-01"])
    def test_bad_date(self, value):
        with pytest.raises(ValidationError):
            parse_date(value)

    @pytest.mark.parametrize("value", ["9am", "25:00", None])
    def test_bad_time(self, value):
        with pytest.raises(ValidationError):
            parse_time(value)
