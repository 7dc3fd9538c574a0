# clinic_booking/services/intervals.py
"""
Temporal footprint of a reservation.

Outpatient/special appointments occupy an Instant, visit/rehab appointments a
half-open TimeRange [start, end), and blocked slots a BlockedPeriod spanning
one or more whole days, optionally restricted to a time-of-day window.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Union

from ..errors import ValidationError

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def parse_date(value: str, field: str = "date") -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format.")


def parse_time(value: str, field: str = "time") -> time:
    try:
        return datetime.strptime(value, TIME_FORMAT).time()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a time in HH:mm format.")


@dataclass(frozen=True)
class Instant:
    date: date
    time: time


@dataclass(frozen=True)
class TimeRange:
    date: date
    start: time
    end: time

    def __post_init__(self):
        if not self.start < self.end:
            raise ValidationError("Start time must be before end time.")

    def contains(self, t: time) -> bool:
        return self.start <= t < self.end


@dataclass(frozen=True)
class BlockedPeriod:
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def all_day(self) -> bool:
        return self.start_time is None or self.end_time is None

    def covers_date(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date


Footprint = Union[Instant, TimeRange, BlockedPeriod]


def _ranges_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    return a_start < b_end and a_end > b_start


def _period_overlaps(period: BlockedPeriod, other: Union[Instant, TimeRange]) -> bool:
    if not period.covers_date(other.date):
        return False
    if period.all_day:
        return True
    if isinstance(other, Instant):
        return period.start_time <= other.time < period.end_time
    return _ranges_overlap(other.start, other.end, period.start_time, period.end_time)


def overlaps(a: Footprint, b: Footprint) -> bool:
    """True when two footprints share any moment; ends are exclusive."""
    if isinstance(a, BlockedPeriod) or isinstance(b, BlockedPeriod):
        if isinstance(a, BlockedPeriod) and isinstance(b, BlockedPeriod):
            # Blocked slots may overlap each other freely
            return False
        period, other = (a, b) if isinstance(a, BlockedPeriod) else (b, a)
        return _period_overlaps(period, other)

    if a.date != b.date:
        return False

    if isinstance(a, Instant) and isinstance(b, Instant):
        return a.time == b.time
    if isinstance(a, Instant):
        return b.contains(a.time)
    if isinstance(b, Instant):
        return a.contains(b.time)
    return _ranges_overlap(a.start, a.end, b.start, b.end)
