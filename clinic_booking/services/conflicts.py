# clinic_booking/services/conflicts.py
"""
Double-booking detection.

Pure functions over already-loaded records: nothing here touches the store,
so they can be exercised with plain model instances.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from ..errors import ValidationError
from ..models import ReservationType
from .intervals import BlockedPeriod, Instant, TimeRange, overlaps

logger = logging.getLogger(__name__)

_FOOTPRINTS = (Instant, TimeRange, BlockedPeriod)


def _is_special(entry) -> bool:
    return getattr(entry, "reservation_type", None) == ReservationType.special.value


def _footprint(entry):
    if isinstance(entry, _FOOTPRINTS):
        return entry
    return entry.footprint()


def _active_footprints(existing: Iterable, exclude_id: Optional[int]) -> Iterator[tuple]:
    for entry in existing:
        if entry.is_deleted or _is_special(entry):
            continue
        if exclude_id is not None and entry.id == exclude_id:
            continue
        try:
            fp = entry.footprint()
        except ValidationError as e:
            logger.warning("Skipping record id=%s with unreadable times: %s", entry.id, e.message)
            continue
        if fp is not None:
            yield entry, fp


def find_conflict(candidate, existing: Iterable, exclude_id: Optional[int] = None):
    """
    Returns the first active entry of `existing` overlapping `candidate`, or None.

    `candidate` is a record (appointment or blocked slot) or a bare footprint.
    Deleted entries, the entry with id `exclude_id`, and special appointments
    are ignored; a special candidate never conflicts.
    """
    if _is_special(candidate):
        return None
    target = _footprint(candidate)
    if target is None:
        return None
    for entry, fp in _active_footprints(existing, exclude_id):
        if overlaps(target, fp):
            return entry
    return None


def find_overlapping(candidate, existing: Iterable, exclude_id: Optional[int] = None) -> list:
    """Like find_conflict but returns every overlapping entry, in order."""
    if _is_special(candidate):
        return []
    target = _footprint(candidate)
    if target is None:
        return []
    return [entry for entry, fp in _active_footprints(existing, exclude_id) if overlaps(target, fp)]
