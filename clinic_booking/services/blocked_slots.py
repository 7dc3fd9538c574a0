# clinic_booking/services/blocked_slots.py
from __future__ import annotations

import logging
from typing import Callable

from pydantic import ValidationError as SchemaError

from ..errors import NotFoundError, ValidationError
from ..models import BlockedSlot
from . import notifications
from .conflicts import find_overlapping
from .holidays import fetch_holidays
from .intervals import parse_date, parse_time
from .lifecycle import LifecycleService, client_fields, now_iso

logger = logging.getLogger(__name__)


def validate_blocked_slot(data: dict) -> None:
    if not data.get("date") or not data.get("reason"):
        raise ValidationError("Date and reason are required.")
    parse_date(data["date"])
    if data.get("endDate"):
        parse_date(data["endDate"], "endDate")
    if data.get("startTime"):
        parse_time(data["startTime"], "startTime")
    if data.get("endTime"):
        parse_time(data["endTime"], "endTime")


def _build(data: dict) -> BlockedSlot:
    try:
        return BlockedSlot.model_validate(data)
    except SchemaError as e:
        raise ValidationError(f"Invalid blocked slot data: {e.errors()[0].get('msg')}")


class BlockedSlotService(LifecycleService):
    """
    CRUD for unavailable periods plus the bulk holiday import.

    Overlapping appointments are reported (logged, or returned by
    overlapping_appointments) but never block a save.
    """

    def __init__(self, store, events=None, notifier=None,
                 holiday_source: Callable[[], dict[str, str]] = fetch_holidays):
        super().__init__(store, events, notifier)
        self.holiday_source = holiday_source

    def list(self) -> list[dict]:
        return [s.to_dict() for s in self.store.read().blocked_slots.active()]

    def _warn_overlaps(self, db, slot: BlockedSlot) -> None:
        clashes = find_overlapping(slot, db.appointments)
        if clashes:
            logger.warning("Blocked slot id=%s overlaps appointments %s", slot.id, [a.id for a in clashes])

    def overlapping_appointments(self, data: dict) -> list[dict]:
        payload = client_fields(data)
        validate_blocked_slot(payload)
        slot = _build({**payload, "id": 0})
        appointments = self.store.read().appointments
        return [a.to_dict() for a in find_overlapping(slot, appointments)]

    def create(self, data: dict, actor: str, notify: bool = False) -> dict:
        payload = client_fields(data)
        validate_blocked_slot(payload)
        with self.store.transaction() as db:
            stamp = now_iso()
            slot = _build({
                **payload,
                "id": db.blocked_slots.next_id(),
                "isDeleted": False,
                "lastUpdatedBy": actor,
                "createdAt": stamp,
                "lastUpdatedAt": stamp,
            })
            self._warn_overlaps(db, slot)
            db.blocked_slots.insert(slot)

        record = slot.to_dict()
        logger.info("Blocked slot created: id=%s date=%s by=%s", slot.id, slot.date, actor)
        self._publish("blockedSlotCreated", record)
        if notify:
            self._notify(notifications.blocked_slot_changed("created", record, actor))
        return record

    def update(self, slot_id: int, data: dict, actor: str, notify: bool = False) -> dict:
        with self.store.transaction() as db:
            current = db.blocked_slots.get(slot_id)
            if current is None or current.is_deleted:
                raise NotFoundError("Blocked slot not found.")
            merged = {**current.to_dict(), **client_fields(data)}
            validate_blocked_slot(merged)
            merged["lastUpdatedBy"] = actor
            merged["lastUpdatedAt"] = now_iso()
            slot = _build(merged)
            self._warn_overlaps(db, slot)
            db.blocked_slots.replace(slot)

        record = slot.to_dict()
        logger.info("Blocked slot updated: id=%s by=%s", slot_id, actor)
        self._publish("blockedSlotUpdated", record)
        if notify:
            self._notify(notifications.blocked_slot_changed("updated", record, actor))
        return record

    def delete(self, slot_id: int, actor: str, notify: bool = True) -> None:
        with self.store.transaction() as db:
            current = db.blocked_slots.get(slot_id)
            if current is None or current.is_deleted:
                raise NotFoundError("Blocked slot not found.")
            current.is_deleted = True
            current.last_updated_by = actor
            current.last_updated_at = now_iso()
            record = current.to_dict()

        logger.info("Blocked slot deleted: id=%s by=%s", slot_id, actor)
        self._publish("blockedSlotDeleted", {"id": slot_id})
        if notify:
            self._notify(notifications.blocked_slot_changed("deleted", record, actor))

    def register_holidays(self, actor: str) -> int:
        """
        Adds an all-day slot for each holiday not already recorded with the
        same date and reason (deleted slots included). Returns the number added.
        """
        holidays = self.holiday_source()
        added = []
        with self.store.transaction() as db:
            known = {(s.date, s.reason) for s in db.blocked_slots}
            stamp = now_iso()
            for day, name in holidays.items():
                if (day, name) in known:
                    continue
                slot = BlockedSlot(
                    id=db.blocked_slots.next_id(),
                    date=day,
                    reason=name,
                    last_updated_by=actor,
                    created_at=stamp,
                    last_updated_at=stamp,
                )
                db.blocked_slots.insert(slot)
                known.add((day, name))
                added.append(slot)

        logger.info("Holiday import by %s: %d added, %d already present", actor, len(added), len(holidays) - len(added))
        for slot in added:
            self._publish("blockedSlotCreated", slot.to_dict())
        return len(added)
