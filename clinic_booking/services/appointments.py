# clinic_booking/services/appointments.py
"""
Appointment lifecycle: None -> Active -> Deleted.

Every mutation validates and conflict-checks inside one store transaction,
so nothing is written unless the whole operation succeeds. Broadcasts and
emails happen afterwards and never fail the request.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from pydantic import ValidationError as SchemaError

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import AppointmentBase, ReservationType, appointment_from_dict
from . import notifications
from .conflicts import find_conflict
from .intervals import parse_date, parse_time
from .lifecycle import LifecycleService, client_fields, now_iso

logger = logging.getLogger(__name__)

PATIENT_ID_RE = re.compile(r"[0-9]+")

SLOT_TAKEN = "This time slot is already booked. Please change the date or time and try again."
SLOT_BLOCKED = "This time falls within an unavailable period. Please change the date or time and try again."

RANGE_KINDS = (ReservationType.visit.value, ReservationType.rehab.value)
KINDS = {k.value for k in ReservationType}


def _check_patient_id(data: dict) -> None:
    patient_id = data.get("patientId")
    if patient_id and not PATIENT_ID_RE.fullmatch(str(patient_id)):
        raise ValidationError("Patient ID must contain digits only.")


def validate_special(data: dict) -> None:
    if not data.get("patientName") or not data.get("date"):
        raise ValidationError("Special appointments require a patient name and a date.")
    parse_date(data["date"])
    if data.get("time"):
        parse_time(data["time"])
    _check_patient_id(data)


def validate_appointment(data: dict) -> None:
    """Required-field and format checks for one appointment payload."""
    kind = data.get("reservationType")
    if not kind or not data.get("date"):
        raise ValidationError("Reservation type and date are required.")
    if kind not in KINDS:
        raise ValidationError(f"Unknown reservation type: {kind}")

    if kind == ReservationType.special.value:
        validate_special(data)
        return

    parse_date(data["date"])

    if kind == ReservationType.outpatient.value:
        if not data.get("patientName") or not data.get("time"):
            raise ValidationError("Outpatient appointments require a patient name and a time.")
        parse_time(data["time"])
        _check_patient_id(data)
    else:
        if not data.get("startTimeRange") or not data.get("endTimeRange"):
            raise ValidationError("Visit and rehab appointments require a start and an end time.")
        start = parse_time(data["startTimeRange"], "startTimeRange")
        end = parse_time(data["endTimeRange"], "endTimeRange")
        if not start < end:
            raise ValidationError("Start time must be before end time.")


def _build(data: dict) -> AppointmentBase:
    """Rebuild as the variant for data["reservationType"]; other kinds' fields are dropped."""
    try:
        return appointment_from_dict(data)
    except SchemaError as e:
        raise ValidationError(f"Invalid appointment data: {e.errors()[0].get('msg')}")


class AppointmentService(LifecycleService):

    def list(self, date: Optional[str] = None) -> list[dict]:
        appointments = self.store.read().appointments.active()
        if date:
            appointments = [a for a in appointments if a.date == date]
        return [a.to_dict() for a in appointments]

    def _check_conflicts(self, db, candidate: AppointmentBase, exclude_id: Optional[int] = None) -> None:
        clash = find_conflict(candidate, db.appointments, exclude_id=exclude_id)
        if clash is not None:
            logger.info("Appointment rejected: overlaps appointment id=%s", clash.id)
            raise ConflictError(SLOT_TAKEN)
        blocked = find_conflict(candidate, db.blocked_slots)
        if blocked is not None:
            logger.info("Appointment rejected: inside blocked slot id=%s", blocked.id)
            raise ConflictError(SLOT_BLOCKED)

    # ---------------- create ----------------

    def create(self, data: dict, actor: str, notify: bool = False) -> dict:
        if data.get("reservationType") == ReservationType.special.value:
            return self.create_special(data, actor, notify)

        payload = client_fields(data)
        validate_appointment(payload)
        return self._insert(payload, actor, notify, check_conflicts=True)

    def create_special(self, data: dict, actor: str, notify: bool = False) -> dict:
        payload = {**client_fields(data), "reservationType": ReservationType.special.value}
        validate_special(payload)
        # special appointments are never conflict-checked
        return self._insert(payload, actor, notify, check_conflicts=False)

    def _insert(self, payload: dict, actor: str, notify: bool, check_conflicts: bool) -> dict:
        with self.store.transaction() as db:
            stamp = now_iso()
            candidate = _build({
                **payload,
                "id": db.appointments.next_id(),
                "isDeleted": False,
                "lastUpdatedBy": actor,
                "createdAt": stamp,
                "lastUpdatedAt": stamp,
            })
            if check_conflicts:
                self._check_conflicts(db, candidate)
            db.appointments.insert(candidate)

        record = candidate.to_dict()
        logger.info("Appointment created: id=%s type=%s by=%s", candidate.id, candidate.reservation_type, actor)
        self._publish("appointmentCreated", record)
        if notify:
            self._notify(notifications.appointment_created(record, actor))
        return record

    # ---------------- update ----------------

    def update(self, appointment_id: int, data: dict, actor: str, notify: bool = False) -> dict:
        return self._update(appointment_id, data, actor, notify)

    def update_special(self, appointment_id: int, data: dict, actor: str, notify: bool = False) -> dict:
        return self._update(appointment_id, data, actor, notify, force_kind=ReservationType.special.value)

    def _update(self, appointment_id: int, data: dict, actor: str, notify: bool,
                force_kind: Optional[str] = None) -> dict:
        with self.store.transaction() as db:
            current = db.appointments.get(appointment_id)
            if current is None or current.is_deleted:
                raise NotFoundError("Appointment not found.")
            before = current.to_dict()

            merged = {**before, **client_fields(data)}
            if force_kind:
                merged["reservationType"] = force_kind
            validate_appointment(merged)

            merged["lastUpdatedBy"] = actor
            merged["lastUpdatedAt"] = now_iso()
            updated = _build(merged)
            if updated.reservation_type != ReservationType.special.value:
                self._check_conflicts(db, updated, exclude_id=appointment_id)
            db.appointments.replace(updated)

        record = updated.to_dict()
        logger.info("Appointment updated: id=%s type=%s by=%s", appointment_id, updated.reservation_type, actor)
        self._publish("appointmentUpdated", record)
        if notify:
            self._notify(notifications.appointment_updated(before, record, actor))
        return record

    # ---------------- delete ----------------

    def delete(self, appointment_id: int, actor: str, notify: bool = False) -> None:
        with self.store.transaction() as db:
            current = db.appointments.get(appointment_id)
            if current is None or current.is_deleted:
                raise NotFoundError("Appointment not found.")
            before = current.to_dict()
            current.is_deleted = True
            current.last_updated_by = actor
            current.last_updated_at = now_iso()

        logger.info("Appointment deleted: id=%s by=%s", appointment_id, actor)
        self._publish("appointmentDeleted", {"id": appointment_id})
        if notify:
            self._notify(notifications.appointment_cancelled(before, actor))
