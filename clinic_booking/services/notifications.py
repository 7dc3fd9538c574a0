# clinic_booking/services/notifications.py
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import settings
from ..errors import NotificationError, PersistenceError
from .mailer import send_email

logger = logging.getLogger(__name__)

NOT_SET = "(not set)"

KIND_LABELS = {
    "outpatient": "Outpatient",
    "visit": "Home visit",
    "rehab": "Rehab meeting",
    "special": "Special appointment",
}

# Fields reported per kind, in display order
KIND_FIELDS = {
    "outpatient": [("patientId", "Patient ID"), ("patientName", "Patient name"), ("date", "Date"),
                   ("time", "Time"), ("consultation", "Consultation")],
    "visit": [("facilityName", "Facility"), ("date", "Date"), ("startTimeRange", "Start time"),
              ("endTimeRange", "End time"), ("consultation", "Consultation")],
    "rehab": [("date", "Date"), ("startTimeRange", "Start time"), ("endTimeRange", "End time")],
    "special": [("patientId", "Patient ID"), ("patientName", "Patient name"), ("date", "Date"),
                ("time", "Time"), ("reason", "Reason")],
}


@dataclass(frozen=True)
class Message:
    subject: str
    text: str
    html: str


class Notifier:
    """Emails every active user that has an address. Best-effort: failures are logged."""

    def __init__(self, store, send: Callable[..., dict] = send_email):
        self.store = store
        self._send = send

    def recipients(self) -> list[str]:
        return [u.email for u in self.store.read().users.active() if u.email]

    def notify(self, subject: str, text: str, html_body: str) -> None:
        try:
            to = self.recipients()
        except PersistenceError:
            logger.exception("Notification skipped, could not load recipients: %s", subject)
            return
        if not to:
            logger.info("Notification skipped, no recipients: %s", subject)
            return
        try:
            self._send(to, subject, text, html_body)
        except NotificationError as e:
            logger.warning("Notification failed (%s): %s", subject, e)

    def send(self, message: Optional[Message]) -> None:
        if message is not None:
            self.notify(message.subject, message.text, message.html)


def _display(value) -> str:
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value)
    return str(value) if value not in (None, "") else NOT_SET


def _when(record: dict) -> str:
    if record.get("startTimeRange") or record.get("endTimeRange"):
        return f"{record.get('date')} {record.get('startTimeRange')} - {record.get('endTimeRange')}"
    return f"{record.get('date')} {record.get('time') or ''}".strip()


def _summary(record: dict, actor: str) -> list[tuple[str, str]]:
    kind = record.get("reservationType")
    items = []
    if kind in ("outpatient", "special"):
        items.append(("Patient name", _display(record.get("patientName"))))
    if kind == "visit":
        items.append(("Facility", _display(record.get("facilityName"))))
    items.append(("Date and time", _when(record)))
    if kind in ("outpatient", "visit"):
        items.append(("Consultation", _display(record.get("consultation"))))
    if kind == "special":
        items.append(("Reason", _display(record.get("reason"))))
    items.append(("Staff", actor))
    return items


def _render(subject: str, intro: str, items: list[tuple[str, str]],
            changes: Optional[list[str]] = None) -> Message:
    text_lines = [intro] + [f"{label}: {value}" for label, value in items]
    html_items = "".join(f"<li>{html.escape(label)}: {html.escape(value)}</li>" for label, value in items)
    body = f"<p>{html.escape(intro)}</p><ul>{html_items}</ul>"
    if changes is not None:
        text_lines += ["", "Changes:"] + changes
        body += "<p>Changes:</p><ul>" + "".join(f"<li>{html.escape(c)}</li>" for c in changes) + "</ul>"
    url = html.escape(settings.SYSTEM_URL)
    body += f'<p>System URL: <a href="{url}">{url}</a></p>'
    return Message(subject=subject, text="\n".join(text_lines), html=body)


def appointment_created(record: dict, actor: str) -> Message:
    label = KIND_LABELS.get(record.get("reservationType"), "Appointment")
    return _render(
        f"New appointment ({label})",
        f"A new {label.lower()} appointment has been registered.",
        _summary(record, actor),
    )


def appointment_changes(old: dict, new: dict) -> list[str]:
    """Human readable 'field: before -> after' lines for every changed field."""
    changes = []
    if old.get("reservationType") != new.get("reservationType"):
        changes.append(f"Reservation type: {old.get('reservationType')} -> {new.get('reservationType')}")
    for key, label in KIND_FIELDS.get(new.get("reservationType"), []):
        before, after = _display(old.get(key)), _display(new.get(key))
        if before != after:
            changes.append(f"{label}: {before} -> {after}")
    return changes


def appointment_updated(old: dict, new: dict, actor: str) -> Message:
    label = KIND_LABELS.get(new.get("reservationType"), "Appointment")
    return _render(
        f"Appointment updated ({label})",
        f"A {label.lower()} appointment has been updated.",
        _summary(new, actor),
        changes=appointment_changes(old, new),
    )


def appointment_cancelled(record: dict, actor: str) -> Message:
    kind = record.get("reservationType")
    if kind not in KIND_LABELS:
        return _render("Appointment cancelled", "An appointment has been cancelled.", [("Staff", actor)])
    label = KIND_LABELS[kind]
    return _render(
        f"Appointment cancelled ({label})",
        f"A {label.lower()} appointment has been cancelled.",
        _summary(record, actor),
    )


def _slot_items(slot: dict, actor: str) -> list[tuple[str, str]]:
    period = slot.get("date") or ""
    if slot.get("endDate"):
        period += f" ~ {slot['endDate']}"
    hours = slot.get("startTime") or "All day"
    if slot.get("endTime"):
        hours += f" ~ {slot['endTime']}"
    return [("Period", period), ("Time", hours), ("Reason", _display(slot.get("reason"))), ("Staff", actor)]


_SLOT_VERBS = {"created": "added", "updated": "updated", "deleted": "removed"}


def blocked_slot_changed(action: str, slot: dict, actor: str) -> Message:
    verb = _SLOT_VERBS[action]
    return _render(
        f"Unavailable period {verb}",
        f"An unavailable period has been {verb}.",
        _slot_items(slot, actor),
    )
