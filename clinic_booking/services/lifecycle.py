# clinic_booking/services/lifecycle.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import pytz

from ..config import settings
from .notifications import Message, Notifier
from .realtime import EventSink, NullEventSink

logger = logging.getLogger(__name__)

# Keys the client may send but that the services own
SERVER_FIELDS = ("id", "isDeleted", "lastUpdatedBy", "createdAt", "lastUpdatedAt")


def now_iso() -> str:
    return datetime.now(pytz.timezone(settings.TIMEZONE)).isoformat(timespec="seconds")


def client_fields(data: dict) -> dict:
    return {k: v for k, v in data.items() if k not in SERVER_FIELDS and k != "sendNotification"}


class LifecycleService:
    def __init__(self, store, events: Optional[EventSink] = None, notifier: Optional[Notifier] = None):
        self.store = store
        self.events = events or NullEventSink()
        self.notifier = notifier

    def _publish(self, event: str, payload: Any) -> None:
        try:
            self.events.emit(event, payload)
        except Exception:
            logger.exception("Broadcast of %s failed", event)

    def _notify(self, message: Message) -> None:
        if self.notifier is None:
            logger.debug("No notifier configured, skipping: %s", message.subject)
            return
        self.notifier.send(message)
