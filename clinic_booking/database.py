# clinic_booking/database.py
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from pydantic import ValidationError as SchemaError

from .config import settings
from .errors import PersistenceError
from .models import BlockedSlot, User, appointment_from_dict

logger = logging.getLogger(__name__)

# One lock per data file, shared by every JsonStore pointing at it
_LOCKS: dict[str, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(key, threading.RLock())


class Table:
    """In-memory collection with the list/get/insert/replace repository API."""

    def __init__(self, rows: list, key: str = "id"):
        self._rows = rows
        self._key = key

    def __iter__(self):
        return iter(self._rows)

    def __len__(self):
        return len(self._rows)

    def all(self) -> list:
        return list(self._rows)

    def active(self) -> list:
        return [r for r in self._rows if not r.is_deleted]

    def get(self, key: Any) -> Optional[Any]:
        return next((r for r in self._rows if getattr(r, self._key) == key), None)

    def next_id(self) -> int:
        return max((getattr(r, self._key) for r in self._rows), default=0) + 1

    def insert(self, row) -> None:
        self._rows.append(row)

    def replace(self, row) -> None:
        key = getattr(row, self._key)
        for i, existing in enumerate(self._rows):
            if getattr(existing, self._key) == key:
                self._rows[i] = row
                return
        raise KeyError(key)


@dataclass
class Snapshot:
    appointments: Table = field(default_factory=lambda: Table([]))
    blocked_slots: Table = field(default_factory=lambda: Table([]))
    users: Table = field(default_factory=lambda: Table([], key="user_id"))

    @classmethod
    def from_dict(cls, data: dict) -> "Snapshot":
        return cls(
            appointments=Table([appointment_from_dict(a) for a in data.get("appointments", [])]),
            blocked_slots=Table([BlockedSlot.model_validate(s) for s in data.get("blockedSlots", [])]),
            users=Table([User.model_validate(u) for u in data.get("users", [])], key="user_id"),
        )

    def to_dict(self) -> dict:
        return {
            "appointments": [a.to_dict() for a in self.appointments],
            "blockedSlots": [s.to_dict() for s in self.blocked_slots],
            "users": [u.to_dict() for u in self.users],
        }


class JsonStore:
    """
    Whole-file JSON persistence.

    Every read-modify-write goes through transaction(), which serializes
    writers on a process-wide lock and only writes back when the block
    finishes without raising.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def load(self) -> Snapshot:
        if not self.path.exists():
            return Snapshot()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return Snapshot.from_dict(raw)
        except (OSError, json.JSONDecodeError, SchemaError) as e:
            logger.exception("Could not read data file %s", self.path)
            raise PersistenceError(f"Could not read data file: {e}")

    def save(self, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            logger.exception("Could not write data file %s", self.path)
            raise PersistenceError(f"Could not write data file: {e}")

    def read(self) -> Snapshot:
        with self._lock:
            return self.load()

    @contextmanager
    def transaction(self) -> Iterator[Snapshot]:
        with self._lock:
            snapshot = self.load()
            yield snapshot
            self.save(snapshot)


store = JsonStore(settings.DATA_FILE)


def init_db(target: Optional[JsonStore] = None) -> None:
    """
    Creates an empty data file when none exists yet.
    """
    target = target or store
    with target._lock:
        if not target.path.exists():
            target.save(Snapshot())
            logger.info("Created empty data file at %s", target.path)
