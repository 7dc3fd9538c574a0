"""Shared test fixtures."""
import pytest
from fastapi.testclient import TestClient

from clinic_booking.database import JsonStore
from clinic_booking.models import Role, User
from clinic_booking.services.appointments import AppointmentService
from clinic_booking.services.blocked_slots import BlockedSlotService
from helpers import RecordingNotifier, RecordingSink

HOLIDAYS = {
    "2025-01-01": "New Year's Day",
    "2025-01-13": "Coming of Age Day",
    "2025-02-11": "National Foundation Day",
}


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path / "db.json")


@pytest.fixture
def events():
    return RecordingSink()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def holidays():
    return dict(HOLIDAYS)


@pytest.fixture
def appointments(store, events, notifier):
    return AppointmentService(store, events, notifier)


@pytest.fixture
def blocked_slots(store, events, notifier, holidays):
    return BlockedSlotService(store, events, notifier, holiday_source=lambda: holidays)


@pytest.fixture
def seeded_users(store):
    """admin / staff / viewer accounts plus one deleted and one without email."""
    with store.transaction() as db:
        db.users.insert(User(user_id="admin", password="pw", name="Admin", department="Office",
                             email="admin@example.com", role=Role.admin))
        db.users.insert(User(user_id="staff", password="pw", name="Staff", department="Reception",
                             email="staff@example.com", role=Role.general))
        db.users.insert(User(user_id="viewer", password="pw", name="Viewer", department="Reception",
                             email="viewer@example.com", role=Role.viewer))
        db.users.insert(User(user_id="gone", password="pw", name="Gone", department="Reception",
                             email="gone@example.com", role=Role.general, is_deleted=True))
        db.users.insert(User(user_id="nomail", password="pw", name="No Mail", department="Reception",
                             role=Role.general))
    return store


@pytest.fixture
def client(seeded_users, events, notifier, holidays):
    from clinic_booking import dependencies
    from clinic_booking.main import app

    app.dependency_overrides[dependencies.get_store] = lambda: seeded_users
    app.dependency_overrides[dependencies.get_event_sink] = lambda: events
    app.dependency_overrides[dependencies.get_notifier] = lambda: notifier
    app.dependency_overrides[dependencies.get_holiday_source] = lambda: (lambda: holidays)
    yield TestClient(app)
    app.dependency_overrides.clear()
