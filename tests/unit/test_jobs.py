from unittest.mock import patch

from clinic_booking.config import settings
from clinic_booking.errors import HolidaySourceError
from clinic_booking.jobs import scheduler
from clinic_booking.scripts.create_admin import create_admin


def test_scheduler_disabled_by_default(monkeypatch):
    monkeypatch.setattr(settings, "HOLIDAY_SYNC_ENABLED", False)
    assert scheduler.start_scheduler() is None


@patch("clinic_booking.jobs.scheduler.BlockedSlotService")
def test_holiday_sync_job_runs_as_system_actor(service_cls, monkeypatch):
    monkeypatch.setattr(settings, "HOLIDAY_SYNC_ACTOR", "system")
    service_cls.return_value.register_holidays.return_value = 2
    scheduler.holiday_sync_job()
    service_cls.return_value.register_holidays.assert_called_once_with("system")


@patch("clinic_booking.jobs.scheduler.BlockedSlotService")
def test_holiday_sync_job_logs_source_errors(service_cls, caplog):
    service_cls.return_value.register_holidays.side_effect = HolidaySourceError("down")
    scheduler.holiday_sync_job()
    assert "Scheduled holiday sync failed: down" in caplog.text


def test_create_admin_once(store):
    assert create_admin("root", "Root", "root@example.com", "pw", target=store) is True
    assert create_admin("root", "Root", "root@example.com", "pw", target=store) is False

    user = store.read().users.get("root")
    assert user.role.value == "admin"
    assert user.must_change_password is True
