import smtplib
from unittest.mock import patch

import pytest

from clinic_booking.config import settings
from clinic_booking.errors import NotificationError
from clinic_booking.services import mailer


@pytest.fixture
def smtp_settings(monkeypatch):
    monkeypatch.setattr(settings, "DRY_RUN", False)
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")
    monkeypatch.setattr(settings, "SMTP_PORT", 587)
    monkeypatch.setattr(settings, "SMTP_USER", "mailer")
    monkeypatch.setattr(settings, "SMTP_PASS", "secret")
    monkeypatch.setattr(settings, "SMTP_FROM_ADDRESS", "clinic@example.com")


def test_dry_run(monkeypatch):
    monkeypatch.setattr(settings, "DRY_RUN", True)
    with patch("clinic_booking.services.mailer.smtplib.SMTP") as smtp:
        result = mailer.send_email(["a@example.com"], "Subject", "text", "<p>html</p>")
    assert result["dry_run"] is True
    smtp.assert_not_called()


def test_mock_mode_without_smtp_host(monkeypatch):
    monkeypatch.setattr(settings, "DRY_RUN", False)
    monkeypatch.setattr(settings, "SMTP_HOST", None)
    result = mailer.send_email(["a@example.com"], "Subject", "text", "<p>html</p>")
    assert result["mock"] is True


def test_sends_with_starttls(smtp_settings):
    with patch("clinic_booking.services.mailer.smtplib.SMTP") as smtp:
        result = mailer.send_email(["a@example.com", "b@example.com"], "Subject", "text", "<p>html</p>")

    server = smtp.return_value
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer", "secret")
    args = server.sendmail.call_args[0]
    assert args[0] == "clinic@example.com"
    assert args[1] == ["a@example.com", "b@example.com"]
    server.quit.assert_called_once()
    assert result["sent"] is True


def test_smtp_failure_raises_notification_error(smtp_settings):
    with patch("clinic_booking.services.mailer.smtplib.SMTP") as smtp:
        smtp.return_value.sendmail.side_effect = smtplib.SMTPException("rejected")
        with pytest.raises(NotificationError):
            mailer.send_email(["a@example.com"], "Subject", "text", "<p>html</p>")
        smtp.return_value.quit.assert_called_once()
