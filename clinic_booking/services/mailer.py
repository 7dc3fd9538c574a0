# clinic_booking/services/mailer.py
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from ..config import settings
from ..errors import NotificationError

logger = logging.getLogger(__name__)


def _from_header() -> str:
    return f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_ADDRESS}>"


def send_email(to: list[str], subject: str, text: str, html: str) -> dict:
    """
    Sends one multipart (text + html) email to every address in `to`.
    - DRY_RUN=true: nothing is sent; the message is logged and {"dry_run": True, ...} returned
    - SMTP not configured: MOCK mode, logged and {"mock": True, ...} returned
    - SMTP failure: NotificationError
    """
    if settings.DRY_RUN:
        logger.info("[DRY_RUN EMAIL] to=%s subject=%s body=%s", to, subject, text.replace("\n", " | "))
        return {"dry_run": True, "to": to, "subject": subject}

    if not settings.SMTP_HOST or not settings.SMTP_FROM_ADDRESS:
        logger.info("[EMAIL MOCK] to=%s subject=%s", to, subject)
        return {"mock": True, "to": to, "subject": subject}

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = _from_header()
    msg["To"] = ", ".join(to)
    msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    try:
        if settings.SMTP_PORT == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, context=context, timeout=30)
        else:
            server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30)
            server.starttls(context=ssl.create_default_context())
        try:
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASS or "")
            server.sendmail(settings.SMTP_FROM_ADDRESS, to, msg.as_string())
        finally:
            server.quit()
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationError(f"SMTP send failed: {e}") from e

    logger.info("Email sent: subject=%s recipients=%d", subject, len(to))
    return {"sent": True, "to": to, "subject": subject}
