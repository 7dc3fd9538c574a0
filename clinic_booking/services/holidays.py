# clinic_booking/services/holidays.py
import logging

import requests
from dateutil import parser as dtparser

from ..config import settings
from ..errors import HolidaySourceError

logger = logging.getLogger(__name__)


def fetch_holidays(url: str | None = None, timeout: float | None = None) -> dict[str, str]:
    """
    Downloads the public holiday map {"YYYY-MM-DD": "name"}.
    Dates are normalized to YYYY-MM-DD; any network error, timeout or bad
    payload becomes HolidaySourceError.
    """
    url = url or settings.HOLIDAYS_API_URL
    timeout = timeout if timeout is not None else settings.HOLIDAYS_API_TIMEOUT
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.Timeout:
        logger.warning("Holiday source timed out after %ss: %s", timeout, url)
        raise HolidaySourceError("The holiday service did not respond in time.")
    except (requests.RequestException, ValueError) as e:
        logger.warning("Holiday source failed: %s", e)
        raise HolidaySourceError("Could not fetch the holiday list.")

    if not isinstance(data, dict):
        raise HolidaySourceError("Unexpected holiday list format.")

    out = {}
    for raw_date, name in data.items():
        try:
            day = dtparser.parse(raw_date).date()
        except (ValueError, OverflowError):
            logger.warning("Ignoring holiday with unreadable date: %r", raw_date)
            continue
        out[day.isoformat()] = str(name)
    logger.debug("Fetched %d holidays from %s", len(out), url)
    return out
