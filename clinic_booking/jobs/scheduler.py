import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import settings
from ..database import store
from ..errors import BookingError
from ..services.blocked_slots import BlockedSlotService
from ..services.realtime import broadcaster

logger = logging.getLogger(__name__)


def holiday_sync_job():
    svc = BlockedSlotService(store, broadcaster)
    try:
        added = svc.register_holidays(settings.HOLIDAY_SYNC_ACTOR)
    except BookingError as e:
        logger.warning("Scheduled holiday sync failed: %s", e.message)
        return
    logger.info("Scheduled holiday sync: %d added", added)


def start_scheduler() -> Optional[BackgroundScheduler]:
    if not settings.HOLIDAY_SYNC_ENABLED:
        logger.info("Holiday sync disabled (HOLIDAY_SYNC_ENABLED=false)")
        return None
    scheduler = BackgroundScheduler(timezone=settings.TIMEZONE)
    scheduler.add_job(holiday_sync_job, CronTrigger(day=1, hour=3, minute=0))  # monthly
    scheduler.start()
    return scheduler
