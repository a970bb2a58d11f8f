import threading
import time
import traceback
from datetime import datetime, timedelta

from ayurdiet.core.config import settings
from ayurdiet.services import notification_service, user_service
from ayurdiet.services.firestore_store import StoreError
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import utcnow

logger = get_logger(__name__)

_thread = None
_next_daily_run = None


def start_reminder_worker():
    global _thread, _next_daily_run
    if _thread is not None and _thread.is_alive():
        return
    _next_daily_run = next_daily_run(utcnow())
    _thread = threading.Thread(target=_run_job, daemon=True, name="reminder-worker")
    _thread.start()
    logger.info("Reminder worker started: checking due notifications every %ss, next daily scheduling at %s",
                settings.REMINDER_INTERVAL_SECONDS, _next_daily_run.isoformat())


def _run_job():
    while True:
        run_cycle()
        time.sleep(settings.REMINDER_INTERVAL_SECONDS)


def next_daily_run(now: datetime) -> datetime:
    """The next ``DAILY_REMINDER_HOUR`` (UTC) strictly after ``now``."""
    run = now.replace(hour=settings.DAILY_REMINDER_HOUR, minute=0, second=0, microsecond=0)
    if run <= now:
        run += timedelta(days=1)
    return run


def run_cycle(now=None):
    """One pass of the worker loop: the daily scheduling when it is due, then dispatch."""
    global _next_daily_run
    now = now or utcnow()
    try:
        if _next_daily_run is not None and now >= _next_daily_run:
            schedule_daily_reminders(now)
            _next_daily_run = next_daily_run(now)
        dispatch_due_reminders(now)
    except StoreError as e:
        logger.warning("Firestore error in reminder loop: %s. Retrying next cycle...", e)
    except Exception as e:
        logger.error("Error in reminder job: %s", e)
        traceback.print_exc()


def schedule_daily_reminders(now=None) -> int:
    """Schedule the rest of today's meal and water reminders for every patient account."""
    now = now or utcnow()
    scheduled = 0

    for user in user_service.get_by_role("patient"):
        try:
            notification_service.schedule_reminders(user["id"], now=now)
            scheduled += 1
        except StoreError as ex:
            logger.warning("Failed to schedule reminders for %s: %s", user["id"], ex)

    logger.info("Scheduled daily reminders for %d user(s)", scheduled)
    return scheduled


def dispatch_due_reminders(now=None) -> int:
    """
    Mark every due, unsent notification as sent.

    Delivery to devices is left to the clients, which watch their
    notifications feed; a notification counts as sent once ``sentAt`` is set.
    """
    now = now or utcnow()
    due = notification_service.get_due(now)
    sent = 0

    for notification in due:
        try:
            notification_service.mark_sent(notification["id"])
            sent += 1
        except Exception as ex:
            logger.warning("Failed to mark notification %s as sent: %s", notification["id"], ex)

    if sent:
        logger.info("Dispatched %d due reminder(s)", sent)
    return sent
