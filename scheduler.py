import logging
from datetime import date

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from utils.fee_status import FeeStatusEngine
from utils.ledger import FeeLedger
from utils.roster import Roster
from utils.timezone_helpers import local_today
from utils.whatsapp import format_amount

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_DAYS = (1, 3, 5, 7, 9)


def should_send_reminder(today, days=DEFAULT_REMINDER_DAYS, window_end=10):
    """Return ``(month, year, day)`` on a reminder day inside the window, else None."""
    day = today.day
    if day < 1 or day > window_end:
        return None
    if day not in days:
        return None
    return today.month, today.year, day


def log_pending_fee_reminders(app, today: date = None):
    """Log overdue reminders for manual sending. Nothing is sent automatically.

    Returns the logged lines (empty when today is not a reminder day).
    Errors are logged and swallowed so the scheduler keeps running.
    """
    lines = []
    try:
        with app.app_context():
            today = today or local_today()
            info = should_send_reminder(
                today,
                app.config.get('REMINDER_DAYS', DEFAULT_REMINDER_DAYS),
                app.config.get('REMINDER_WINDOW_END', 10),
            )
            if not info:
                return lines
            month, year, day = info
            lines.append(f"=== Fee Reminder Day: {day}/{month}/{year} ===")

            engine = FeeStatusEngine(Roster(), FeeLedger(), today=local_today)
            result = engine.pending_reminders(month, year, today=today)
            if not result.success:
                lines.append(f"Could not compute reminders: {result.error.message}")
            else:
                reminders = result.data['reminders']
                if reminders:
                    lines.append(f"Found {len(reminders)} overdue students:")
                    for index, reminder in enumerate(reminders, start=1):
                        lines.append(f"{index}. {reminder['studentName']} ({reminder['phone']})")
                        lines.append(f"   Amount: PKR{format_amount(reminder['amount'])}")
                        lines.append(f"   Due Date: {reminder['feeDueDate']}th of each month")
                        lines.append(f"   WhatsApp Link: {reminder['link']}")
                    lines.append("Please send reminders manually using the links above.")
                else:
                    lines.append("No overdue fees found for this month.")
                for skipped in result.data['skipped']:
                    lines.append(f"Skipped {skipped['studentName']}: {skipped['error']}")
            for line in lines:
                logger.info(line)
    except Exception:
        logger.exception("Error in fee reminder job")
    return lines


def start_scheduler(app):
    tz = app.config.get('SCHEDULER_TIMEZONE', 'Asia/Kolkata')
    scheduler = BackgroundScheduler(timezone=tz)
    scheduler.add_job(
        log_pending_fee_reminders,
        CronTrigger(hour=app.config.get('REMINDER_HOUR', 10), minute=0, timezone=tz),
        args=[app],
        id='daily_fee_reminders',
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Fee reminder job scheduled daily at %02d:00", app.config.get('REMINDER_HOUR', 10))
    return scheduler
