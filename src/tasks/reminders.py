"""Celery tasks for daily follow-up reminders."""

import logging

from src.celery_app import app as celery_app
from src.config import get_settings
from src.database import Database
from src.services.email_service import EmailService
from src.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


@celery_app.task
def send_daily_reminders() -> dict:
    """Send today's follow-up reminders to users at their local send hour.

    This task runs at the top of every hour via celery-beat.

    Returns:
        dict with processing statistics
    """
    settings = get_settings()
    database = Database(settings.database_url)

    try:
        with database.session() as db:
            result = ReminderService(db, EmailService(settings), settings).run()
        return {"users_checked": result.users_checked, "emails_sent": result.emails_sent}

    except Exception as e:
        logger.error(f"Error sending daily reminders: {e}", exc_info=True)
        return {"error": str(e)}

    finally:
        database.close()
