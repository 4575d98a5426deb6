"""Daily follow-up reminder selection and delivery."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.models.dm import DM
from src.models.enums import DMStatus
from src.models.user import User
from src.services.auth import create_unsubscribe_token
from src.services.email_service import EmailService
from src.services.scheduling import Clock, ensure_utc, resolve_timezone, today_for, utc_now

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env: Environment | None = None


def _get_env() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )
    return _env


@dataclass
class ReminderEmail:
    """A rendered reminder ready to hand to the email service."""

    to: str
    subject: str
    html: str


@dataclass
class ReminderRunResult:
    """Aggregate outcome of one reminder run."""

    users_checked: int = 0
    emails_sent: int = 0


class ReminderService:
    """Decides who gets today's reminder and sends it.

    Meant to be invoked at least hourly. A user is emailed when their local
    hour equals the configured send hour, they have Waiting DMs due on their
    local today, and they were not already emailed for that local date.
    """

    def __init__(
        self,
        db: Session,
        email_service: EmailService,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ):
        self.db = db
        self.email_service = email_service
        self.settings = settings or get_settings()
        self.clock = clock

    def run(self) -> ReminderRunResult:
        """Process every user with reminders enabled.

        A failure for one user is logged and does not stop the others.
        """
        now = self.clock()
        result = ReminderRunResult()

        users = (
            self.db.query(User)
            .filter(User.email_reminders_enabled.is_(True))
            .order_by(User.id.asc())
            .all()
        )

        for user in users:
            result.users_checked += 1
            try:
                if self._process_user(user, now):
                    result.emails_sent += 1
            except Exception as e:
                logger.error(f"Error processing reminders for user {user.id}: {e}", exc_info=True)
                self.db.rollback()

        logger.info(
            f"Reminder run complete: {result.emails_sent} sent, "
            f"{result.users_checked} users checked"
        )
        return result

    def is_send_time(self, user: User, now: datetime) -> bool:
        """Check if now is the user's local send hour and they haven't been emailed today."""
        tz = resolve_timezone(user.timezone)
        local_now = ensure_utc(now).astimezone(tz)
        if local_now.hour != self.settings.reminder_send_hour:
            return False
        return user.last_reminder_sent_on != local_now.date()

    def due_dms(self, user: User, now: datetime) -> list[DM]:
        """Waiting DMs whose follow-up is the user's local today."""
        return (
            self.db.query(DM)
            .filter(
                DM.user_id == user.id,
                DM.status == DMStatus.WAITING,
                DM.followup_date == today_for(now, user.timezone),
            )
            .order_by(DM.followup_date.asc(), DM.id.asc())
            .all()
        )

    def build_email(self, user: User, dms: list[DM]) -> ReminderEmail:
        """Render the reminder for a user's due DMs."""
        count = len(dms)
        plural = "s" if count != 1 else ""
        base_url = self.settings.app_base_url.rstrip("/")
        token = create_unsubscribe_token(user.id)

        html = (
            _get_env()
            .get_template("dm_reminder.html")
            .render(
                user_name=user.email.split("@")[0],
                dms=dms,
                dashboard_url=f"{base_url}/dashboard",
                unsubscribe_url=f"{base_url}/api/v1/unsubscribe?{urlencode({'token': token})}",
            )
        )
        return ReminderEmail(
            to=user.email,
            subject=f"You have {count} DM{plural} due for follow-up today",
            html=html,
        )

    def _process_user(self, user: User, now: datetime) -> bool:
        """Send the user's reminder if it is due. Returns True if an email went out."""
        if not self.is_send_time(user, now):
            return False

        dms = self.due_dms(user, now)
        if not dms:
            return False

        email = self.build_email(user, dms)
        sent = self.email_service.send(
            from_address=self.settings.email_from,
            to=email.to,
            subject=email.subject,
            html=email.html,
        )
        if not sent:
            logger.warning(f"Reminder email to user {user.id} was not sent")
            return False

        user.last_reminder_sent_on = today_for(now, user.timezone)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to record reminder for user {user.id}: {e}")
            self.db.rollback()

        logger.info(f"Reminder sent to user {user.id} for {len(dms)} DM(s)")
        return True
