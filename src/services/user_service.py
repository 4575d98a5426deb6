"""User settings: timezone, onboarding and email reminders."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.user import User
from src.services.results import OperationResult
from src.services.scheduling import is_valid_timezone

logger = logging.getLogger(__name__)


class UserService:
    """Service for user settings."""

    def __init__(self, db: Session):
        self.db = db

    def update_settings(
        self,
        user: User,
        timezone: str | None = None,
        email_reminders_enabled: bool | None = None,
        onboarded: bool | None = None,
    ) -> OperationResult[User]:
        """Apply a partial settings update."""
        if timezone is not None and not is_valid_timezone(timezone):
            return OperationResult.invalid({"timezone": "Unknown timezone"})

        if timezone is not None:
            user.timezone = timezone
        if email_reminders_enabled is not None:
            user.email_reminders_enabled = email_reminders_enabled
        if onboarded is not None:
            user.onboarded = onboarded

        return self._commit(user, "Failed to update user settings")

    def confirm_timezone(self, user: User, timezone: str) -> OperationResult[User]:
        """Confirm the timezone during onboarding and finish onboarding."""
        return self.update_settings(user, timezone=timezone, onboarded=True)

    def disable_reminders(self, user: User) -> OperationResult[User]:
        """Turn off reminder emails. Disabling twice is not an error."""
        if not user.email_reminders_enabled:
            return OperationResult.ok(user)
        user.email_reminders_enabled = False
        result = self._commit(user, "Failed to disable email reminders")
        if result.success:
            logger.info(f"Email reminders disabled for user {user.id}")
        return result

    def _commit(self, user: User, message: str) -> OperationResult[User]:
        try:
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            logger.error(f"{message} for user {user.id}: {e}")
            self.db.rollback()
            return OperationResult.unavailable(message)
        return OperationResult.ok(user)
