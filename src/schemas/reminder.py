"""Reminder run schemas."""

from pydantic import BaseModel


class ReminderRunResponse(BaseModel):
    """Result of a scheduled reminder run."""

    success: bool
    emails_sent: int
    message: str
