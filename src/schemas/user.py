"""User settings schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserSettingsUpdate(BaseModel):
    """Update user settings."""

    timezone: str | None = Field(None, max_length=64)
    email_reminders_enabled: bool | None = None
    onboarded: bool | None = None


class TimezoneConfirm(BaseModel):
    """Confirm the detected timezone during onboarding."""

    timezone: str = Field(..., max_length=64)


class UserSettingsResponse(BaseModel):
    """User settings response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    timezone: str
    email_reminders_enabled: bool
    onboarded: bool
    unsubscribed: bool = False
