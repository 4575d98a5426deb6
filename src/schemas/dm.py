"""DM schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import DMStatus, Platform
from src.services.scheduling import ensure_utc


class DMCreate(BaseModel):
    """Log a new DM."""

    name: str = Field(..., min_length=1, max_length=255)
    platform: Platform
    followup_date: date
    note: str | None = Field(None, max_length=2000)


class DMUpdate(DMCreate):
    """Edit every field of a DM."""


class DMStatusUpdate(BaseModel):
    """Move a DM to a new status, optionally pushing its follow-up out."""

    status: DMStatus
    extend_by_days: int | None = Field(None, ge=0, le=365)


class DMResponse(BaseModel):
    """DM response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    platform: Platform
    sent_date: datetime
    followup_date: date
    status: DMStatus
    note: str | None
    created_at: datetime

    @field_validator("sent_date", "created_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
