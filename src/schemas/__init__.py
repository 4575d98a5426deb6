"""Pydantic schemas for API requests and responses."""

from src.schemas.dm import DMCreate, DMResponse, DMStatusUpdate, DMUpdate
from src.schemas.reminder import ReminderRunResponse
from src.schemas.user import TimezoneConfirm, UserSettingsResponse, UserSettingsUpdate

__all__ = [
    "DMCreate",
    "DMUpdate",
    "DMStatusUpdate",
    "DMResponse",
    "UserSettingsUpdate",
    "TimezoneConfirm",
    "UserSettingsResponse",
    "ReminderRunResponse",
]
