"""User model."""

from sqlalchemy import Boolean, Column, Date, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Local user record, joined to the external identity by email."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Set from Settings.default_timezone when the user is created
    timezone = Column(String(64), nullable=False)
    email_reminders_enabled = Column(Boolean, nullable=False, default=True, index=True)
    onboarded = Column(Boolean, nullable=False, default=False)
    # Local calendar date (in the user's timezone) of the last reminder sent
    last_reminder_sent_on = Column(Date, nullable=True)

    # Relationships
    dms = relationship("DM", back_populates="owner", cascade="all, delete-orphan")
