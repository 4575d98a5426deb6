"""DM model."""

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import DMStatus, Platform
from src.models.mixins import TimestampMixin


class DM(Base, TimestampMixin):
    """A cold DM sent on an external platform, with a scheduled follow-up."""

    __tablename__ = "dms"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    platform = Column(
        Enum(Platform, name="platform", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    sent_date = Column(DateTime(timezone=True), nullable=False)
    # Calendar date on the owner's calendar
    followup_date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(DMStatus, name="dmstatus", values_callable=lambda x: [e.value for e in x]),
        default=DMStatus.WAITING,
        nullable=False,
        index=True,
    )
    note = Column(Text, nullable=True)

    # Relationships
    owner = relationship("User", back_populates="dms")
