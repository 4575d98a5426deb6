"""SQLAlchemy models."""

from src.models.dm import DM
from src.models.user import User

__all__ = [
    "User",
    "DM",
]
