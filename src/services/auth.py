"""Identity tokens and the local user directory.

Authentication itself is delegated to an external identity provider. It
issues HS256 bearer tokens carrying the user's email (and optionally the
browser-detected timezone in ``tz``); this module only verifies them and maps
the email to a local User.
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.user import User
from src.services.scheduling import is_valid_timezone

logger = logging.getLogger(__name__)

UNSUBSCRIBE_PURPOSE = "unsubscribe"


def create_access_token(email: str, timezone: str | None = None) -> str:
    """Create a JWT access token."""
    settings = get_settings()
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": email,
        "email": email,
        "exp": expire,
    }
    if timezone:
        to_encode["tz"] = timezone
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def create_unsubscribe_token(user_id: int) -> str:
    """Create the capability token embedded in reminder emails.

    Possession of the token is enough to turn off reminders for user_id.
    """
    settings = get_settings()
    expire = datetime.now(UTC) + timedelta(days=settings.unsubscribe_token_expiration_days)
    to_encode = {
        "sub": str(user_id),
        "purpose": UNSUBSCRIBE_PURPOSE,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_unsubscribe_token(token: str) -> int | None:
    """Get the user id from an unsubscribe token, or None if invalid."""
    payload = decode_access_token(token)
    if payload is None or payload.get("purpose") != UNSUBSCRIBE_PURPOSE:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.lower()).first()


def get_or_create_user(db: Session, email: str, timezone_hint: str | None = None) -> User:
    """Get the local user for an external identity, creating it on first sight."""
    user = get_user_by_email(db, email)
    if user:
        return user

    settings = get_settings()
    timezone = timezone_hint if is_valid_timezone(timezone_hint) else settings.default_timezone
    user = User(
        email=email.lower(),
        timezone=timezone,
        email_reminders_enabled=True,
        onboarded=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} with timezone {timezone}")
    return user
