"""FastAPI dependencies for authentication, services and result mapping."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token, get_or_create_user
from src.services.dm_service import DMService
from src.services.email_service import EmailService, get_email_service
from src.services.reminder_service import ReminderService
from src.services.results import ErrorCode, OperationResult
from src.services.user_service import UserService

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current user from the identity provider's JWT, creating it if new."""
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    email = payload.get("email")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return get_or_create_user(db, email, timezone_hint=payload.get("tz"))


def verify_cron_secret(authorization: Annotated[str | None, Header()] = None) -> None:
    """Reject scheduled-trigger calls that don't carry the shared secret."""
    expected = f"Bearer {get_settings().cron_secret}"
    if authorization != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_dm_service(
    db: Annotated[Session, Depends(get_db)],
) -> DMService:
    """Get DM service with dependencies."""
    return DMService(db)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user settings service with dependencies."""
    return UserService(db)


def get_reminder_service(
    db: Annotated[Session, Depends(get_db)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> ReminderService:
    """Get reminder service with dependencies."""
    return ReminderService(db, email_service)


def raise_for_result(result: OperationResult) -> None:
    """Turn a failed operation into the matching HTTP error."""
    if result.success:
        return

    if result.error_code == ErrorCode.VALIDATION:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": result.error, "field_errors": result.field_errors},
        )
    if result.error_code == ErrorCode.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)

    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
