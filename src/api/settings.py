"""User settings and unsubscribe endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_user_service, raise_for_result
from src.database import get_db
from src.models.user import User
from src.schemas.user import TimezoneConfirm, UserSettingsResponse, UserSettingsUpdate
from src.services.auth import decode_unsubscribe_token
from src.services.user_service import UserService

router = APIRouter(prefix="/api/v1", tags=["settings"])


@router.get("/settings", response_model=UserSettingsResponse)
async def get_user_settings(
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    email_reminders: Annotated[str | None, Query(alias="emailReminders")] = None,
) -> UserSettingsResponse:
    """Get settings for the current user.

    ``?emailReminders=false`` turns reminders off before anything else.
    """
    unsubscribed = False
    if email_reminders == "false":
        result = user_service.disable_reminders(current_user)
        raise_for_result(result)
        unsubscribed = True

    response = UserSettingsResponse.model_validate(current_user)
    response.unsubscribed = unsubscribed
    return response


@router.put("/settings", response_model=UserSettingsResponse)
async def update_user_settings(
    settings_update: UserSettingsUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Update settings for the current user."""
    result = user_service.update_settings(
        current_user, **settings_update.model_dump(exclude_unset=True)
    )
    raise_for_result(result)
    return result.value


@router.post("/settings/timezone", response_model=UserSettingsResponse)
async def confirm_timezone(
    timezone_data: TimezoneConfirm,
    current_user: Annotated[User, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Confirm the timezone during onboarding."""
    result = user_service.confirm_timezone(current_user, timezone_data.timezone)
    raise_for_result(result)
    return result.value


@router.get("/unsubscribe")
async def unsubscribe(
    token: str,
    db: Annotated[Session, Depends(get_db)],
) -> dict:
    """Turn off reminder emails from the link in a reminder. The token is the credential."""
    user_id = decode_unsubscribe_token(token)
    user = db.query(User).filter(User.id == user_id).first() if user_id is not None else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Invalid unsubscribe link"
        )

    raise_for_result(UserService(db).disable_reminders(user))
    return {"message": "Daily emails turned off. You can re-enable them in settings."}
