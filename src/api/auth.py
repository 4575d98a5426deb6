"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user
from src.models.user import User
from src.schemas.user import UserSettingsResponse

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.get("/me", response_model=UserSettingsResponse)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Get the current user, creating the local record on first sign-in."""
    return current_user
