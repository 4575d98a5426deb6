"""Scheduled-trigger endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_reminder_service, verify_cron_secret
from src.schemas.reminder import ReminderRunResponse
from src.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/cron",
    tags=["cron"],
    dependencies=[Depends(verify_cron_secret)],
)


@router.get("/reminders", response_model=ReminderRunResponse)
def send_reminders(
    reminder_service: Annotated[ReminderService, Depends(get_reminder_service)],
) -> ReminderRunResponse:
    """Run the reminder batch. Called hourly by an external scheduler.

    Sync handler: the batch blocks on the database and the email provider.
    """
    try:
        result = reminder_service.run()
    except Exception as e:
        logger.error(f"Error in reminder cron job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e

    return ReminderRunResponse(
        success=True,
        emails_sent=result.emails_sent,
        message=f"Sent {result.emails_sent} reminder emails",
    )
