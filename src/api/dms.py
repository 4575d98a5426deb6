"""DM API endpoints."""

import csv
import io
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.dependencies import get_current_user, get_dm_service, raise_for_result
from src.models.dm import DM
from src.models.user import User
from src.schemas.dm import DMCreate, DMResponse, DMStatusUpdate, DMUpdate
from src.services.dm_service import DM_NOT_FOUND, DMService
from src.services.scheduling import local_date, resolve_timezone

router = APIRouter(prefix="/api/v1/dms", tags=["dms"])

EXPORT_HEADERS = ["Name", "Platform", "Sent Date", "Follow-up Date", "Status", "Note"]


@router.get("", response_model=list[DMResponse])
async def get_dms(
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
):
    """Get all DMs for the current user, soonest follow-up first."""
    return dm_service.list_for_owner(current_user)


@router.get("/today", response_model=list[DMResponse])
async def get_dms_due_today(
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
):
    """Get DMs due today in the user's timezone, whatever their status."""
    return dm_service.due_today(current_user)


@router.get("/overdue", response_model=list[DMResponse])
async def get_overdue_dms(
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
):
    """Get Waiting DMs whose follow-up date has passed."""
    return dm_service.overdue(current_user)


@router.get("/export")
async def export_dms(
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
) -> Response:
    """Download all DMs as CSV."""
    tz = resolve_timezone(current_user.timezone)

    def fmt(value) -> str:
        return local_date(value, tz).isoformat()

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for dm in dm_service.list_for_owner(current_user):
        writer.writerow(
            [
                dm.name,
                dm.platform.value,
                fmt(dm.sent_date),
                dm.followup_date.isoformat(),
                dm.status.value,
                dm.note or "",
            ]
        )

    filename = f"cold-dms-{local_date(dm_service.clock(), tz).isoformat()}.csv"
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=DMResponse, status_code=status.HTTP_201_CREATED)
async def create_dm(
    dm_data: DMCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
) -> DM:
    """Log a new DM. New DMs start out Waiting."""
    result = dm_service.create(
        current_user,
        name=dm_data.name,
        platform=dm_data.platform,
        followup_date=dm_data.followup_date,
        note=dm_data.note,
    )
    raise_for_result(result)
    return result.value


@router.get("/{dm_id}", response_model=DMResponse)
async def get_dm(
    dm_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
) -> DM:
    """Get a specific DM."""
    dm = dm_service.get_for_owner(dm_id, current_user)
    if not dm:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=DM_NOT_FOUND)
    return dm


@router.put("/{dm_id}", response_model=DMResponse)
async def update_dm(
    dm_id: int,
    dm_data: DMUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
) -> DM:
    """Edit a DM's name, platform, follow-up date and note."""
    result = dm_service.update(
        dm_id,
        current_user,
        name=dm_data.name,
        platform=dm_data.platform,
        followup_date=dm_data.followup_date,
        note=dm_data.note,
    )
    raise_for_result(result)
    return result.value


@router.patch("/{dm_id}/status", response_model=DMResponse)
async def update_dm_status(
    dm_id: int,
    status_data: DMStatusUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
) -> DM:
    """Change a DM's status, e.g. Waiting with extend_by_days=3 to remind in 3 days."""
    result = dm_service.update_status(
        dm_id,
        current_user,
        new_status=status_data.status,
        extend_by_days=status_data.extend_by_days,
    )
    raise_for_result(result)
    return result.value


@router.delete("/{dm_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dm(
    dm_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    dm_service: Annotated[DMService, Depends(get_dm_service)],
) -> None:
    """Permanently delete a DM."""
    result = dm_service.delete(dm_id, current_user)
    raise_for_result(result)
