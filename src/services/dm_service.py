"""Follow-up state machine for tracked DMs."""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.models.dm import DM
from src.models.enums import DMStatus, Platform
from src.models.user import User
from src.services.results import OperationResult
from src.services.scheduling import Clock, extend_followup, today_for, utc_now

logger = logging.getLogger(__name__)

# Same message for missing and foreign DMs so ids of other users don't leak
DM_NOT_FOUND = "DM not found"


class DMService:
    """Create, transition, edit and delete a user's DMs.

    Every operation that takes a dm_id is scoped to the requesting user.
    """

    def __init__(self, db: Session, clock: Clock = utc_now):
        self.db = db
        self.clock = clock

    # --- Reads -----------------------------------------------------------

    def list_for_owner(self, owner: User) -> list[DM]:
        """All of the owner's DMs, soonest follow-up first."""
        try:
            return (
                self.db.query(DM)
                .filter(DM.user_id == owner.id)
                .order_by(DM.followup_date.asc(), DM.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching DMs for user {owner.id}: {e}")
            self.db.rollback()
            return []

    def get_for_owner(self, dm_id: int, owner: User) -> DM | None:
        """Get a DM if it exists and belongs to owner."""
        return self.db.query(DM).filter(DM.id == dm_id, DM.user_id == owner.id).first()

    def due_today(self, owner: User) -> list[DM]:
        """DMs of any status whose follow-up is the owner's local today."""
        today = today_for(self.clock(), owner.timezone)
        return self._select(owner, DM.followup_date == today)

    def overdue(self, owner: User) -> list[DM]:
        """Waiting DMs whose follow-up was before the owner's local today."""
        today = today_for(self.clock(), owner.timezone)
        return self._select(owner, DM.status == DMStatus.WAITING, DM.followup_date < today)

    def _select(self, owner: User, *criteria) -> list[DM]:
        try:
            return (
                self.db.query(DM)
                .filter(DM.user_id == owner.id, *criteria)
                .order_by(DM.followup_date.asc(), DM.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching dashboard DMs for user {owner.id}: {e}")
            self.db.rollback()
            return []

    # --- Mutations -------------------------------------------------------

    def create(
        self,
        owner: User,
        name: str,
        platform: Platform | str,
        followup_date: date,
        note: str | None = None,
    ) -> OperationResult[DM]:
        """Log a new DM. It always starts out Waiting."""
        errors, platform = _validate_fields(name, platform, followup_date)
        if errors:
            return OperationResult.invalid(errors)

        dm = DM(
            user_id=owner.id,
            name=name.strip(),
            platform=platform,
            sent_date=self.clock(),
            followup_date=followup_date,
            status=DMStatus.WAITING,
            note=note or None,
        )
        self.db.add(dm)
        result = self._commit(dm, "Failed to add DM")
        if result.success:
            logger.info(f"User {owner.id} added DM {dm.id}")
        return result

    def update_status(
        self,
        dm_id: int,
        requester: User,
        new_status: DMStatus | str,
        extend_by_days: int | None = None,
    ) -> OperationResult[DM]:
        """Move a DM to new_status, optionally pushing its follow-up out.

        Any status may follow any other. When extend_by_days is given the
        follow-up becomes that many calendar days after the requester's local
        today, whatever it was before.
        """
        try:
            status = DMStatus(new_status)
        except ValueError:
            return OperationResult.invalid({"status": "Invalid status"})

        dm = self.get_for_owner(dm_id, requester)
        if not dm:
            return OperationResult.not_found(DM_NOT_FOUND)

        dm.status = status
        if extend_by_days is not None:
            dm.followup_date = extend_followup(self.clock(), extend_by_days, requester.timezone)

        return self._commit(dm, "Failed to update DM status")

    def update(
        self,
        dm_id: int,
        requester: User,
        name: str,
        platform: Platform | str,
        followup_date: date,
        note: str | None = None,
    ) -> OperationResult[DM]:
        """Replace a DM's editable fields. Status and sent date are kept."""
        errors, platform = _validate_fields(name, platform, followup_date)
        if errors:
            return OperationResult.invalid(errors)

        dm = self.get_for_owner(dm_id, requester)
        if not dm:
            return OperationResult.not_found(DM_NOT_FOUND)

        dm.name = name.strip()
        dm.platform = platform
        dm.followup_date = followup_date
        dm.note = note or None

        return self._commit(dm, "Failed to update DM")

    def delete(self, dm_id: int, requester: User) -> OperationResult[None]:
        """Permanently delete a DM."""
        dm = self.get_for_owner(dm_id, requester)
        if not dm:
            return OperationResult.not_found(DM_NOT_FOUND)

        try:
            self.db.delete(dm)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting DM {dm_id}: {e}")
            self.db.rollback()
            return OperationResult.unavailable("Failed to delete DM")

        logger.info(f"User {requester.id} deleted DM {dm_id}")
        return OperationResult.ok()

    def _commit(self, dm: DM, message: str) -> OperationResult[DM]:
        try:
            self.db.commit()
            self.db.refresh(dm)
        except SQLAlchemyError as e:
            logger.error(f"{message}: {e}")
            self.db.rollback()
            return OperationResult.unavailable(message)
        return OperationResult.ok(dm)


def _validate_fields(
    name: str | None,
    platform: Platform | str | None,
    followup_date: date | None,
) -> tuple[dict[str, str], Platform | None]:
    """Check presence and the closed platform set."""
    errors = {}
    if not name or not name.strip():
        errors["name"] = "Name is required"

    parsed_platform = None
    try:
        parsed_platform = Platform(platform)
    except ValueError:
        errors["platform"] = "Invalid platform"

    if not isinstance(followup_date, date):
        errors["followup_date"] = "Invalid date"

    return errors, parsed_platform
