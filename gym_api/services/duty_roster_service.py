"""
Duty Roster Service

Shift allocations for staff. A shift is editable while Scheduled; once a
manager approves it, edits and deletion are refused.

    Scheduled --approve--> Approved --complete--> Completed
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.exceptions import InvalidStateError, RecordLockedError, ValidationError
from gym_api.core.timeutil import format_minutes, to_minutes
from gym_api.models.duty_roster import DutyShift, ShiftStatus, ShiftType
from gym_api.models.staff import Staff
from gym_api.models.user import User
from gym_api.services.audit import AuditService
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository
from gym_api.services.workflow import StateMachine

LOCKED_STATUSES = [ShiftStatus.APPROVED.value, ShiftStatus.COMPLETED.value]
SHIFT_TYPES = [t.value for t in ShiftType]

SHIFT_TRANSITIONS = StateMachine("Shift", {
    "approve": ([ShiftStatus.SCHEDULED.value], ShiftStatus.APPROVED.value),
    "complete": ([ShiftStatus.APPROVED.value], ShiftStatus.COMPLETED.value),
})


def normalize_shift(
    shift_type: Optional[str],
    start_time: Optional[str],
    end_time: Optional[str],
    breaks: Optional[List[Any]],
) -> Dict[str, Any]:
    """
    Validate shift bounds and breaks and return canonical values.

    Breaks are dropped for a Straight Shift. For a Break Shift, each break
    needs a start before its end, inside the shift, not overlapping another.
    """
    shift_type = shift_type or ShiftType.STRAIGHT.value
    if shift_type not in SHIFT_TYPES:
        raise ValidationError(f"Unknown shift type '{shift_type}'", details={"allowed": SHIFT_TYPES})

    if not start_time or not end_time:
        raise ValidationError("Shift start and end times are required")
    start, end = to_minutes(start_time), to_minutes(end_time)
    if end <= start:
        raise ValidationError("Shift end time must be after start time")

    clean_breaks = []
    if shift_type == ShiftType.BREAK.value:
        windows = []
        for item in breaks or []:
            b_start = item.get("start") if isinstance(item, dict) else getattr(item, "start", None)
            b_end = item.get("end") if isinstance(item, dict) else getattr(item, "end", None)
            if not b_start and not b_end:
                continue  # blank row left in the form
            if not b_start or not b_end:
                raise ValidationError("Each break needs both a start and an end time")
            bs, be = to_minutes(b_start), to_minutes(b_end)
            if be <= bs:
                raise ValidationError(f"Break {format_minutes(bs)}-{format_minutes(be)} ends before it starts")
            if bs < start or be > end:
                raise ValidationError(f"Break {format_minutes(bs)}-{format_minutes(be)} is outside the shift")
            windows.append((bs, be))

        windows.sort()
        for (_, prev_end), (next_start, _) in zip(windows, windows[1:]):
            if next_start < prev_end:
                raise ValidationError("Breaks must not overlap")
        clean_breaks = [{"start": format_minutes(bs), "end": format_minutes(be)} for bs, be in windows]

    return {
        "shift_type": shift_type,
        "start_time": format_minutes(start),
        "end_time": format_minutes(end),
        "breaks": clean_breaks,
    }


class DutyRosterService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.shifts = Repository(db, DutyShift, "Shift")
        self.staff = Repository(db, Staff, "Staff")

    def list(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        staff_id: Optional[int] = None,
        shift_type: Optional[str] = None,
    ) -> List[DutyShift]:
        """Shifts ordered by date, then start time."""
        filters = []
        if status:
            filters.append(DutyShift.status == status)
        if staff_id:
            filters.append(DutyShift.staff_id == staff_id)
        if shift_type:
            filters.append(DutyShift.shift_type == shift_type)
        if date_from:
            filters.append(DutyShift.date >= date_from)
        if date_to:
            filters.append(DutyShift.date <= date_to)
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(or_(
                DutyShift.staff.has(Staff.user.has(or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern)))),
                DutyShift.staff.has(Staff.role.ilike(pattern)),
                DutyShift.status.ilike(pattern),
            ))
        return self.shifts.find_many(
            filters,
            order_by=[DutyShift.date.asc(), DutyShift.start_time.asc(), DutyShift.id.asc()]
        )

    def get(self, shift_id: int) -> DutyShift:
        return self.shifts.find_by_id(shift_id)

    def create(self, data: Dict[str, Any], actor: Optional[User] = None) -> DutyShift:
        """
        Allocate a shift. Starts as Scheduled.

        Raises:
            ValidationError: staff, date or time bounds missing; malformed breaks.
            NotFoundError: staff does not exist.
        """
        missing = [f for f in ("staff_id", "date", "start_time", "end_time") if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})

        self.staff.find_by_id(data["staff_id"])
        shape = normalize_shift(data.get("shift_type"), data["start_time"], data["end_time"], data.get("breaks"))

        shift = self.shifts.create({
            "staff_id": data["staff_id"],
            "date": data["date"],
            "notes": data.get("notes"),
            "status": ShiftStatus.SCHEDULED.value,
            **shape,
        })
        self.log_info(f"Shift {shift.id} scheduled", staff_id=shift.staff_id, shift_date=str(shift.date))
        return shift

    def update(self, shift_id: int, data: Dict[str, Any], actor: Optional[User] = None) -> DutyShift:
        """
        Edit a Scheduled shift. Unset fields keep their current values.

        Raises:
            RecordLockedError: shift is Approved or Completed.
        """
        shift = self.shifts.find_by_id(shift_id)
        if shift.status in LOCKED_STATUSES:
            raise RecordLockedError("Shift", shift.status)

        if data.get("staff_id"):
            self.staff.find_by_id(data["staff_id"])

        shape = normalize_shift(
            data.get("shift_type") or shift.shift_type,
            data.get("start_time") or shift.start_time,
            data.get("end_time") or shift.end_time,
            data["breaks"] if data.get("breaks") is not None else shift.breaks,
        )
        changes = {
            "staff_id": data.get("staff_id") or shift.staff_id,
            "date": data.get("date") or shift.date,
            "notes": data["notes"] if "notes" in data else shift.notes,
            **shape,
        }
        return self.shifts.update(shift, changes)

    def transition(self, shift_id: int, action: str, actor: Optional[User] = None) -> DutyShift:
        shift = self.shifts.find_by_id(shift_id)
        before = shift.status
        try:
            new_status = SHIFT_TRANSITIONS.next_status(action, shift.status)
        except InvalidStateError:
            self.log_warning(f"Rejected {action} on shift {shift_id}", current_status=before)
            raise

        shift.status = new_status
        if new_status == ShiftStatus.APPROVED.value:
            shift.approved_by = actor.id if actor else None
            shift.approved_at = datetime.now(timezone.utc)

        AuditService.log(
            self.db,
            action=f"{action}_shift",
            entity_type="duty_shift",
            entity_id=shift.id,
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else None,
            details={"staff_id": shift.staff_id, "date": str(shift.date)},
            before_state={"status": before},
            after_state={"status": new_status},
        )
        self.commit(shift)
        self.log_info(f"Shift {shift.id}: {before} -> {new_status}")
        return shift

    def approve(self, shift_id: int, actor: Optional[User] = None) -> DutyShift:
        return self.transition(shift_id, "approve", actor)

    def remove(self, shift_id: int, actor: Optional[User] = None) -> None:
        """
        Raises:
            RecordLockedError: shift is Approved or Completed; it stays in the roster.
        """
        shift = self.shifts.find_by_id(shift_id)
        if shift.status in LOCKED_STATUSES:
            self.log_warning(f"Refused to delete shift {shift_id}", current_status=shift.status)
            raise RecordLockedError("Shift", shift.status)
        self.shifts.delete(shift)
        self.log_info(f"Shift {shift_id} deleted")
