from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.models.user import User
from gym_api.routers.deps import ADMIN_ROLES, APPROVER_ROLES, get_acting_user, require_role
from gym_api.schemas.duty_roster import ShiftCreate, ShiftUpdate, ShiftResponse
from gym_api.services.duty_roster_service import DutyRosterService

router = APIRouter(
    prefix="/duty-rosters",
    tags=["duty-roster"],
    dependencies=[Depends(get_acting_user)]
)


@router.get("", response_model=List[ShiftResponse])
def list_shifts(
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    staff_id: Optional[int] = None,
    shift_type: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return DutyRosterService(db).list(
        status=status, search=search, date_from=date_from, date_to=date_to,
        staff_id=staff_id, shift_type=shift_type
    )


@router.get("/{shift_id}", response_model=ShiftResponse)
def get_shift(shift_id: int, db: Session = Depends(get_db)):
    return DutyRosterService(db).get(shift_id)


@router.post("", response_model=ShiftResponse, status_code=201)
def create_shift(
    payload: ShiftCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    return DutyRosterService(db).create(payload.model_dump(), current_user)


@router.put("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    return DutyRosterService(db).update(shift_id, payload.model_dump(exclude_unset=True), current_user)


@router.patch("/{shift_id}/{action}", response_model=ShiftResponse)
def transition_shift(
    shift_id: int,
    action: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(APPROVER_ROLES))
):
    """approve | complete"""
    return DutyRosterService(db).transition(shift_id, action, current_user)


@router.delete("/{shift_id}")
def delete_shift(
    shift_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    DutyRosterService(db).remove(shift_id, current_user)
    return {"success": True, "message": "Shift deleted successfully"}
