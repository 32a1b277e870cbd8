"""
Plan booking requests: members ask, admins approve or reject.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.models.user import User, UserRole
from gym_api.routers.deps import APPROVER_ROLES, get_acting_user, require_role
from gym_api.schemas.plan import BookingCreate, BookingResponse
from gym_api.services.booking_service import PlanBookingService

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
    dependencies=[Depends(get_acting_user)]
)


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    member_id: Optional[int] = None,
    branch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user)
):
    # Members only ever see their own requests
    if current_user.role == UserRole.MEMBER:
        member_id = current_user.id
    return PlanBookingService(db).list(
        status=status, search=search, date_from=date_from, date_to=date_to,
        member_id=member_id, branch_id=branch_id
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    return PlanBookingService(db).get(booking_id)


@router.post("", response_model=BookingResponse, status_code=201)
def create_booking(
    payload: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user)
):
    """A member requests a plan for themselves; staff may file on a member's behalf."""
    member_id = current_user.id if current_user.role == UserRole.MEMBER else payload.member_id
    return PlanBookingService(db).create(member_id, payload.plan_id, payload.note)


@router.patch("/{booking_id}/approve", response_model=BookingResponse)
def approve_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(APPROVER_ROLES))
):
    return PlanBookingService(db).approve(booking_id, current_user)


@router.patch("/{booking_id}/reject", response_model=BookingResponse)
def reject_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(APPROVER_ROLES))
):
    return PlanBookingService(db).reject(booking_id, current_user)


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(APPROVER_ROLES))
):
    PlanBookingService(db).remove(booking_id, current_user)
    return {"success": True, "message": "Booking deleted successfully"}
