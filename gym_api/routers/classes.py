"""
Group class schedule: admins plan classes, members take seats.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.models.user import User, UserRole
from gym_api.routers.deps import ADMIN_ROLES, get_acting_user, require_role
from gym_api.schemas.class_schedule import (
    ClassBookingCreate,
    ClassBookingResponse,
    ClassCreate,
    ClassResponse,
    ClassUpdate,
)
from gym_api.services.class_schedule_service import ClassScheduleService

router = APIRouter(
    prefix="/classes",
    tags=["classes"],
    dependencies=[Depends(get_acting_user)]
)


@router.get("", response_model=List[ClassResponse])
def list_classes(
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    trainer_id: Optional[int] = None,
    branch_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    return ClassScheduleService(db).list(
        status=status, search=search, date_from=date_from, date_to=date_to,
        trainer_id=trainer_id, branch_id=branch_id
    )


@router.get("/{class_id}", response_model=ClassResponse)
def get_class(class_id: int, db: Session = Depends(get_db)):
    return ClassScheduleService(db).get(class_id)


@router.get("/{class_id}/members", response_model=List[ClassBookingResponse])
def list_class_members(class_id: int, db: Session = Depends(get_db)):
    return ClassScheduleService(db).members(class_id)


@router.post("", response_model=ClassResponse, status_code=201)
def create_class(
    payload: ClassCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    return ClassScheduleService(db).create(payload.model_dump(), current_user)


@router.put("/{class_id}", response_model=ClassResponse)
def update_class(
    class_id: int,
    payload: ClassUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    return ClassScheduleService(db).update(class_id, payload.model_dump(exclude_unset=True), current_user)


@router.delete("/{class_id}")
def delete_class(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    ClassScheduleService(db).remove(class_id, current_user)
    return {"success": True, "message": "Class deleted successfully"}


@router.post("/{class_id}/book", response_model=ClassBookingResponse, status_code=201)
def book_class(
    class_id: int,
    payload: ClassBookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_acting_user)
):
    """Members book themselves; front-desk staff book on a member's behalf."""
    member_id = current_user.id if current_user.role == UserRole.MEMBER else payload.member_id
    return ClassScheduleService(db).book(class_id, member_id)
