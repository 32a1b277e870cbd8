"""
Personal training sessions: booking, trainer accept/reject, reschedule and
the weekly calendar.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.models.user import User
from gym_api.routers.deps import TRAINER_DESK_ROLES, get_acting_user, require_role
from gym_api.schemas.training_session import (
    RescheduleRequest,
    SessionCreate,
    SessionResponse,
    WeekCalendar,
)
from gym_api.services.training_session_service import TrainingSessionService

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    dependencies=[Depends(get_acting_user)]
)


@router.get("", response_model=List[SessionResponse])
def list_sessions(
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    trainer_id: Optional[int] = None,
    member_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    return TrainingSessionService(db).list(
        status=status, search=search, date_from=date_from, date_to=date_to,
        trainer_id=trainer_id, member_id=member_id
    )


@router.get("/calendar", response_model=WeekCalendar)
def week_calendar(
    anchor: Optional[date] = None,
    trainer_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Sessions for the week containing `anchor` (default today), by day and hour."""
    return TrainingSessionService(db).week_calendar(anchor or date.today(), trainer_id=trainer_id)


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(session_id: int, db: Session = Depends(get_db)):
    return TrainingSessionService(db).get(session_id)


@router.post("", response_model=SessionResponse, status_code=201)
def create_session(
    payload: SessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(TRAINER_DESK_ROLES))
):
    return TrainingSessionService(db).create(payload.model_dump(), current_user)


@router.patch("/{session_id}/{action}", response_model=SessionResponse)
def transition_session(
    session_id: int,
    action: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(TRAINER_DESK_ROLES))
):
    """accept | reject | cancel | complete"""
    return TrainingSessionService(db).transition(session_id, action, current_user)


@router.put("/{session_id}/reschedule", response_model=SessionResponse)
def reschedule_session(
    session_id: int,
    payload: RescheduleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(TRAINER_DESK_ROLES))
):
    return TrainingSessionService(db).reschedule(session_id, payload.date, payload.time, current_user)


@router.delete("/{session_id}")
def delete_session(
    session_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(TRAINER_DESK_ROLES))
):
    TrainingSessionService(db).remove(session_id, current_user)
    return {"success": True, "message": "Session deleted successfully"}
