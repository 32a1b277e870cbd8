"""
Personal Training Session Service

Trainer/member appointments. Times are stored in canonical HH:MM form so
that conflict checks and calendar placement compare like with like.

    Booked   --accept-----------> Upcoming
    Booked   --reject/cancel----> Cancelled
    Upcoming --reject/cancel----> Cancelled
    Upcoming --complete---------> Completed

Reschedule changes date/time only and keeps the status.
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.config import settings
from gym_api.core.exceptions import AccessDeniedError, ConflictError, InvalidStateError, ValidationError
from gym_api.core.timeutil import hour_slots, normalize_time, to_minutes, week_bounds
from gym_api.models.plan import MemberPlan
from gym_api.models.training_session import TrainingSession, SessionStatus
from gym_api.models.user import User, UserRole
from gym_api.services.audit import AuditService
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository
from gym_api.services.workflow import StateMachine

ACTIVE_STATUSES = [SessionStatus.BOOKED.value, SessionStatus.UPCOMING.value]
TERMINAL_STATUSES = [SessionStatus.COMPLETED.value, SessionStatus.CANCELLED.value]
TRAINER_ROLES = [UserRole.PERSONAL_TRAINER, UserRole.GENERAL_TRAINER]

SESSION_TRANSITIONS = StateMachine("Session", {
    "accept": ([SessionStatus.BOOKED.value], SessionStatus.UPCOMING.value),
    "reject": (ACTIVE_STATUSES, SessionStatus.CANCELLED.value),
    "cancel": (ACTIVE_STATUSES, SessionStatus.CANCELLED.value),
    "complete": ([SessionStatus.UPCOMING.value], SessionStatus.COMPLETED.value),
})


class TrainingSessionService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.sessions = Repository(db, TrainingSession, "Session")
        self.users = Repository(db, User, "User")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        trainer_id: Optional[int] = None,
        member_id: Optional[int] = None,
    ) -> List[TrainingSession]:
        filters = []
        if status:
            filters.append(TrainingSession.status == status)
        if trainer_id:
            filters.append(TrainingSession.trainer_id == trainer_id)
        if member_id:
            filters.append(TrainingSession.member_id == member_id)
        if date_from:
            filters.append(TrainingSession.date >= date_from)
        if date_to:
            filters.append(TrainingSession.date <= date_to)
        if search:
            pattern = f"%{search.strip()}%"
            name_match = or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern))
            filters.append(or_(
                TrainingSession.trainer.has(name_match),
                TrainingSession.member.has(name_match),
                TrainingSession.session_type.ilike(pattern),
                TrainingSession.location.ilike(pattern),
            ))
        return self.sessions.find_many(filters, order_by=[TrainingSession.id.asc()])

    def get(self, session_id: int) -> TrainingSession:
        return self.sessions.find_by_id(session_id)

    def week_calendar(self, anchor: date, trainer_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Bucket the week's sessions by day and hour.

        Placement uses minutes since midnight, so a session at "10:30" sits in
        the 10 AM slot regardless of how its time was originally written.
        """
        start, end = week_bounds(anchor, settings.week_starts_on)
        sessions = self.list(date_from=start, date_to=end, trainer_id=trainer_id)

        days = []
        for offset in range((end - start).days + 1):
            day = start + timedelta(days=offset)
            slots = {hour: {"hour": hour, "label": label, "sessions": []} for hour, label in hour_slots()}
            for session in sessions:
                if session.date == day:
                    slots[to_minutes(session.time) // 60]["sessions"].append(session)
            days.append({"date": day, "slots": list(slots.values())})

        return {"week_start": start, "week_end": end, "days": days}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create(self, data: Dict[str, Any], actor: Optional[User] = None) -> TrainingSession:
        """
        Book a session.

        Raises:
            ValidationError: trainer, member, date or time missing; trainer lacks a trainer role.
            NotFoundError: trainer or member does not exist.
            ConflictError: trainer already has an active session at that date/time.
            InvalidStateError: member has no plan sessions left (when consuming a plan session).
        """
        missing = [f for f in ("trainer_id", "member_id", "date", "time") if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})

        trainer = self.users.find_by_id(data["trainer_id"])
        if trainer.role not in TRAINER_ROLES:
            raise ValidationError(f"User {trainer.id} is not a trainer")
        self.users.find_by_id(data["member_id"])

        session_time = normalize_time(data["time"])
        self._ensure_trainer_free(trainer.id, data["date"], session_time)

        duration = data.get("duration")
        if duration is None:
            duration = 60
        if duration <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        if data.get("consume_plan_session", True):
            member_plan = self._active_member_plan(data["member_id"], data["date"])
            member_plan.remaining_sessions -= 1

        session = self.sessions.create({
            "trainer_id": trainer.id,
            "member_id": data["member_id"],
            "branch_id": trainer.branch_id,
            "date": data["date"],
            "time": session_time,
            "duration": duration,
            "session_type": data.get("session_type"),
            "location": data.get("location"),
            "notes": data.get("notes"),
            "status": SessionStatus.BOOKED.value,
            "created_by": actor.id if actor else None,
        })
        self.log_info(
            f"Session {session.id} booked",
            trainer_id=trainer.id, member_id=session.member_id, date=str(session.date), time=session.time
        )
        return session

    def transition(self, session_id: int, action: str, actor: Optional[User] = None) -> TrainingSession:
        session = self.sessions.find_by_id(session_id)
        self._ensure_can_act(session, actor)
        before = session.status
        try:
            new_status = SESSION_TRANSITIONS.next_status(action, session.status)
        except InvalidStateError:
            self.log_warning(f"Rejected {action} on session {session_id}", current_status=before)
            raise

        session.status = new_status
        self._audit(f"{action}_session", session, actor, {"status": before}, {"status": new_status})
        self.commit(session)
        self.log_info(f"Session {session.id}: {before} -> {new_status}")
        return session

    def accept(self, session_id: int, actor: Optional[User] = None) -> TrainingSession:
        return self.transition(session_id, "accept", actor)

    def cancel(self, session_id: int, actor: Optional[User] = None) -> TrainingSession:
        return self.transition(session_id, "cancel", actor)

    def reschedule(
        self,
        session_id: int,
        new_date: Optional[date],
        new_time: Optional[str],
        actor: Optional[User] = None,
    ) -> TrainingSession:
        """
        Move a session to a new date/time. Status is left untouched.

        Raises:
            ValidationError: date or time empty.
            InvalidStateError: session already completed or cancelled.
            ConflictError: trainer is busy at the new slot.
        """
        if not new_date or not new_time or not str(new_time).strip():
            raise ValidationError("Both date and time are required to reschedule")

        session = self.sessions.find_by_id(session_id)
        self._ensure_can_act(session, actor)
        if session.status in TERMINAL_STATUSES:
            raise InvalidStateError(
                f"Cannot reschedule a session in status '{session.status}'",
                current_status=session.status
            )

        canonical = normalize_time(new_time)
        self._ensure_trainer_free(session.trainer_id, new_date, canonical, ignore_id=session.id)

        before = {"date": str(session.date), "time": session.time}
        session.date = new_date
        session.time = canonical
        self._audit("reschedule_session", session, actor, before, {"date": str(new_date), "time": canonical})
        self.commit(session)
        self.log_info(f"Session {session.id} rescheduled to {new_date} {canonical}")
        return session

    def remove(self, session_id: int, actor: Optional[User] = None) -> None:
        session = self.sessions.find_by_id(session_id)
        self._ensure_can_act(session, actor)
        self._audit("delete_session", session, actor, {"status": session.status}, None)
        self.sessions.delete(session)
        self.log_info(f"Session {session_id} deleted")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _ensure_can_act(session: TrainingSession, actor: Optional[User]) -> None:
        if actor is not None and actor.role in TRAINER_ROLES and actor.id != session.trainer_id:
            raise AccessDeniedError("Trainers can only act on their own sessions")

    def _ensure_trainer_free(self, trainer_id: int, on: date, at: str, ignore_id: Optional[int] = None) -> None:
        query = self.db.query(TrainingSession).filter(
            TrainingSession.trainer_id == trainer_id,
            TrainingSession.date == on,
            TrainingSession.time == at,
            TrainingSession.status != SessionStatus.CANCELLED.value,
        )
        if ignore_id is not None:
            query = query.filter(TrainingSession.id != ignore_id)
        clash = query.first()
        if clash:
            raise ConflictError(
                "Trainer already booked at same time",
                details={"session_id": clash.id, "date": str(on), "time": at}
            )

    def _active_member_plan(self, member_id: int, on: date) -> MemberPlan:
        member_plan = self.db.query(MemberPlan).filter(
            MemberPlan.member_id == member_id,
            MemberPlan.remaining_sessions > 0,
            MemberPlan.expiry_date >= on,
        ).order_by(MemberPlan.expiry_date.asc()).first()
        if not member_plan:
            raise InvalidStateError("No remaining sessions in member plan")
        return member_plan

    def _audit(self, action: str, session: TrainingSession, actor: Optional[User], before, after) -> None:
        AuditService.log(
            self.db,
            action=action,
            entity_type="training_session",
            entity_id=session.id,
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else None,
            details={"trainer_id": session.trainer_id, "member_id": session.member_id},
            before_state=before,
            after_state=after,
        )
