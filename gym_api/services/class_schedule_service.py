"""
Group Class Schedule Service

Classes are run by a trainer at a date and time and hold a fixed number of
seats. Members take seats until the class is full; a Canceled class takes no
bookings and no longer blocks its trainer's slot.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.exceptions import (
    AccessDeniedError, ConflictError, InvalidStateError, ValidationError
)
from gym_api.core.timeutil import normalize_time
from gym_api.models.class_schedule import (
    ClassBookingStatus, ClassSchedule, ClassStatus, GroupClassBooking
)
from gym_api.models.user import User, UserRole
from gym_api.services.audit import AuditService
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository

TRAINER_ROLES = [UserRole.PERSONAL_TRAINER, UserRole.GENERAL_TRAINER]
CLASS_STATUSES = [s.value for s in ClassStatus]
DEFAULT_SEATS = 20


class ClassScheduleService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.classes = Repository(db, ClassSchedule, "Class")
        self.bookings = Repository(db, GroupClassBooking, "Class booking")
        self.users = Repository(db, User, "User")

    def list(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        trainer_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> List[ClassSchedule]:
        """Classes ordered by date, then time."""
        filters = []
        if status:
            filters.append(ClassSchedule.status == status)
        if trainer_id:
            filters.append(ClassSchedule.trainer_id == trainer_id)
        if branch_id:
            filters.append(ClassSchedule.branch_id == branch_id)
        if date_from:
            filters.append(ClassSchedule.date >= date_from)
        if date_to:
            filters.append(ClassSchedule.date <= date_to)
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(or_(
                ClassSchedule.class_name.ilike(pattern),
                ClassSchedule.trainer.has(or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern))),
            ))
        return self.classes.find_many(
            filters,
            order_by=[ClassSchedule.date.asc(), ClassSchedule.time.asc(), ClassSchedule.id.asc()]
        )

    def get(self, class_id: int) -> ClassSchedule:
        return self.classes.find_by_id(class_id)

    def members(self, class_id: int) -> List[GroupClassBooking]:
        """Active seat bookings for a class."""
        self.classes.find_by_id(class_id)
        return self.bookings.find_many([
            GroupClassBooking.class_id == class_id,
            GroupClassBooking.status == ClassBookingStatus.BOOKED.value,
        ])

    def create(self, data: Dict[str, Any], actor: Optional[User] = None) -> ClassSchedule:
        """
        Schedule a class. Starts as Scheduled.

        Raises:
            ValidationError: name, trainer, date or time missing; trainer lacks a trainer role; seats not positive.
            NotFoundError: trainer does not exist.
            ConflictError: trainer already has a class at that date/time.
        """
        missing = [f for f in ("class_name", "trainer_id", "date", "time") if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})

        trainer = self._trainer(data["trainer_id"])
        class_time = normalize_time(data["time"])
        seats = self._seats(data.get("total_seats"))
        branch_id = data.get("branch_id") or trainer.branch_id
        self._ensure_trainer_free(trainer.id, data["date"], class_time)

        schedule = self.classes.create({
            "class_name": data["class_name"].strip(),
            "trainer_id": trainer.id,
            "branch_id": branch_id,
            "date": data["date"],
            "time": class_time,
            "schedule_days": list(data.get("schedule_days") or []),
            "total_seats": seats,
            "booked_seats": 0,
            "status": ClassStatus.SCHEDULED.value,
            "created_by": actor.id if actor else None,
        })
        self.log_info(f"Class {schedule.id} scheduled", trainer_id=trainer.id, class_date=str(schedule.date))
        return schedule

    def update(self, class_id: int, data: Dict[str, Any], actor: Optional[User] = None) -> ClassSchedule:
        """
        Edit a class. Unset fields keep their current values.

        Raises:
            ValidationError: unknown status, seats below the seats already booked.
            ConflictError: the new trainer/date/time clashes with another class.
        """
        schedule = self.classes.find_by_id(class_id)

        trainer_id = schedule.trainer_id
        if data.get("trainer_id"):
            trainer_id = self._trainer(data["trainer_id"]).id
        class_date = data.get("date") or schedule.date
        class_time = normalize_time(data["time"]) if data.get("time") else schedule.time

        status = data.get("status") or schedule.status
        if status not in CLASS_STATUSES:
            raise ValidationError(f"Unknown class status '{status}'", details={"allowed": CLASS_STATUSES})

        seats = schedule.total_seats
        if data.get("total_seats") is not None:
            seats = self._seats(data["total_seats"])
            if seats < schedule.booked_seats:
                raise ValidationError(
                    f"Class already has {schedule.booked_seats} seats booked",
                    details={"booked_seats": schedule.booked_seats}
                )

        if status != ClassStatus.CANCELED.value:
            self._ensure_trainer_free(trainer_id, class_date, class_time, ignore_id=schedule.id)

        changes = {
            "class_name": (data.get("class_name") or schedule.class_name).strip(),
            "trainer_id": trainer_id,
            "date": class_date,
            "time": class_time,
            "total_seats": seats,
            "status": status,
        }
        if data.get("schedule_days") is not None:
            changes["schedule_days"] = list(data["schedule_days"])
        before = schedule.status
        schedule = self.classes.update(schedule, changes)
        if before != schedule.status:
            self.log_info(f"Class {schedule.id}: {before} -> {schedule.status}")
        return schedule

    def remove(self, class_id: int, actor: Optional[User] = None) -> None:
        schedule = self.classes.find_by_id(class_id)
        AuditService.log(
            self.db,
            action="delete_class",
            entity_type="class_schedule",
            entity_id=schedule.id,
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else None,
            details={"booked_seats": schedule.booked_seats},
            before_state={"status": schedule.status},
        )
        self.classes.delete(schedule)
        self.log_info(f"Class {class_id} deleted")

    def book(self, class_id: int, member_id: int) -> GroupClassBooking:
        """
        Take a seat in a class.

        Raises:
            InvalidStateError: class is canceled or full.
            AccessDeniedError: member belongs to a different branch.
            ConflictError: member already holds a seat.
        """
        if not member_id:
            raise ValidationError("member_id is required")
        schedule = self.classes.find_by_id(class_id)
        member = self.users.find_by_id(member_id)
        if member.role != UserRole.MEMBER:
            raise ValidationError(f"User {member.id} is not a member")

        if schedule.status == ClassStatus.CANCELED.value:
            raise InvalidStateError("Class is canceled", current_status=schedule.status)
        if schedule.booked_seats >= schedule.total_seats:
            raise InvalidStateError("Class is full", error_code="CLASS_FULL")
        if schedule.branch_id and member.branch_id != schedule.branch_id:
            raise AccessDeniedError("Member must belong to the class branch")

        existing = self.db.query(GroupClassBooking).filter(
            GroupClassBooking.class_id == schedule.id,
            GroupClassBooking.member_id == member.id,
            GroupClassBooking.status != ClassBookingStatus.CANCELED.value,
        ).first()
        if existing:
            raise ConflictError("Already booked", details={"booking_id": existing.id})

        booking = self.bookings.create({
            "class_id": schedule.id,
            "member_id": member.id,
            "status": ClassBookingStatus.BOOKED.value,
        }, commit=False)
        schedule.booked_seats += 1
        self.commit(booking, schedule)
        self.log_info(f"Member {member.id} booked class {schedule.id}", booked_seats=schedule.booked_seats)
        return booking

    def _trainer(self, trainer_id: int) -> User:
        trainer = self.users.find_by_id(trainer_id)
        if trainer.role not in TRAINER_ROLES:
            raise ValidationError(f"User {trainer.id} is not a trainer")
        return trainer

    @staticmethod
    def _seats(value: Optional[int]) -> int:
        if value is None:
            return DEFAULT_SEATS
        if value <= 0:
            raise ValidationError("Total seats must be a positive number")
        return value

    def _ensure_trainer_free(self, trainer_id: int, on: date, at: str, ignore_id: Optional[int] = None) -> None:
        query = self.db.query(ClassSchedule).filter(
            ClassSchedule.trainer_id == trainer_id,
            ClassSchedule.date == on,
            ClassSchedule.time == at,
            ClassSchedule.status != ClassStatus.CANCELED.value,
        )
        if ignore_id is not None:
            query = query.filter(ClassSchedule.id != ignore_id)
        clash = query.first()
        if clash:
            raise ConflictError(
                "Trainer is already scheduled at this time",
                details={"class_id": clash.id, "date": str(on), "time": at}
            )
