"""
Plan Booking Service

Members request a plan; an admin approves or rejects the request. Approval
opens a MemberPlan subscription in the same transaction.

    pending --approve--> approved
    pending --reject---> rejected
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.exceptions import InvalidStateError, ValidationError
from gym_api.models.plan import Plan, PlanBooking, MemberPlan, BookingStatus, PlanStatus
from gym_api.models.user import User
from gym_api.services.audit import AuditService
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository
from gym_api.services.workflow import StateMachine

BOOKING_TRANSITIONS = StateMachine("Booking", {
    "approve": ([BookingStatus.PENDING.value], BookingStatus.APPROVED.value),
    "reject": ([BookingStatus.PENDING.value], BookingStatus.REJECTED.value),
})


class PlanBookingService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.bookings = Repository(db, PlanBooking, "Booking")
        self.plans = Repository(db, Plan, "Plan")
        self.members = Repository(db, User, "Member")

    def list(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        member_id: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> List[PlanBooking]:
        """Booking requests in creation order."""
        filters = []
        if status:
            filters.append(PlanBooking.status == status)
        if member_id:
            filters.append(PlanBooking.member_id == member_id)
        if branch_id:
            filters.append(PlanBooking.plan.has(Plan.branch_id == branch_id))
        if date_from:
            filters.append(PlanBooking.requested_at >= datetime.combine(date_from, time.min))
        if date_to:
            filters.append(PlanBooking.requested_at < datetime.combine(date_to + timedelta(days=1), time.min))
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(or_(
                PlanBooking.member.has(or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern))),
                PlanBooking.plan.has(Plan.name.ilike(pattern)),
            ))
        return self.bookings.find_many(filters, order_by=[PlanBooking.id.asc()])

    def get(self, booking_id: int) -> PlanBooking:
        return self.bookings.find_by_id(booking_id)

    def create(self, member_id: Optional[int], plan_id: Optional[int], note: Optional[str] = None) -> PlanBooking:
        """
        Record a member's request for a plan. Starts as `pending`.

        Raises:
            ValidationError: member or plan reference missing.
            NotFoundError: member or plan does not exist.
            InvalidStateError: plan is not active.
        """
        missing = [name for name, value in (("member_id", member_id), ("plan_id", plan_id)) if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})

        self.members.find_by_id(member_id)
        plan = self.plans.find_by_id(plan_id)
        if plan.status != PlanStatus.ACTIVE.value:
            raise InvalidStateError(f"Plan '{plan.name}' is not available for booking", current_status=plan.status)

        booking = self.bookings.create({
            "member_id": member_id,
            "plan_id": plan_id,
            "note": note,
            "status": BookingStatus.PENDING.value,
        })
        self.log_info(f"Booking {booking.id} requested", member_id=member_id, plan_id=plan_id)
        return booking

    def transition(self, booking_id: int, action: str, actor: Optional[User] = None) -> PlanBooking:
        """
        Apply `approve` or `reject`. Only pending bookings can move; a failed
        transition leaves the booking unchanged.
        """
        booking = self.bookings.find_by_id(booking_id)
        before = booking.status
        try:
            new_status = BOOKING_TRANSITIONS.next_status(action, booking.status)
        except InvalidStateError:
            self.log_warning(f"Rejected {action} on booking {booking_id}", current_status=before)
            raise

        booking.status = new_status
        booking.decided_by = actor.id if actor else None
        booking.decided_at = datetime.now(timezone.utc)

        if new_status == BookingStatus.APPROVED.value:
            self._open_member_plan(booking)

        AuditService.log(
            self.db,
            action=f"{action}_booking",
            entity_type="plan_booking",
            entity_id=booking.id,
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else None,
            details={"member_id": booking.member_id, "plan_id": booking.plan_id},
            before_state={"status": before},
            after_state={"status": new_status},
        )
        self.commit(booking)
        self.log_info(f"Booking {booking.id}: {before} -> {new_status}")
        return booking

    def approve(self, booking_id: int, actor: Optional[User] = None) -> PlanBooking:
        return self.transition(booking_id, "approve", actor)

    def reject(self, booking_id: int, actor: Optional[User] = None) -> PlanBooking:
        return self.transition(booking_id, "reject", actor)

    def remove(self, booking_id: int, actor: Optional[User] = None) -> None:
        """Bookings can be deleted in any state."""
        booking = self.bookings.find_by_id(booking_id)
        AuditService.log(
            self.db,
            action="delete_booking",
            entity_type="plan_booking",
            entity_id=booking.id,
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else None,
            before_state={"status": booking.status},
        )
        self.bookings.delete(booking)
        self.log_info(f"Booking {booking_id} deleted")

    def _open_member_plan(self, booking: PlanBooking) -> MemberPlan:
        plan = booking.plan
        start = date.today()
        return Repository(self.db, MemberPlan).create({
            "member_id": booking.member_id,
            "plan_id": plan.id,
            "booking_id": booking.id,
            "start_date": start,
            "expiry_date": start + timedelta(days=plan.validity_days or 0),
            "remaining_sessions": plan.sessions or 0,
        }, commit=False)
