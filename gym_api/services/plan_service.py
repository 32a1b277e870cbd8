from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from gym_api.core.exceptions import InvalidStateError, ValidationError
from gym_api.models.branch import Branch
from gym_api.models.plan import Plan, PlanBooking, PlanStatus, PlanType, BookingStatus
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository

PLAN_TYPES = [t.value for t in PlanType]


class PlanService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.plans = Repository(db, Plan, "Plan")
        self.branches = Repository(db, Branch, "Branch")

    def list(
        self,
        status: Optional[str] = None,
        plan_type: Optional[str] = None,
        branch_id: Optional[int] = None,
    ) -> List[Plan]:
        filters = []
        if status:
            filters.append(Plan.status == status)
        if plan_type:
            filters.append(Plan.plan_type == plan_type)
        if branch_id:
            filters.append(Plan.branch_id == branch_id)
        return self.plans.find_many(filters)

    def get(self, plan_id: int) -> Plan:
        return self.plans.find_by_id(plan_id)

    def create(self, data: Dict[str, Any]) -> Plan:
        if not (data.get("name") or "").strip():
            raise ValidationError("Plan name is required")
        self._validate(data)
        if data.get("branch_id"):
            self.branches.find_by_id(data["branch_id"])
        plan = self.plans.create(data)
        self.log_info(f"Plan {plan.id} created", plan_type=plan.plan_type)
        return plan

    def update(self, plan_id: int, data: Dict[str, Any]) -> Plan:
        plan = self.plans.find_by_id(plan_id)
        self._validate(data)
        return self.plans.update(plan, data)

    def toggle_status(self, plan_id: int) -> Plan:
        plan = self.plans.find_by_id(plan_id)
        new_status = PlanStatus.INACTIVE.value if plan.status == PlanStatus.ACTIVE.value else PlanStatus.ACTIVE.value
        self.log_info(f"Plan {plan.id}: {plan.status} -> {new_status}")
        return self.plans.update(plan, {"status": new_status})

    def remove(self, plan_id: int) -> None:
        """
        Raises:
            InvalidStateError: the plan has approved bookings.
        """
        plan = self.plans.find_by_id(plan_id)
        approved = self.db.query(PlanBooking).filter(
            PlanBooking.plan_id == plan.id,
            PlanBooking.status == BookingStatus.APPROVED.value
        ).count()
        if approved:
            raise InvalidStateError("Cannot delete plan with active subscriptions/bookings")
        self.plans.delete(plan)
        self.log_info(f"Plan {plan_id} deleted")

    @staticmethod
    def _validate(data: Dict[str, Any]) -> None:
        if data.get("plan_type") is not None and data["plan_type"] not in PLAN_TYPES:
            raise ValidationError(f"Unknown plan type '{data['plan_type']}'", details={"allowed": PLAN_TYPES})
        for field in ("sessions", "validity_days"):
            if data.get(field) is not None and data[field] < 0:
                raise ValidationError(f"'{field}' cannot be negative")
        if data.get("price") is not None and data["price"] < 0:
            raise ValidationError("'price' cannot be negative")
