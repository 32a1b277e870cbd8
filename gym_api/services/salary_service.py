"""
Salary Service Layer

Creates and manages salary records for staff. All money fields are derived
by the compensation calculator from the record's inputs and the staff
member's rates; callers never set them directly.

Architecture:
- Router -> SalaryService (this module) -> compensation calculator / Repository
- Status moves strictly forward: Generated -> Approved -> Paid
- Paid records are locked against edit and delete
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.exceptions import InvalidStateError, RecordLockedError, ValidationError
from gym_api.models.salary import Salary, SalaryStatus
from gym_api.models.staff import Staff
from gym_api.models.user import User
from gym_api.services.audit import AuditService
from gym_api.services.base import BaseService
from gym_api.services.compensation import (
    CompensationProfile,
    SalaryBreakdown,
    calculate_compensation,
)
from gym_api.services.repository import Repository
from gym_api.services.workflow import StateMachine

SALARY_TRANSITIONS = StateMachine("Salary", {
    "approve": ([SalaryStatus.GENERATED.value], SalaryStatus.APPROVED.value),
    "pay": ([SalaryStatus.APPROVED.value], SalaryStatus.PAID.value),
})


def _breakdown_columns(breakdown: SalaryBreakdown) -> Dict[str, Any]:
    return {
        "hours_worked": breakdown.hours_worked,
        "fixed_salary": breakdown.fixed_salary,
        "hourly_total": breakdown.hourly_total,
        "commission_total": breakdown.commission_total,
        "bonuses": [b.to_dict() for b in breakdown.bonuses],
        "deductions": [d.to_dict() for d in breakdown.deductions],
        "net_pay": breakdown.net_pay,
    }


def _validate_period(period_start: Optional[date], period_end: Optional[date]) -> None:
    if not period_start or not period_end:
        raise ValidationError("Period start and period end are required")
    if period_start > period_end:
        raise ValidationError(
            "Period start must be on or before period end",
            details={"period_start": str(period_start), "period_end": str(period_end)}
        )


class SalaryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.salaries = Repository(db, Salary, "Salary")
        self.staff = Repository(db, Staff, "Staff")

    def list(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        staff_id: Optional[int] = None,
        branch_id: Optional[int] = None,
        role: Optional[str] = None,
    ) -> List[Salary]:
        """Salary records, newest first."""
        filters = []
        if status:
            filters.append(Salary.status == status)
        if staff_id:
            filters.append(Salary.staff_id == staff_id)
        if branch_id:
            filters.append(Salary.staff.has(Staff.branch_id == branch_id))
        if role:
            filters.append(Salary.staff.has(Staff.role == role))
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(Salary.staff.has(or_(
                Staff.role.ilike(pattern),
                Staff.user.has(or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern))),
            )))
        return self.salaries.find_many(filters, order_by=[Salary.id.desc()])

    def get(self, salary_id: int) -> Salary:
        return self.salaries.find_by_id(salary_id)

    def preview(self, data: Dict[str, Any]) -> SalaryBreakdown:
        """Compute a breakdown for a staff member without saving anything."""
        if not data.get("staff_id"):
            raise ValidationError("Staff member is required")
        staff = self.staff.find_by_id(data["staff_id"])
        return self._calculate(staff, data)

    def create(self, data: Dict[str, Any], actor: Optional[User] = None) -> Salary:
        """
        Generate a salary record for one staff member and period.

        Args:
            data: staff_id, period_start, period_end, hours_worked, fixed_salary,
                  bonuses, deductions.
            actor: The admin generating the record.

        Raises:
            ValidationError: staff or period bounds missing, period reversed,
                             malformed bonus/deduction lines.
            NotFoundError: staff does not exist.
        """
        if not data.get("staff_id"):
            raise ValidationError("Staff member is required")
        _validate_period(data.get("period_start"), data.get("period_end"))

        staff = self.staff.find_by_id(data["staff_id"])
        breakdown = self._calculate(staff, data)

        salary = self.salaries.create({
            "staff_id": staff.id,
            "period_start": data["period_start"],
            "period_end": data["period_end"],
            "status": SalaryStatus.GENERATED.value,
            "created_by": actor.id if actor else None,
            **_breakdown_columns(breakdown),
        })
        self.log_info(f"Salary {salary.id} generated for staff {staff.id}", net_pay=str(salary.net_pay))
        return salary

    def update(self, salary_id: int, data: Dict[str, Any], actor: Optional[User] = None) -> Salary:
        """
        Edit a record's inputs and recompute every derived field.
        Fields not present in `data` keep their stored values.

        Raises:
            RecordLockedError: record is Paid.
        """
        salary = self.salaries.find_by_id(salary_id)
        if salary.status == SalaryStatus.PAID.value:
            self.log_warning(f"Refused to edit salary {salary_id}", current_status=salary.status)
            raise RecordLockedError("Salary record", salary.status)

        merged = {
            "staff_id": salary.staff_id,
            "period_start": salary.period_start,
            "period_end": salary.period_end,
            "hours_worked": salary.hours_worked,
            "fixed_salary": salary.fixed_salary,
            "bonuses": salary.bonuses,
            "deductions": salary.deductions,
        }
        merged.update({k: v for k, v in data.items() if k in merged})
        _validate_period(merged["period_start"], merged["period_end"])

        staff = self.staff.find_by_id(merged["staff_id"])
        breakdown = self._calculate(staff, merged)

        salary = self.salaries.update(salary, {
            "staff_id": staff.id,
            "period_start": merged["period_start"],
            "period_end": merged["period_end"],
            **_breakdown_columns(breakdown),
        })
        self.log_info(f"Salary {salary.id} recalculated", net_pay=str(salary.net_pay))
        return salary

    def transition(self, salary_id: int, action: str, actor: Optional[User] = None) -> Salary:
        """Apply `approve` (Generated -> Approved) or `pay` (Approved -> Paid)."""
        salary = self.salaries.find_by_id(salary_id)
        before = salary.status
        try:
            new_status = SALARY_TRANSITIONS.next_status(action, salary.status)
        except InvalidStateError:
            self.log_warning(f"Rejected {action} on salary {salary_id}", current_status=before)
            raise

        salary.status = new_status
        now = datetime.now(timezone.utc)
        if new_status == SalaryStatus.APPROVED.value:
            salary.approved_by = actor.id if actor else None
            salary.approved_at = now
        elif new_status == SalaryStatus.PAID.value:
            salary.paid_at = now

        AuditService.log(
            self.db,
            action=f"{action}_salary",
            entity_type="salary",
            entity_id=salary.id,
            user_id=actor.id if actor else None,
            user_role=actor.role.value if actor else None,
            details={"staff_id": salary.staff_id, "net_pay": str(salary.net_pay)},
            before_state={"status": before},
            after_state={"status": new_status},
        )
        self.commit(salary)
        self.log_info(f"Salary {salary.id}: {before} -> {new_status}")
        return salary

    def remove(self, salary_id: int, actor: Optional[User] = None) -> None:
        """
        Raises:
            RecordLockedError: record is Paid.
        """
        salary = self.salaries.find_by_id(salary_id)
        if salary.status == SalaryStatus.PAID.value:
            self.log_warning(f"Refused to delete salary {salary_id}", current_status=salary.status)
            raise RecordLockedError("Salary record", salary.status)
        self.salaries.delete(salary)
        self.log_info(f"Salary {salary_id} deleted")

    def _calculate(self, staff: Staff, data: Dict[str, Any]) -> SalaryBreakdown:
        breakdown = calculate_compensation(
            CompensationProfile.from_staff(staff),
            hours_worked=data.get("hours_worked"),
            fixed_salary=data.get("fixed_salary"),
            bonuses=data.get("bonuses"),
            deductions=data.get("deductions"),
        )
        if breakdown.is_negative:
            self.log_warning(
                f"Negative net pay for staff {staff.id}",
                net_pay=str(breakdown.net_pay),
                deduction_total=str(breakdown.deduction_total),
            )
        return breakdown
