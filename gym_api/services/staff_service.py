from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from gym_api.core.exceptions import ConflictError, ValidationError
from gym_api.models.branch import Branch
from gym_api.models.staff import Staff, SalaryType, StaffStatus
from gym_api.models.user import User
from gym_api.services.base import BaseService
from gym_api.services.repository import Repository

SALARY_TYPES = [t.value for t in SalaryType]


def _validate_profile(data: Dict[str, Any]) -> None:
    """Check the compensation fields that are present in `data`."""
    salary_type = data.get("salary_type")
    if salary_type is not None and salary_type not in SALARY_TYPES:
        raise ValidationError(f"Unknown salary type '{salary_type}'", details={"allowed": SALARY_TYPES})

    for field in ("fixed_salary", "hourly_rate"):
        value = data.get(field)
        if value is not None and Decimal(value) < 0:
            raise ValidationError(f"'{field}' cannot be negative")

    rate = data.get("commission_rate_percent")
    if rate is not None and not Decimal(0) <= Decimal(rate) <= Decimal(100):
        raise ValidationError("'commission_rate_percent' must be between 0 and 100")


class StaffService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.staff = Repository(db, Staff, "Staff")
        self.users = Repository(db, User, "User")
        self.branches = Repository(db, Branch, "Branch")

    def list(
        self,
        branch_id: Optional[int] = None,
        status: Optional[str] = None,
        salary_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Staff]:
        filters = []
        if branch_id:
            filters.append(Staff.branch_id == branch_id)
        if status:
            filters.append(Staff.status == status)
        if salary_type:
            filters.append(Staff.salary_type == salary_type)
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(or_(
                Staff.role.ilike(pattern),
                Staff.user.has(or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern))),
            ))
        return self.staff.find_many(filters)

    def get(self, staff_id: int) -> Staff:
        return self.staff.find_by_id(staff_id)

    def create(self, data: Dict[str, Any]) -> Staff:
        """
        Create a staff record with its compensation profile.

        Raises:
            ValidationError: user or role missing, bad rates.
            NotFoundError: user or branch does not exist.
            ConflictError: the user already has a staff record.
        """
        if not data.get("user_id") or not (data.get("role") or "").strip():
            raise ValidationError("User and role are required")
        _validate_profile(data)

        user = self.users.find_by_id(data["user_id"])
        if user.staff_profile is not None:
            raise ConflictError(f"User {user.id} already has a staff record")

        branch_id = data.get("branch_id") or user.branch_id
        if branch_id:
            self.branches.find_by_id(branch_id)

        staff = self.staff.create({
            **data,
            "branch_id": branch_id,
            "salary_type": data.get("salary_type") or SalaryType.FIXED.value,
            "status": data.get("status") or StaffStatus.ACTIVE.value,
        })
        self.log_info(f"Staff {staff.id} created", salary_type=staff.salary_type)
        return staff

    def update(self, staff_id: int, data: Dict[str, Any]) -> Staff:
        staff = self.staff.find_by_id(staff_id)
        _validate_profile(data)
        if data.get("branch_id"):
            self.branches.find_by_id(data["branch_id"])
        data.pop("user_id", None)
        return self.staff.update(staff, data)

    def remove(self, staff_id: int) -> None:
        """Deletes the staff record together with its salaries and shifts."""
        staff = self.staff.find_by_id(staff_id)
        self.staff.delete(staff)
        self.log_info(f"Staff {staff_id} deleted")
