"""
Salary Router

Handles HTTP endpoints for salary records.
All business logic is delegated to the salary service layer.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.models.user import User
from gym_api.routers.deps import ADMIN_ROLES, require_role
from gym_api.schemas.salary import (
    SalaryBreakdownResponse,
    SalaryCalculateRequest,
    SalaryCreate,
    SalaryResponse,
    SalaryUpdate,
)
from gym_api.services.salary_service import SalaryService

router = APIRouter(
    prefix="/salaries",
    tags=["salaries"],
    dependencies=[Depends(require_role(ADMIN_ROLES))]
)


@router.get("", response_model=List[SalaryResponse])
def list_salaries(
    status: Optional[str] = None,
    search: Optional[str] = None,
    staff_id: Optional[int] = None,
    branch_id: Optional[int] = None,
    role: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return SalaryService(db).list(status=status, search=search, staff_id=staff_id, branch_id=branch_id, role=role)


@router.post("/calculate", response_model=SalaryBreakdownResponse)
def calculate_salary(payload: SalaryCalculateRequest, db: Session = Depends(get_db)):
    """
    Preview the pay breakdown for a staff member without saving a record.
    """
    return SalaryService(db).preview(payload.model_dump()).to_dict()


@router.get("/{salary_id}", response_model=SalaryResponse)
def get_salary(salary_id: int, db: Session = Depends(get_db)):
    return SalaryService(db).get(salary_id)


@router.post("", response_model=SalaryResponse, status_code=201)
def create_salary(
    payload: SalaryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    return SalaryService(db).create(payload.model_dump(), current_user)


@router.put("/{salary_id}", response_model=SalaryResponse)
def update_salary(
    salary_id: int,
    payload: SalaryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    return SalaryService(db).update(salary_id, payload.model_dump(exclude_unset=True), current_user)


@router.patch("/{salary_id}/{action}", response_model=SalaryResponse)
def transition_salary(
    salary_id: int,
    action: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    """approve | pay"""
    return SalaryService(db).transition(salary_id, action, current_user)


@router.delete("/{salary_id}")
def delete_salary(
    salary_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES))
):
    SalaryService(db).remove(salary_id, current_user)
    return {"success": True, "message": "Salary record deleted successfully"}
