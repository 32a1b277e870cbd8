from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.routers.deps import ADMIN_ROLES, get_acting_user, require_role
from gym_api.schemas.staff import StaffCreate, StaffUpdate, StaffResponse
from gym_api.services.staff_service import StaffService

router = APIRouter(
    prefix="/staff",
    tags=["staff"],
    dependencies=[Depends(get_acting_user)]
)


@router.get("", response_model=List[StaffResponse])
def list_staff(
    branch_id: Optional[int] = None,
    status: Optional[str] = None,
    salary_type: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return StaffService(db).list(branch_id=branch_id, status=status, salary_type=salary_type, search=search)


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff(staff_id: int, db: Session = Depends(get_db)):
    return StaffService(db).get(staff_id)


@router.post("", response_model=StaffResponse, status_code=201, dependencies=[Depends(require_role(ADMIN_ROLES))])
def create_staff(payload: StaffCreate, db: Session = Depends(get_db)):
    """Create a staff record together with its compensation profile."""
    return StaffService(db).create(payload.model_dump(exclude_none=True))


@router.put("/{staff_id}", response_model=StaffResponse, dependencies=[Depends(require_role(ADMIN_ROLES))])
def update_staff(staff_id: int, payload: StaffUpdate, db: Session = Depends(get_db)):
    return StaffService(db).update(staff_id, payload.model_dump(exclude_unset=True))


@router.delete("/{staff_id}", dependencies=[Depends(require_role(ADMIN_ROLES))])
def delete_staff(staff_id: int, db: Session = Depends(get_db)):
    StaffService(db).remove(staff_id)
    return {"success": True, "message": "Staff deleted successfully"}
