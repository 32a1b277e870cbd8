from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.routers.deps import ADMIN_ROLES, get_acting_user, require_role
from gym_api.schemas.plan import PlanCreate, PlanUpdate, PlanResponse
from gym_api.services.plan_service import PlanService

router = APIRouter(
    prefix="/plans",
    tags=["plans"],
    dependencies=[Depends(get_acting_user)]
)


@router.get("", response_model=List[PlanResponse])
def list_plans(
    status: Optional[str] = None,
    plan_type: Optional[str] = None,
    branch_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    return PlanService(db).list(status=status, plan_type=plan_type, branch_id=branch_id)


@router.get("/{plan_id}", response_model=PlanResponse)
def get_plan(plan_id: int, db: Session = Depends(get_db)):
    return PlanService(db).get(plan_id)


@router.post("", response_model=PlanResponse, status_code=201, dependencies=[Depends(require_role(ADMIN_ROLES))])
def create_plan(payload: PlanCreate, db: Session = Depends(get_db)):
    return PlanService(db).create(payload.model_dump())


@router.put("/{plan_id}", response_model=PlanResponse, dependencies=[Depends(require_role(ADMIN_ROLES))])
def update_plan(plan_id: int, payload: PlanUpdate, db: Session = Depends(get_db)):
    return PlanService(db).update(plan_id, payload.model_dump(exclude_unset=True))


@router.patch("/{plan_id}/toggle-status", response_model=PlanResponse, dependencies=[Depends(require_role(ADMIN_ROLES))])
def toggle_plan_status(plan_id: int, db: Session = Depends(get_db)):
    return PlanService(db).toggle_status(plan_id)


@router.delete("/{plan_id}", dependencies=[Depends(require_role(ADMIN_ROLES))])
def delete_plan(plan_id: int, db: Session = Depends(get_db)):
    PlanService(db).remove(plan_id)
    return {"success": True, "message": "Plan deleted successfully"}
