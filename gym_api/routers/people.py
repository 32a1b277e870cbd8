from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gym_api.database import get_db
from gym_api.models.user import User, UserRole
from gym_api.routers.deps import ADMIN_ROLES, get_acting_user, require_role
from gym_api.schemas.people import BranchCreate, BranchResponse, UserCreate, UserResponse
from gym_api.services.people_service import BranchService, UserService

branch_router = APIRouter(
    prefix="/branches",
    tags=["branches"],
    dependencies=[Depends(get_acting_user)]
)

user_router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_acting_user)]
)


@branch_router.get("", response_model=List[BranchResponse])
def list_branches(db: Session = Depends(get_db)):
    return BranchService(db).list()


@branch_router.get("/{branch_id}", response_model=BranchResponse)
def get_branch(branch_id: int, db: Session = Depends(get_db)):
    return BranchService(db).get(branch_id)


@branch_router.post("", response_model=BranchResponse, status_code=201)
def create_branch(
    payload: BranchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role([UserRole.SUPERADMIN]))
):
    return BranchService(db).create(payload.model_dump())


@user_router.get("", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = None,
    branch_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Members and staff logins; filter by role to get e.g. the trainer dropdown."""
    return UserService(db).list(role=role, branch_id=branch_id, search=search)


@user_router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get(user_id)


@user_router.post("", response_model=UserResponse, status_code=201)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(ADMIN_ROLES + [UserRole.RECEPTIONIST]))
):
    return UserService(db).create(payload.model_dump())
