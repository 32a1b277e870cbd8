from pydantic import BaseModel, ConfigDict, EmailStr
from datetime import datetime
from typing import Optional
from gym_api.models.user import UserRole

class BranchCreate(BaseModel):
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None

class BranchResponse(BranchCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str

class UserCreate(BaseModel):
    first_name: str
    last_name: str = ""
    email: EmailStr
    phone: Optional[str] = None
    role: UserRole = UserRole.MEMBER
    branch_id: Optional[int] = None

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    branch_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None
