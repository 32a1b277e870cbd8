from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from decimal import Decimal
from typing import Optional

class StaffBase(BaseModel):
    role: Optional[str] = None
    branch_id: Optional[int] = None
    salary_type: Optional[str] = None
    fixed_salary: Optional[Decimal] = Field(default=None, ge=0)
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)
    commission_rate_percent: Optional[Decimal] = Field(default=None, ge=0, le=100)
    join_date: Optional[date] = None
    status: Optional[str] = None

class StaffCreate(StaffBase):
    user_id: Optional[int] = None

class StaffUpdate(StaffBase):
    pass

class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    role: str
    branch_id: Optional[int] = None
    salary_type: str
    fixed_salary: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    commission_rate_percent: Optional[Decimal] = None
    join_date: Optional[date] = None
    status: str
