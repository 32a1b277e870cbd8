from pydantic import BaseModel, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional

class PlanCreate(BaseModel):
    name: str
    branch_id: Optional[int] = None
    plan_type: str = "group"
    sessions: int = 0
    validity_days: int = 30
    price: Decimal = Decimal("0")

class PlanUpdate(BaseModel):
    name: Optional[str] = None
    plan_type: Optional[str] = None
    sessions: Optional[int] = None
    validity_days: Optional[int] = None
    price: Optional[Decimal] = None

class PlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    branch_id: Optional[int] = None
    plan_type: str
    sessions: int
    validity_days: int
    price: Decimal
    status: str

class BookingCreate(BaseModel):
    member_id: Optional[int] = None
    plan_id: Optional[int] = None
    note: Optional[str] = None

class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    member_name: Optional[str] = None
    plan_id: int
    plan_name: Optional[str] = None
    status: str
    note: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    requested_at: Optional[datetime] = None
