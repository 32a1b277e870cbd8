from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

class AdjustmentIn(BaseModel):
    # Left loose on purpose: label/amount rules are enforced by the calculator
    label: Optional[str] = None
    amount: Optional[Decimal] = None

class Adjustment(BaseModel):
    label: str
    amount: Decimal

class SalaryInputs(BaseModel):
    hours_worked: Optional[Decimal] = None
    fixed_salary: Optional[Decimal] = None
    bonuses: List[AdjustmentIn] = []
    deductions: List[AdjustmentIn] = []

class SalaryCalculateRequest(SalaryInputs):
    staff_id: Optional[int] = None

class SalaryCreate(SalaryInputs):
    staff_id: Optional[int] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None

class SalaryUpdate(BaseModel):
    staff_id: Optional[int] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    hours_worked: Optional[Decimal] = None
    fixed_salary: Optional[Decimal] = None
    bonuses: Optional[List[AdjustmentIn]] = None
    deductions: Optional[List[AdjustmentIn]] = None

class SalaryBreakdownResponse(BaseModel):
    hours_worked: Optional[Decimal] = None
    hourly_total: Decimal
    fixed_salary: Decimal
    commission_base: Decimal
    commission_rate_percent: Decimal
    commission_total: Decimal
    bonus_total: Decimal
    deduction_total: Decimal
    net_pay: Decimal
    bonuses: List[Adjustment] = []
    deductions: List[Adjustment] = []
    is_negative: bool

class SalaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    staff_id: int
    staff_name: Optional[str] = None
    staff_role: Optional[str] = None
    period_start: date
    period_end: date
    hours_worked: Optional[Decimal] = None
    hourly_total: Decimal
    fixed_salary: Decimal
    commission_total: Decimal
    bonuses: List[Adjustment] = []
    deductions: List[Adjustment] = []
    net_pay: Decimal
    status: str
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
