"""
Compensation Calculator

Derives a staff member's pay for one period from their compensation profile,
the hours they worked, a fixed amount for the period, and ad-hoc bonuses and
deductions.

    hourly_total     = hours_worked * hourly_rate
    commission_base  = hourly_total + fixed_salary
    commission_total = commission_base * commission_rate_percent / 100
    net_pay          = hourly_total + fixed_salary + commission_total
                       + sum(bonuses) - sum(deductions)

Every term defaults to zero when its inputs are absent. Amounts are Decimal
and each derived money term is rounded to cents before it is summed, so the
net-pay identity holds exactly on the stored values. Negative net pay is
returned as is.

The functions here are pure: identical inputs always give identical output.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from gym_api.core.exceptions import ValidationError
from gym_api.models.types import to_money

ZERO = Decimal("0.00")
HOURS_SCALE = Decimal("0.01")

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class Adjustment:
    """A labelled bonus or deduction line."""
    label: str
    amount: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "amount": str(self.amount)}


def make_adjustment(label: Any, amount: Any) -> Adjustment:
    """
    Validate one bonus/deduction entry.

    Raises:
        ValidationError: label is empty or amount is not a positive number.
    """
    clean_label = label.strip() if isinstance(label, str) else ""
    if not clean_label:
        raise ValidationError("Adjustment label is required", details={"label": label})

    try:
        value = to_money(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount for '{clean_label}'", details={"amount": str(amount)})

    if not value.is_finite() or value <= 0:
        raise ValidationError(
            f"Amount for '{clean_label}' must be greater than zero",
            details={"amount": str(amount)}
        )
    return Adjustment(label=clean_label, amount=value)


def parse_adjustments(items: Optional[Iterable[Any]]) -> Tuple[Adjustment, ...]:
    """Accepts Adjustment objects, dicts or pydantic models with label/amount."""
    parsed: List[Adjustment] = []
    for item in items or ():
        if isinstance(item, Adjustment):
            parsed.append(item)
        elif isinstance(item, dict):
            parsed.append(make_adjustment(item.get("label"), item.get("amount")))
        else:
            parsed.append(make_adjustment(getattr(item, "label", None), getattr(item, "amount", None)))
    return tuple(parsed)


@dataclass(frozen=True)
class CompensationProfile:
    salary_type: str = "Fixed"
    fixed_salary: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    commission_rate_percent: Optional[Decimal] = None

    @classmethod
    def from_staff(cls, staff) -> "CompensationProfile":
        return cls(
            salary_type=staff.salary_type,
            fixed_salary=staff.fixed_salary,
            hourly_rate=staff.hourly_rate,
            commission_rate_percent=staff.commission_rate_percent,
        )


@dataclass(frozen=True)
class SalaryBreakdown:
    hours_worked: Optional[Decimal]
    hourly_total: Decimal
    fixed_salary: Decimal
    commission_base: Decimal
    commission_rate_percent: Decimal
    commission_total: Decimal
    bonus_total: Decimal
    deduction_total: Decimal
    net_pay: Decimal
    bonuses: Tuple[Adjustment, ...] = field(default_factory=tuple)
    deductions: Tuple[Adjustment, ...] = field(default_factory=tuple)

    @property
    def is_negative(self) -> bool:
        return self.net_pay < 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hours_worked": self.hours_worked,
            "hourly_total": self.hourly_total,
            "fixed_salary": self.fixed_salary,
            "commission_base": self.commission_base,
            "commission_rate_percent": self.commission_rate_percent,
            "commission_total": self.commission_total,
            "bonus_total": self.bonus_total,
            "deduction_total": self.deduction_total,
            "net_pay": self.net_pay,
            "bonuses": [b.to_dict() for b in self.bonuses],
            "deductions": [d.to_dict() for d in self.deductions],
            "is_negative": self.is_negative,
        }


def _optional_decimal(value: Optional[Number], name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        result = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a number", details={name: str(value)})
    if not result.is_finite():
        raise ValidationError(f"'{name}' must be a finite number", details={name: str(value)})
    if result < 0:
        raise ValidationError(f"'{name}' cannot be negative", details={name: str(value)})
    return result


def calculate_compensation(
    profile: CompensationProfile,
    hours_worked: Optional[Number] = None,
    fixed_salary: Optional[Number] = None,
    bonuses: Optional[Iterable[Any]] = None,
    deductions: Optional[Iterable[Any]] = None,
) -> SalaryBreakdown:
    """
    Compute the pay breakdown for one period.

    Args:
        profile: The staff member's compensation profile (rates).
        hours_worked: Hours in the period, rounded half-up to 0.01; contributes only if the profile has an hourly rate.
        fixed_salary: Fixed amount for this period, independent of the profile's base salary.
        bonuses: Bonus lines (label + positive amount).
        deductions: Deduction lines (label + positive amount).

    Returns:
        SalaryBreakdown with every derived term.

    Raises:
        ValidationError: negative or non-numeric inputs, malformed adjustment lines.
    """
    hours = _optional_decimal(hours_worked, "hours_worked")
    if hours is not None:
        # Same scale as the stored column, so recomputing from a saved record is stable
        hours = hours.quantize(HOURS_SCALE, rounding=ROUND_HALF_UP)
    fixed = _optional_decimal(fixed_salary, "fixed_salary")
    rate = _optional_decimal(profile.hourly_rate, "hourly_rate")
    commission_rate = _optional_decimal(profile.commission_rate_percent, "commission_rate_percent") or Decimal("0")
    if commission_rate > 100:
        raise ValidationError("'commission_rate_percent' must be between 0 and 100")

    bonus_lines = parse_adjustments(bonuses)
    deduction_lines = parse_adjustments(deductions)

    # 1. Hourly component
    hourly_total = to_money(hours * rate) if hours and rate else ZERO

    # 2-3. Commission on top of hourly + fixed
    fixed_total = to_money(fixed) if fixed is not None else ZERO
    commission_base = hourly_total + fixed_total
    if commission_rate:
        commission_total = to_money(commission_base * commission_rate / Decimal(100))
    else:
        commission_total = ZERO

    # 4. Adjustments
    bonus_total = sum((b.amount for b in bonus_lines), ZERO)
    deduction_total = sum((d.amount for d in deduction_lines), ZERO)

    # 5. Net
    net_pay = hourly_total + fixed_total + commission_total + bonus_total - deduction_total

    return SalaryBreakdown(
        hours_worked=hours,
        hourly_total=hourly_total,
        fixed_salary=fixed_total,
        commission_base=commission_base,
        commission_rate_percent=commission_rate,
        commission_total=commission_total,
        bonus_total=bonus_total,
        deduction_total=deduction_total,
        net_pay=net_pay,
        bonuses=bonus_lines,
        deductions=deduction_lines,
    )
