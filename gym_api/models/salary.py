from sqlalchemy import Column, Integer, Date, DateTime, Numeric, String, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gym_api.database import Base
from gym_api.models.types import Money
import enum

class SalaryStatus(str, enum.Enum):
    GENERATED = "Generated"
    APPROVED = "Approved"
    PAID = "Paid"

class Salary(Base):
    __tablename__ = "salaries"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)

    # Inputs
    hours_worked = Column(Numeric(7, 2), nullable=True)
    fixed_salary = Column(Money, nullable=False, default=0)
    bonuses = Column(JSON, nullable=False, default=list)  # [{"label": str, "amount": "50.00"}]
    deductions = Column(JSON, nullable=False, default=list)

    # Derived, always rewritten together from the inputs above
    hourly_total = Column(Money, nullable=False, default=0)
    commission_total = Column(Money, nullable=False, default=0)
    net_pay = Column(Money, nullable=False, default=0)

    status = Column(String, default=SalaryStatus.GENERATED.value, nullable=False)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("Staff", back_populates="salaries")

    @property
    def staff_name(self):
        return self.staff.name if self.staff else None

    @property
    def staff_role(self):
        return self.staff.role if self.staff else None
