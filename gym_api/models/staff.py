from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gym_api.database import Base
from gym_api.models.types import Money
import enum

class SalaryType(str, enum.Enum):
    FIXED = "Fixed"
    HOURLY = "Hourly"
    COMMISSION = "Commission"

class StaffStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"

class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)
    role = Column(String, nullable=False)  # job title shown on the roster, e.g. "Personal Trainer"

    # Compensation profile. Rates that do not apply to salary_type may stay populated.
    salary_type = Column(String, default=SalaryType.FIXED.value, nullable=False)
    fixed_salary = Column(Money, nullable=True)
    hourly_rate = Column(Money, nullable=True)
    commission_rate_percent = Column(Numeric(5, 2), nullable=True)

    join_date = Column(Date, nullable=True)
    status = Column(String, default=StaffStatus.ACTIVE.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="staff_profile")
    branch = relationship("Branch", back_populates="staff")
    salaries = relationship("Salary", back_populates="staff", cascade="all, delete-orphan")
    shifts = relationship("DutyShift", back_populates="staff", cascade="all, delete-orphan")

    @property
    def name(self) -> str:
        return self.user.full_name if self.user else f"Staff #{self.id}"
