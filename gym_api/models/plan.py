from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gym_api.database import Base
from gym_api.models.types import Money
import enum

class PlanType(str, enum.Enum):
    GROUP = "group"
    PERSONAL = "personal"

class PlanStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"

class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)
    name = Column(String, nullable=False)
    plan_type = Column(String, default=PlanType.GROUP.value, nullable=False)
    sessions = Column(Integer, nullable=False, default=0)
    validity_days = Column(Integer, nullable=False, default=30)
    price = Column(Money, nullable=False, default=0)
    status = Column(String, default=PlanStatus.ACTIVE.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    branch = relationship("Branch", back_populates="plans")
    bookings = relationship("PlanBooking", back_populates="plan", cascade="all, delete-orphan")

class PlanBooking(Base):
    """A member's request to purchase a plan, pending admin review."""
    __tablename__ = "plan_bookings"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id"), nullable=False, index=True)
    status = Column(String, default=BookingStatus.PENDING.value, nullable=False)
    note = Column(String, nullable=True)
    decided_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    decided_at = Column(DateTime(timezone=True), nullable=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())

    member = relationship("User", foreign_keys=[member_id])
    plan = relationship("Plan", back_populates="bookings")

    @property
    def member_name(self):
        return self.member.full_name if self.member else None

    @property
    def plan_name(self):
        return self.plan.name if self.plan else None

class MemberPlan(Base):
    """An active subscription, created when a booking is approved."""
    __tablename__ = "member_plans"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("plan_bookings.id"), nullable=True)
    start_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=False)
    remaining_sessions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    member = relationship("User", back_populates="member_plans")
    plan = relationship("Plan")
