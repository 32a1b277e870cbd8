"""
User model. Members and staff logins share this table; `role` selects the
dashboard and the permissions a caller has.
"""
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from gym_api.database import Base


class UserRole(str, enum.Enum):
    """
    Roles, from most to least privileged:
    - SUPERADMIN: all branches
    - ADMIN: one branch (staff, plans, salaries, rosters)
    - MANAGER: approves rosters and bookings for a branch
    - PERSONAL_TRAINER / GENERAL_TRAINER: own sessions and classes
    - RECEPTIONIST / HOUSEKEEPING: front desk and facility staff
    - MEMBER: self-service
    """
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MANAGER = "manager"
    PERSONAL_TRAINER = "personaltrainer"
    GENERAL_TRAINER = "generaltrainer"
    RECEPTIONIST = "receptionist"
    HOUSEKEEPING = "housekeeping"
    MEMBER = "member"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(Enum(UserRole), default=UserRole.MEMBER, nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    branch = relationship("Branch", back_populates="users")
    staff_profile = relationship("Staff", back_populates="user", uselist=False, cascade="all, delete-orphan")
    member_plans = relationship("MemberPlan", back_populates="member", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
