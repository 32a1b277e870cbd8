# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    types, branch, user, staff, plan, training_session,
    duty_roster, salary, audit_log, class_schedule
)

# Explicit class exports for cleaner imports
from .branch import Branch
from .user import User, UserRole
from .staff import Staff
from .plan import Plan, PlanBooking, MemberPlan
from .training_session import TrainingSession
from .class_schedule import ClassSchedule, GroupClassBooking
from .duty_roster import DutyShift
from .salary import Salary
from .audit_log import AuditLog

__all__ = [
    "Branch",
    "User",
    "UserRole",
    "Staff",
    "Plan",
    "PlanBooking",
    "MemberPlan",
    "TrainingSession",
    "ClassSchedule",
    "GroupClassBooking",
    "DutyShift",
    "Salary",
    "AuditLog",
]
