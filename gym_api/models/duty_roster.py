from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gym_api.database import Base
import enum

class ShiftType(str, enum.Enum):
    STRAIGHT = "Straight Shift"
    BREAK = "Break Shift"

class ShiftStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    APPROVED = "Approved"
    COMPLETED = "Completed"

class DutyShift(Base):
    __tablename__ = "duty_shifts"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    shift_type = Column(String, default=ShiftType.STRAIGHT.value, nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    breaks = Column(JSON, nullable=False, default=list)  # [{"start": "HH:MM", "end": "HH:MM"}]
    status = Column(String, default=ShiftStatus.SCHEDULED.value, nullable=False)
    notes = Column(String, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    staff = relationship("Staff", back_populates="shifts")
    approver = relationship("User", foreign_keys=[approved_by])

    @property
    def staff_name(self):
        return self.staff.name if self.staff else None

    @property
    def staff_role(self):
        return self.staff.role if self.staff else None

    @property
    def approved_by_name(self):
        return self.approver.full_name if self.approver else None
