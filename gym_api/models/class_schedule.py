from sqlalchemy import Column, Integer, String, Date, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gym_api.database import Base
import enum

class ClassStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELED = "Canceled"

class ClassBookingStatus(str, enum.Enum):
    BOOKED = "Booked"
    CANCELED = "Canceled"

class ClassSchedule(Base):
    """A group class run by a trainer, with a fixed number of seats."""
    __tablename__ = "class_schedules"

    id = Column(Integer, primary_key=True, index=True)
    class_name = Column(String, nullable=False)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # canonical HH:MM, 24h
    schedule_days = Column(JSON, nullable=False, default=list)  # e.g. ["Mon", "Wed"]
    total_seats = Column(Integer, nullable=False, default=20)
    booked_seats = Column(Integer, nullable=False, default=0)
    status = Column(String, default=ClassStatus.SCHEDULED.value, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    trainer = relationship("User", foreign_keys=[trainer_id])
    bookings = relationship("GroupClassBooking", back_populates="class_schedule", cascade="all, delete-orphan")

    @property
    def trainer_name(self):
        return self.trainer.full_name if self.trainer else None

    @property
    def available_seats(self) -> int:
        return max((self.total_seats or 0) - (self.booked_seats or 0), 0)

class GroupClassBooking(Base):
    """A member's seat in a group class."""
    __tablename__ = "group_class_bookings"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("class_schedules.id"), nullable=False, index=True)
    status = Column(String, default=ClassBookingStatus.BOOKED.value, nullable=False)
    booked_at = Column(DateTime(timezone=True), server_default=func.now())

    member = relationship("User", foreign_keys=[member_id])
    class_schedule = relationship("ClassSchedule", back_populates="bookings")

    @property
    def member_name(self):
        return self.member.full_name if self.member else None
