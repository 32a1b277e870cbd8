from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gym_api.database import Base
import enum

class BranchStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"

class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    status = Column(String, default=BranchStatus.ACTIVE.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    users = relationship("User", back_populates="branch")
    staff = relationship("Staff", back_populates="branch")
    plans = relationship("Plan", back_populates="branch")
