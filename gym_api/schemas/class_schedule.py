from pydantic import BaseModel, ConfigDict
import datetime as dt
from typing import List, Optional

class ClassCreate(BaseModel):
    class_name: Optional[str] = None
    trainer_id: Optional[int] = None
    branch_id: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    schedule_days: List[str] = []
    total_seats: Optional[int] = None

class ClassUpdate(BaseModel):
    class_name: Optional[str] = None
    trainer_id: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    schedule_days: Optional[List[str]] = None
    total_seats: Optional[int] = None
    status: Optional[str] = None

class ClassResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    class_name: str
    trainer_id: int
    trainer_name: Optional[str] = None
    branch_id: Optional[int] = None
    date: dt.date
    time: str
    schedule_days: List[str] = []
    total_seats: int
    booked_seats: int
    available_seats: int
    status: str

class ClassBookingCreate(BaseModel):
    member_id: Optional[int] = None

class ClassBookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    class_id: int
    member_id: int
    member_name: Optional[str] = None
    status: str
    booked_at: Optional[dt.datetime] = None
