from pydantic import BaseModel, ConfigDict
import datetime as dt
from typing import List, Optional

class SessionCreate(BaseModel):
    trainer_id: Optional[int] = None
    member_id: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    duration: Optional[int] = 60
    session_type: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    consume_plan_session: bool = True

class RescheduleRequest(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[str] = None

class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    trainer_id: int
    trainer_name: Optional[str] = None
    member_id: int
    member_name: Optional[str] = None
    branch_id: Optional[int] = None
    date: dt.date
    time: str
    duration: int
    session_type: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: Optional[dt.datetime] = None

class CalendarSlot(BaseModel):
    hour: int
    label: str
    sessions: List[SessionResponse] = []

class CalendarDay(BaseModel):
    date: dt.date
    slots: List[CalendarSlot]

class WeekCalendar(BaseModel):
    week_start: dt.date
    week_end: dt.date
    days: List[CalendarDay]
