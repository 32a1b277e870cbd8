from pydantic import BaseModel, ConfigDict
import datetime as dt
from typing import List, Optional

class BreakWindow(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None

class ShiftCreate(BaseModel):
    staff_id: Optional[int] = None
    shift_type: Optional[str] = "Straight Shift"
    date: Optional[dt.date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    breaks: List[BreakWindow] = []
    notes: Optional[str] = None

class ShiftUpdate(BaseModel):
    staff_id: Optional[int] = None
    shift_type: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    breaks: Optional[List[BreakWindow]] = None
    notes: Optional[str] = None

class ShiftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    staff_id: int
    staff_name: Optional[str] = None
    staff_role: Optional[str] = None
    shift_type: str
    date: dt.date
    start_time: str
    end_time: str
    breaks: List[BreakWindow] = []
    status: str
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_by_name: Optional[str] = None
    approved_at: Optional[dt.datetime] = None
