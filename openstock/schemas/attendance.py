from datetime import datetime
from typing import Optional, Literal

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase

AttendanceStatus = Literal["present", "absent", "late", "half_day", "holiday", "weekend"]

HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"
ISO_DATE = r"^\d{4}-\d{2}-\d{2}$"


# Manual attendance entry (corrections, absences, holidays...)
class AttendanceCreate(BaseModel):
    employee_id: str
    date: str = Field(pattern=ISO_DATE)
    clock_in: Optional[str] = Field(None, pattern=HHMM)
    clock_out: Optional[str] = Field(None, pattern=HHMM)
    break_minutes: int = Field(default=0, ge=0)
    overtime_minutes: Optional[int] = Field(default=None, ge=0)
    status: AttendanceStatus = "present"
    notes: Optional[str] = None


class AttendanceUpdate(BaseModel):
    clock_in: Optional[str] = Field(None, pattern=HHMM)
    clock_out: Optional[str] = Field(None, pattern=HHMM)
    break_minutes: Optional[int] = Field(None, ge=0)
    overtime_minutes: Optional[int] = Field(None, ge=0)
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class ClockRequest(BaseModel):
    employee_id: str
    notes: Optional[str] = None


class ClockInResult(BaseModel):
    id: str
    date: str
    clock_in: str


class ClockOutResult(BaseModel):
    success: bool = True
    id: str
    date: str
    clock_out: str
    overtime_minutes: int


class AttendanceOut(ORMBase):
    id: str
    employee_id: str
    date: str
    clock_in: Optional[str] = None
    clock_out: Optional[str] = None
    break_minutes: int = 0
    overtime_minutes: int = 0
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class AttendanceWithEmployee(AttendanceOut):
    employee_name: Optional[str] = None
