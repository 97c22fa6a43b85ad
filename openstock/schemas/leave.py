from datetime import datetime
from typing import Optional, Literal

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase

LeaveStatus = Literal["pending", "approved", "rejected", "cancelled"]


# --- Leave types ---
class LeaveTypeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    default_days: int = Field(default=0, ge=0)
    is_paid: bool = True
    color: Optional[str] = "#6B7280"


class LeaveTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    default_days: Optional[int] = Field(None, ge=0)
    is_paid: Optional[bool] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None


class LeaveTypeOut(ORMBase):
    id: str
    name: str
    description: Optional[str] = None
    default_days: int = 0
    is_paid: bool = True
    color: Optional[str] = None
    is_active: bool = True


# --- Leave requests ---
class LeaveRequestCreate(BaseModel):
    employee_id: str
    leave_type_id: str
    start_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    end_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    # Defaults to the inclusive number of calendar days between the two dates
    total_days: Optional[float] = Field(None, gt=0)
    reason: Optional[str] = None


class LeaveRequestStatusUpdate(BaseModel):
    status: LeaveStatus
    approved_by: Optional[str] = None


class LeaveRequestOut(ORMBase):
    id: str
    employee_id: str
    leave_type_id: str
    leave_type: Optional[LeaveTypeOut] = None
    start_date: str
    end_date: str
    total_days: float
    reason: Optional[str] = None
    status: LeaveStatus
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
