from datetime import datetime
from typing import List, Optional, Literal

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase
from openstock.schemas.employee import EmployeeOut

PeriodStatus = Literal["draft", "processing", "completed", "cancelled"]
RunStatus = Literal["pending", "approved", "paid", "cancelled"]


# --- Periods ---
class PayrollPeriodCreate(BaseModel):
    name: str
    start_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    end_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    notes: Optional[str] = None


class PayrollPeriodUpdate(BaseModel):
    name: Optional[str] = None
    start_date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    end_date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    status: Optional[PeriodStatus] = None
    processed_by: Optional[str] = None
    notes: Optional[str] = None


class PayrollPeriodOut(ORMBase):
    id: str
    name: str
    start_date: str
    end_date: str
    status: PeriodStatus
    processed_by: Optional[str] = None
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Runs ---
class PayComponentsIn(BaseModel):
    overtime_hours: float = Field(default=0, ge=0)
    overtime_pay: float = Field(default=0, ge=0)
    bonuses: float = Field(default=0, ge=0)
    bonus_notes: Optional[str] = None
    deductions: float = Field(default=0, ge=0)
    deduction_notes: Optional[str] = None
    tax_amount: float = Field(default=0, ge=0)
    social_security: float = Field(default=0, ge=0)
    health_insurance: float = Field(default=0, ge=0)
    other_deductions: float = Field(default=0, ge=0)
    other_deduction_notes: Optional[str] = None


# Manual run: every component is supplied, gross and net are recomputed server-side
class PayrollRunCreate(PayComponentsIn):
    payroll_period_id: str
    employee_id: str
    base_salary: float = Field(ge=0)
    worked_days: float = Field(default=0, ge=0)


# Later adjustment of a run (overtime, bonuses...) and/or a status change
class PayrollRunUpdate(BaseModel):
    base_salary: Optional[float] = Field(None, ge=0)
    worked_days: Optional[float] = Field(None, ge=0)
    overtime_hours: Optional[float] = Field(None, ge=0)
    overtime_pay: Optional[float] = Field(None, ge=0)
    bonuses: Optional[float] = Field(None, ge=0)
    bonus_notes: Optional[str] = None
    deductions: Optional[float] = Field(None, ge=0)
    deduction_notes: Optional[str] = None
    tax_amount: Optional[float] = Field(None, ge=0)
    social_security: Optional[float] = Field(None, ge=0)
    health_insurance: Optional[float] = Field(None, ge=0)
    other_deductions: Optional[float] = Field(None, ge=0)
    other_deduction_notes: Optional[str] = None
    status: Optional[RunStatus] = None


class PayrollRunOut(ORMBase):
    id: str
    payroll_period_id: str
    employee_id: str
    base_salary: float
    worked_days: float = 0
    overtime_hours: float = 0
    overtime_pay: float = 0
    bonuses: float = 0
    bonus_notes: Optional[str] = None
    deductions: float = 0
    deduction_notes: Optional[str] = None
    tax_amount: float = 0
    social_security: float = 0
    health_insurance: float = 0
    other_deductions: float = 0
    other_deduction_notes: Optional[str] = None
    gross_pay: float
    net_pay: float
    status: RunStatus
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PayrollRunWithEmployee(PayrollRunOut):
    employee: Optional[EmployeeOut] = None


class PayrollRunWithPeriod(PayrollRunOut):
    period: Optional[PayrollPeriodOut] = None


class PayrollPeriodDetail(PayrollPeriodOut):
    runs: List[PayrollRunWithEmployee] = []


# --- Generation ---
class PayrollGenerateRequest(BaseModel):
    payroll_period_id: str
    working_days: Optional[float] = Field(None, gt=0)


class GeneratedRun(BaseModel):
    id: str
    employee_id: str
    gross_pay: float
    net_pay: float


class PayrollGenerateResult(BaseModel):
    generated: int
    skipped: int
    runs: List[GeneratedRun]
