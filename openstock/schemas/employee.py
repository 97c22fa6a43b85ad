from datetime import datetime
from typing import Optional, Literal

from pydantic import BaseModel, EmailStr, Field

from openstock.schemas.catalog import ORMBase

EmployeeStatus = Literal["active", "on_leave", "suspended", "terminated"]
EmploymentType = Literal["full_time", "part_time", "contract", "intern"]
SalaryFrequency = Literal["monthly", "biweekly", "weekly", "hourly"]
Gender = Literal["male", "female", "other"]


# --- Departments ---
class DepartmentCreate(BaseModel):
    name: str
    description: Optional[str] = None
    manager_id: Optional[str] = None


class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: Optional[bool] = None


class DepartmentOut(ORMBase):
    id: str
    name: str
    description: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


# --- Employees ---
class EmployeeBase(BaseModel):
    employee_code: Optional[str] = None
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = "France"
    department_id: Optional[str] = None
    position: Optional[str] = None
    employment_type: EmploymentType = "full_time"
    hire_date: str
    base_salary: float = Field(default=0, ge=0)
    salary_frequency: SalaryFrequency = "monthly"
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    tax_id: Optional[str] = None
    social_security_number: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    notes: Optional[str] = None


# New employees always start as active
class EmployeeCreate(EmployeeBase):
    user_id: Optional[str] = None


# Schema for partial employee updates
class EmployeeUpdate(BaseModel):
    employee_code: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[Gender] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    department_id: Optional[str] = None
    position: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    hire_date: Optional[str] = None
    termination_date: Optional[str] = None
    base_salary: Optional[float] = Field(None, ge=0)
    salary_frequency: Optional[SalaryFrequency] = None
    bank_name: Optional[str] = None
    bank_account: Optional[str] = None
    tax_id: Optional[str] = None
    social_security_number: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    status: Optional[EmployeeStatus] = None
    notes: Optional[str] = None


class EmployeeOut(EmployeeBase, ORMBase):
    id: str
    user_id: Optional[str] = None
    email: str
    termination_date: Optional[str] = None
    status: EmployeeStatus
    department: Optional[DepartmentOut] = None
    created_at: Optional[datetime] = None

