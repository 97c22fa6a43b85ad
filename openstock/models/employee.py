from sqlalchemy import Column, String, Float, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from openstock.database import HRBase
from openstock.utils.clock import utc_now


class Department(HRBase):
    __tablename__ = "departments"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String)
    # Plain reference to an employee; not enforced so departments can be created first
    manager_id = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    employees = relationship("Employee", back_populates="department")


# Represents a person on the payroll. Only status=active employees are paid by generation.
class Employee(HRBase):
    __tablename__ = "employees"

    id = Column(String, primary_key=True)
    # Opaque id of a user account in another system; never joined
    user_id = Column(String, nullable=True)
    employee_code = Column(String, unique=True, nullable=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String)
    date_of_birth = Column(String)
    gender = Column(String)
    address = Column(String)
    city = Column(String)
    postal_code = Column(String)
    country = Column(String, default="France")

    department_id = Column(String, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    position = Column(String)
    employment_type = Column(String, nullable=False, default="full_time")
    hire_date = Column(String, nullable=False)
    termination_date = Column(String)

    # Salary and bank details
    base_salary = Column(Float, default=0)
    salary_frequency = Column(String, nullable=False, default="monthly")
    bank_name = Column(String)
    bank_account = Column(String)
    tax_id = Column("employee_tax_id", String)
    social_security_number = Column(String)

    emergency_contact_name = Column(String)
    emergency_contact_phone = Column(String)

    status = Column(String, nullable=False, default="active", index=True)
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    department = relationship("Department", back_populates="employees")
    attendance_records = relationship(
        "Attendance", back_populates="employee", cascade="all, delete-orphan",
        order_by="Attendance.date.desc()",
    )
    leave_requests = relationship(
        "LeaveRequest", back_populates="employee", cascade="all, delete-orphan",
        order_by="LeaveRequest.created_at.desc()",
    )
    payroll_runs = relationship(
        "PayrollRun", back_populates="employee", cascade="all, delete-orphan",
        order_by="PayrollRun.created_at.desc()",
    )
