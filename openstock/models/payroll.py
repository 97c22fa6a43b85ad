from sqlalchemy import Column, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from openstock.database import HRBase
from openstock.utils.clock import utc_now


# Lifecycle: draft -> processing (on generation) -> completed | cancelled
class PayrollPeriod(HRBase):
    __tablename__ = "payroll_periods"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    start_date = Column(String, nullable=False)
    end_date = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")
    processed_by = Column(String, nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    runs = relationship("PayrollRun", back_populates="period", cascade="all, delete-orphan")


# Compensation of one employee within one period.
# gross_pay = base_salary + overtime_pay + bonuses
# net_pay = gross_pay - (deductions + tax_amount + social_security + health_insurance + other_deductions)
class PayrollRun(HRBase):
    __tablename__ = "payroll_runs"

    id = Column(String, primary_key=True)
    payroll_period_id = Column(String, ForeignKey("payroll_periods.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(String, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)

    base_salary = Column(Float, nullable=False)
    worked_days = Column(Float, default=0)
    overtime_hours = Column(Float, default=0)
    overtime_pay = Column(Float, default=0)
    bonuses = Column(Float, default=0)
    bonus_notes = Column(String)

    deductions = Column(Float, default=0)
    deduction_notes = Column(String)
    tax_amount = Column(Float, default=0)
    social_security = Column(Float, default=0)
    health_insurance = Column(Float, default=0)
    other_deductions = Column(Float, default=0)
    other_deduction_notes = Column(String)

    gross_pay = Column(Float, nullable=False)
    net_pay = Column(Float, nullable=False)

    # pending, approved, paid, cancelled
    status = Column(String, nullable=False, default="pending")
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    period = relationship("PayrollPeriod", back_populates="runs")
    employee = relationship("Employee", back_populates="payroll_runs")
