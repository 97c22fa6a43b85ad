from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from openstock.database import HRBase
from openstock.utils.clock import utc_now


# One clock-in/clock-out record per employee per calendar day
class Attendance(HRBase):
    __tablename__ = "attendance"
    __table_args__ = (UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),)

    id = Column(String, primary_key=True)
    employee_id = Column(String, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String, nullable=False, index=True)  # YYYY-MM-DD
    clock_in = Column(String, nullable=True)  # HH:MM
    clock_out = Column(String, nullable=True)  # HH:MM
    break_minutes = Column(Integer, default=0)
    overtime_minutes = Column(Integer, default=0)
    # present, absent, late, half_day, holiday, weekend
    status = Column(String, nullable=False, default="present")
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    employee = relationship("Employee", back_populates="attendance_records")

    @property
    def employee_name(self):
        if self.employee is None:
            return None
        return f"{self.employee.first_name} {self.employee.last_name}"
