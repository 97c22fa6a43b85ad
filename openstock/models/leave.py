from sqlalchemy import Column, String, Integer, Float, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from openstock.database import HRBase
from openstock.utils.clock import utc_now


class LeaveType(HRBase):
    __tablename__ = "leave_types"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String)
    default_days = Column(Integer, default=0)
    is_paid = Column(Boolean, default=True)
    color = Column(String, default="#6B7280")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class LeaveRequest(HRBase):
    __tablename__ = "leave_requests"

    id = Column(String, primary_key=True)
    employee_id = Column(String, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type_id = Column(String, ForeignKey("leave_types.id"), nullable=False)
    start_date = Column(String, nullable=False)
    end_date = Column(String, nullable=False)
    total_days = Column(Float, nullable=False)
    reason = Column(String)
    # pending, approved, rejected, cancelled
    status = Column(String, nullable=False, default="pending")
    approved_by = Column(String, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    employee = relationship("Employee", back_populates="leave_requests")
    leave_type = relationship("LeaveType")
