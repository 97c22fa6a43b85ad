# openstock/routes/leave.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_hr_db
from openstock.models.employee import Employee
from openstock.models.leave import LeaveRequest, LeaveType
from openstock.utils.audit import client_ip, write_log
from openstock.utils.clock import utc_now
from openstock.utils.crud import apply_update, delete_or_409, get_or_404
from openstock.utils.ids import generate_id
import openstock.schemas.leave as leave_schemas

router = APIRouter(tags=["Leave"])


def _inclusive_days(start: str, end: str) -> int:
    try:
        days = (date.fromisoformat(end) - date.fromisoformat(start)).days + 1
    except ValueError:
        raise HTTPException(status_code=400, detail="Bad date format (expected YYYY-MM-DD)")
    if days < 1:
        raise HTTPException(status_code=400, detail="Leave cannot end before it starts")
    return days


# =========================
# LEAVE TYPES
# =========================
@router.get("/leave-types", response_model=List[leave_schemas.LeaveTypeOut])
def list_leave_types(active_only: bool = Query(False), db: Session = Depends(get_hr_db)):
    query = db.query(LeaveType)
    if active_only:
        query = query.filter(LeaveType.is_active.is_(True))
    return query.order_by(LeaveType.name.asc()).all()


@router.post("/leave-types", response_model=leave_schemas.LeaveTypeOut, status_code=201)
def create_leave_type(payload: leave_schemas.LeaveTypeCreate, request: Request, db: Session = Depends(get_hr_db)):
    leave_type = LeaveType(id=generate_id("lvt"), **payload.model_dump())
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)

    write_log(db, action="LEAVE_TYPE_CREATE", resource="leave", ip=client_ip(request), meta={"id": leave_type.id})
    return leave_type


@router.put("/leave-types/{leave_type_id}", response_model=leave_schemas.LeaveTypeOut)
def update_leave_type(
    leave_type_id: str, payload: leave_schemas.LeaveTypeUpdate, request: Request, db: Session = Depends(get_hr_db)
):
    leave_type = get_or_404(db, LeaveType, leave_type_id, "Leave type")
    apply_update(leave_type, payload)
    db.commit()
    db.refresh(leave_type)

    write_log(db, action="LEAVE_TYPE_UPDATE", resource="leave", ip=client_ip(request), meta={"id": leave_type.id})
    return leave_type


# Blocked while leave requests still point at the type
@router.delete("/leave-types/{leave_type_id}")
def delete_leave_type(leave_type_id: str, request: Request, db: Session = Depends(get_hr_db)):
    leave_type = get_or_404(db, LeaveType, leave_type_id, "Leave type")
    delete_or_409(db, leave_type, "Leave type")
    write_log(db, action="LEAVE_TYPE_DELETE", resource="leave", ip=client_ip(request), meta={"id": leave_type_id})
    return {"success": True}


# =========================
# LEAVE REQUESTS
# =========================
@router.get("/leave-requests", response_model=List[leave_schemas.LeaveRequestOut])
def list_leave_requests(
    employee_id: Optional[str] = Query(None),
    status: Optional[leave_schemas.LeaveStatus] = Query(None),
    db: Session = Depends(get_hr_db),
):
    query = db.query(LeaveRequest)
    if employee_id:
        query = query.filter(LeaveRequest.employee_id == employee_id)
    if status:
        query = query.filter(LeaveRequest.status == status)
    return query.order_by(LeaveRequest.created_at.desc()).all()


@router.post("/leave-requests", response_model=leave_schemas.LeaveRequestOut, status_code=201)
def create_leave_request(
    payload: leave_schemas.LeaveRequestCreate, request: Request, db: Session = Depends(get_hr_db)
):
    get_or_404(db, Employee, payload.employee_id, "Employee")
    get_or_404(db, LeaveType, payload.leave_type_id, "Leave type")

    days = _inclusive_days(payload.start_date, payload.end_date)
    leave = LeaveRequest(
        id=generate_id("lv"),
        status="pending",
        **payload.model_dump(exclude={"total_days"}),
        total_days=payload.total_days if payload.total_days is not None else days,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    write_log(
        db, action="LEAVE_REQUEST_CREATE", resource="leave", ip=client_ip(request),
        meta={"id": leave.id, "employee_id": leave.employee_id, "days": leave.total_days},
    )
    return leave


# Approving or rejecting stamps who decided and when
@router.put("/leave-requests/{request_id}", response_model=leave_schemas.LeaveRequestOut)
def update_leave_request(
    request_id: str,
    payload: leave_schemas.LeaveRequestStatusUpdate,
    request: Request,
    db: Session = Depends(get_hr_db),
):
    leave = get_or_404(db, LeaveRequest, request_id, "Leave request")
    leave.status = payload.status
    if payload.status in ("approved", "rejected"):
        leave.approved_by = payload.approved_by
        leave.approved_at = utc_now()
    db.commit()
    db.refresh(leave)

    write_log(
        db, action="LEAVE_REQUEST_STATUS", resource="leave", ip=client_ip(request),
        meta={"id": leave.id, "status": leave.status},
    )
    return leave
