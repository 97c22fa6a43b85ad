# openstock/routes/attendance.py
import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_hr_db
from openstock.models.attendance import Attendance
from openstock.models.employee import Employee
from openstock.utils.attendance import AttendanceError, overtime_minutes
from openstock.utils.audit import client_ip, write_log
from openstock.utils.clock import current_date_and_time
from openstock.utils.crud import apply_update, get_or_404
from openstock.utils.ids import generate_id
import openstock.schemas.attendance as attendance_schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["Attendance"])


def _standard_minutes(request: Request) -> int:
    return request.app.state.settings.STANDARD_WORKDAY_MINUTES


def _overtime(record: Attendance, standard_minutes: int) -> int:
    try:
        return overtime_minutes(record.clock_in, record.clock_out, record.break_minutes or 0, standard_minutes)
    except AttendanceError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _today_record(db: Session, employee_id: str, today: str) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .filter(Attendance.employee_id == employee_id, Attendance.date == today)
        .first()
    )


@router.get("/", response_model=List[attendance_schemas.AttendanceWithEmployee])
def list_attendance(
    employee_id: Optional[str] = Query(None),
    date: Optional[str] = Query(None, description="Exact day, YYYY-MM-DD"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    db: Session = Depends(get_hr_db),
):
    query = db.query(Attendance)
    if employee_id:
        query = query.filter(Attendance.employee_id == employee_id)
    if date:
        query = query.filter(Attendance.date == date)
    if date_from:
        query = query.filter(Attendance.date >= date_from)
    if date_to:
        query = query.filter(Attendance.date <= date_to)
    return query.order_by(Attendance.date.desc()).all()


# Manual entry, e.g. an absence or a forgotten clock-in
@router.post("/", response_model=attendance_schemas.AttendanceOut, status_code=201)
def create_attendance(
    payload: attendance_schemas.AttendanceCreate,
    request: Request,
    db: Session = Depends(get_hr_db),
):
    get_or_404(db, Employee, payload.employee_id, "Employee")
    if _today_record(db, payload.employee_id, payload.date):
        raise HTTPException(status_code=400, detail="Attendance already recorded for this day")

    record = Attendance(id=generate_id("att"), **payload.model_dump(exclude={"overtime_minutes"}))
    if payload.overtime_minutes is not None:
        record.overtime_minutes = payload.overtime_minutes
    elif record.clock_in and record.clock_out:
        record.overtime_minutes = _overtime(record, _standard_minutes(request))
    else:
        record.overtime_minutes = 0

    db.add(record)
    db.commit()
    db.refresh(record)

    write_log(
        db, action="ATTENDANCE_CREATE", resource="attendance", ip=client_ip(request),
        meta={"id": record.id, "employee_id": record.employee_id, "date": record.date},
    )
    return record


@router.put("/{attendance_id}", response_model=attendance_schemas.AttendanceOut)
def update_attendance(
    attendance_id: str,
    payload: attendance_schemas.AttendanceUpdate,
    request: Request,
    db: Session = Depends(get_hr_db),
):
    record = get_or_404(db, Attendance, attendance_id, "Attendance record")
    changes = apply_update(record, payload)

    # Explicit overtime wins; otherwise it follows the times
    if "overtime_minutes" not in changes and record.clock_in and record.clock_out:
        record.overtime_minutes = _overtime(record, _standard_minutes(request))

    db.commit()
    db.refresh(record)

    write_log(
        db, action="ATTENDANCE_UPDATE", resource="attendance", ip=client_ip(request),
        meta={"id": record.id, "fields": sorted(changes)},
    )
    return record


@router.post("/clock-in", response_model=attendance_schemas.ClockInResult)
def clock_in(
    payload: attendance_schemas.ClockRequest,
    request: Request,
    now: Tuple[str, str] = Depends(current_date_and_time),
    db: Session = Depends(get_hr_db),
):
    today, time_now = now
    get_or_404(db, Employee, payload.employee_id, "Employee")

    if _today_record(db, payload.employee_id, today):
        raise HTTPException(status_code=400, detail="Already clocked in today")

    record = Attendance(
        id=generate_id("att"),
        employee_id=payload.employee_id,
        date=today,
        clock_in=time_now,
        status="present",
        notes=payload.notes,
    )
    db.add(record)
    db.commit()

    write_log(
        db, action="CLOCK_IN", resource="attendance", ip=client_ip(request),
        meta={"employee_id": payload.employee_id, "date": today, "time": time_now},
    )
    return {"id": record.id, "date": today, "clock_in": time_now}


@router.post("/clock-out", response_model=attendance_schemas.ClockOutResult)
def clock_out(
    payload: attendance_schemas.ClockRequest,
    request: Request,
    now: Tuple[str, str] = Depends(current_date_and_time),
    db: Session = Depends(get_hr_db),
):
    today, time_now = now
    record = _today_record(db, payload.employee_id, today)
    if not record:
        raise HTTPException(status_code=400, detail="No clock-in record found for today")
    if record.clock_out:
        raise HTTPException(status_code=400, detail="Already clocked out today")

    record.clock_out = time_now
    record.overtime_minutes = _overtime(record, _standard_minutes(request)) if record.clock_in else 0
    if payload.notes:
        record.notes = payload.notes
    db.commit()

    logger.debug("Clock-out %s %s overtime=%s", payload.employee_id, today, record.overtime_minutes)
    write_log(
        db, action="CLOCK_OUT", resource="attendance", ip=client_ip(request),
        meta={"employee_id": payload.employee_id, "date": today, "overtime_minutes": record.overtime_minutes},
    )
    return {
        "id": record.id,
        "date": today,
        "clock_out": time_now,
        "overtime_minutes": record.overtime_minutes,
    }
