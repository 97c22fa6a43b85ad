# openstock/routes/employees.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_hr_db
from openstock.models.employee import Department, Employee
from openstock.schemas.employee import EmployeeCreate, EmployeeOut, EmployeeStatus, EmployeeUpdate
from openstock.schemas.employee_detail import EmployeeDetail
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update, delete_or_409, get_or_404
from openstock.utils.ids import generate_id

router = APIRouter(prefix="/employees", tags=["Employees"])

RECENT_ATTENDANCE = 30
RECENT_PAYROLL_RUNS = 12


def _check_department(db: Session, department_id: Optional[str]) -> None:
    if department_id:
        get_or_404(db, Department, department_id, "Department")


def _check_code(db: Session, code: Optional[str], employee_id: Optional[str] = None) -> None:
    if not code:
        return
    query = db.query(Employee).filter(Employee.employee_code == code)
    if employee_id:
        query = query.filter(Employee.id != employee_id)
    if query.first():
        raise HTTPException(status_code=400, detail="Employee code already exists")


@router.get("/", response_model=List[EmployeeOut])
def list_employees(
    status: Optional[EmployeeStatus] = Query(None),
    department_id: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Search by name, email or code"),
    db: Session = Depends(get_hr_db),
):
    query = db.query(Employee)
    if status:
        query = query.filter(Employee.status == status)
    if department_id:
        query = query.filter(Employee.department_id == department_id)
    if q:
        like = f"%{q}%"
        query = query.filter(
            (Employee.first_name.ilike(like))
            | (Employee.last_name.ilike(like))
            | (Employee.email.ilike(like))
            | (Employee.employee_code.ilike(like))
        )
    return query.order_by(Employee.created_at.desc()).all()


@router.get("/{employee_id}", response_model=EmployeeDetail)
def get_employee(employee_id: str, db: Session = Depends(get_hr_db)):
    employee = get_or_404(db, Employee, employee_id, "Employee")
    detail = EmployeeDetail.model_validate(employee)
    detail.attendance_records = detail.attendance_records[:RECENT_ATTENDANCE]
    detail.payroll_runs = detail.payroll_runs[:RECENT_PAYROLL_RUNS]
    return detail


@router.post("/", response_model=EmployeeOut, status_code=201)
def create_employee(payload: EmployeeCreate, request: Request, db: Session = Depends(get_hr_db)):
    _check_department(db, payload.department_id)
    _check_code(db, payload.employee_code)

    employee = Employee(id=generate_id("emp"), status="active", **payload.model_dump())
    db.add(employee)
    db.commit()
    db.refresh(employee)

    write_log(db, action="EMPLOYEE_CREATE", resource="employees", ip=client_ip(request), meta={"id": employee.id})
    return employee


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(employee_id: str, payload: EmployeeUpdate, request: Request, db: Session = Depends(get_hr_db)):
    employee = get_or_404(db, Employee, employee_id, "Employee")
    _check_department(db, payload.department_id)
    _check_code(db, payload.employee_code, employee.id)

    changes = apply_update(employee, payload)
    db.commit()
    db.refresh(employee)

    write_log(
        db, action="EMPLOYEE_UPDATE", resource="employees", ip=client_ip(request),
        meta={"id": employee.id, "fields": sorted(changes)},
    )
    return employee


# Removes the employee together with their attendance, leave and payroll history
@router.delete("/{employee_id}")
def delete_employee(employee_id: str, request: Request, db: Session = Depends(get_hr_db)):
    employee = get_or_404(db, Employee, employee_id, "Employee")
    delete_or_409(db, employee, "Employee")
    write_log(db, action="EMPLOYEE_DELETE", resource="employees", ip=client_ip(request), meta={"id": employee_id})
    return {"success": True}
