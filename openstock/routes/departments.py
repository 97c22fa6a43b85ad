# openstock/routes/departments.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from openstock.database import get_hr_db
from openstock.models.employee import Department
from openstock.schemas.employee import DepartmentCreate, DepartmentOut, DepartmentUpdate
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update, delete_or_409, get_or_404
from openstock.utils.ids import generate_id

router = APIRouter(prefix="/departments", tags=["Departments"])


@router.get("/", response_model=List[DepartmentOut])
def list_departments(db: Session = Depends(get_hr_db)):
    return db.query(Department).order_by(Department.name.asc()).all()


@router.post("/", response_model=DepartmentOut, status_code=201)
def create_department(payload: DepartmentCreate, request: Request, db: Session = Depends(get_hr_db)):
    department = Department(id=generate_id("dept"), **payload.model_dump())
    db.add(department)
    db.commit()
    db.refresh(department)

    write_log(db, action="DEPARTMENT_CREATE", resource="departments", ip=client_ip(request), meta={"id": department.id})
    return department


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: str, payload: DepartmentUpdate, request: Request, db: Session = Depends(get_hr_db)
):
    department = get_or_404(db, Department, department_id, "Department")
    apply_update(department, payload)
    db.commit()
    db.refresh(department)

    write_log(db, action="DEPARTMENT_UPDATE", resource="departments", ip=client_ip(request), meta={"id": department.id})
    return department


# Employees of a deleted department keep working, just without a department
@router.delete("/{department_id}")
def delete_department(department_id: str, request: Request, db: Session = Depends(get_hr_db)):
    department = get_or_404(db, Department, department_id, "Department")
    delete_or_409(db, department, "Department")
    write_log(db, action="DEPARTMENT_DELETE", resource="departments", ip=client_ip(request), meta={"id": department_id})
    return {"success": True}
