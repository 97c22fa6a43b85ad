# openstock/routes/payroll.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from openstock.database import get_hr_db, transaction
from openstock.models.employee import Employee
from openstock.models.payroll import PayrollPeriod, PayrollRun
from openstock.utils.audit import client_ip, write_log
from openstock.utils.clock import utc_now
from openstock.utils.crud import check_nulls, get_or_404
from openstock.utils.ids import generate_id
from openstock.utils.payroll import (
    PayComponents,
    PayrollError,
    check_period_transition,
    components_from,
    statutory_components,
)
import openstock.schemas.payroll as payroll_schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payroll", tags=["Payroll"])

COMPONENT_FIELDS = tuple(PayComponents.__dataclass_fields__)


def _transition(period: PayrollPeriod, new_status: str) -> None:
    try:
        check_period_transition(period.status, new_status)
    except PayrollError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _stamp_totals(run: PayrollRun, components: PayComponents) -> None:
    run.gross_pay = components.gross_pay
    run.net_pay = components.net_pay


# =========================
# PERIODS
# =========================
@router.get("/periods", response_model=List[payroll_schemas.PayrollPeriodDetail])
def list_periods(db: Session = Depends(get_hr_db)):
    return db.query(PayrollPeriod).order_by(PayrollPeriod.start_date.desc()).all()


@router.get("/periods/{period_id}", response_model=payroll_schemas.PayrollPeriodDetail)
def get_period(period_id: str, db: Session = Depends(get_hr_db)):
    return get_or_404(db, PayrollPeriod, period_id, "Payroll period")


@router.post("/periods", response_model=payroll_schemas.PayrollPeriodOut, status_code=201)
def create_period(payload: payroll_schemas.PayrollPeriodCreate, request: Request, db: Session = Depends(get_hr_db)):
    if payload.end_date < payload.start_date:
        raise HTTPException(status_code=400, detail="Period cannot end before it starts")

    period = PayrollPeriod(id=generate_id("pp"), status="draft", **payload.model_dump())
    db.add(period)
    db.commit()
    db.refresh(period)

    write_log(db, action="PAYROLL_PERIOD_CREATE", resource="payroll", ip=client_ip(request), meta={"id": period.id})
    return period


@router.put("/periods/{period_id}", response_model=payroll_schemas.PayrollPeriodOut)
def update_period(
    period_id: str,
    payload: payroll_schemas.PayrollPeriodUpdate,
    request: Request,
    db: Session = Depends(get_hr_db),
):
    period = get_or_404(db, PayrollPeriod, period_id, "Payroll period")
    changes = payload.model_dump(exclude_unset=True)
    check_nulls(period, changes)

    new_status = changes.pop("status", None)
    if new_status is not None:
        _transition(period, new_status)
        if new_status == "completed" and period.status != "completed":
            period.processed_at = utc_now()
        period.status = new_status

    for key, value in changes.items():
        setattr(period, key, value)
    if period.end_date < period.start_date:
        raise HTTPException(status_code=400, detail="Period cannot end before it starts")

    db.commit()
    db.refresh(period)

    write_log(
        db, action="PAYROLL_PERIOD_UPDATE", resource="payroll", ip=client_ip(request),
        meta={"id": period.id, "status": period.status},
    )
    return period


# =========================
# GENERATION
# =========================
# One pending run per active employee; employees already paid in the period are skipped
@router.post("/generate", response_model=payroll_schemas.PayrollGenerateResult)
def generate_payroll(
    payload: payroll_schemas.PayrollGenerateRequest,
    request: Request,
    db: Session = Depends(get_hr_db),
):
    period = get_or_404(db, PayrollPeriod, payload.payroll_period_id, "Payroll period")
    _transition(period, "processing")

    working_days = payload.working_days or request.app.state.settings.DEFAULT_WORKING_DAYS
    already_paid = {
        employee_id
        for (employee_id,) in db.query(PayrollRun.employee_id).filter(PayrollRun.payroll_period_id == period.id)
    }
    employees = db.query(Employee).filter(Employee.status == "active").order_by(Employee.created_at.asc()).all()

    runs = []
    skipped = 0
    with transaction(db):
        for emp in employees:
            if emp.id in already_paid:
                skipped += 1
                continue
            components = statutory_components(emp.base_salary or 0)
            run = PayrollRun(
                id=generate_id("pr"),
                payroll_period_id=period.id,
                employee_id=emp.id,
                worked_days=working_days,
                status="pending",
                **{name: getattr(components, name) for name in COMPONENT_FIELDS},
            )
            _stamp_totals(run, components)
            db.add(run)
            runs.append(run)
        period.status = "processing"

    logger.info("Generated %d payroll runs for period %s (%d skipped)", len(runs), period.id, skipped)
    write_log(
        db, action="PAYROLL_GENERATE", resource="payroll", ip=client_ip(request),
        meta={"period_id": payload.payroll_period_id, "generated": len(runs), "skipped": skipped},
    )
    return {
        "generated": len(runs),
        "skipped": skipped,
        "runs": [
            {"id": r.id, "employee_id": r.employee_id, "gross_pay": r.gross_pay, "net_pay": r.net_pay}
            for r in runs
        ],
    }


# =========================
# RUNS
# =========================
# Manual run: gross and net are recomputed from the supplied components
@router.post("/runs", response_model=payroll_schemas.PayrollRunOut, status_code=201)
def create_run(payload: payroll_schemas.PayrollRunCreate, request: Request, db: Session = Depends(get_hr_db)):
    period = get_or_404(db, PayrollPeriod, payload.payroll_period_id, "Payroll period")
    get_or_404(db, Employee, payload.employee_id, "Employee")
    if period.status in ("completed", "cancelled"):
        raise HTTPException(status_code=400, detail=f"Payroll period is {period.status}")

    exists = (
        db.query(PayrollRun)
        .filter(PayrollRun.payroll_period_id == period.id, PayrollRun.employee_id == payload.employee_id)
        .first()
    )
    if exists:
        raise HTTPException(status_code=400, detail="Employee already has a payroll run in this period")

    run = PayrollRun(id=generate_id("pr"), status="pending", **payload.model_dump())
    _stamp_totals(run, components_from(payload.model_dump()))
    db.add(run)
    db.commit()
    db.refresh(run)

    write_log(
        db, action="PAYROLL_RUN_CREATE", resource="payroll", ip=client_ip(request),
        meta={"id": run.id, "gross_pay": run.gross_pay, "net_pay": run.net_pay},
    )
    return run


@router.get("/runs/{run_id}", response_model=payroll_schemas.PayrollRunWithEmployee)
def get_run(run_id: str, db: Session = Depends(get_hr_db)):
    return get_or_404(db, PayrollRun, run_id, "Payroll run")


# Adjust components (overtime, bonuses...) and/or move the run along its lifecycle
@router.put("/runs/{run_id}", response_model=payroll_schemas.PayrollRunOut)
def update_run(
    run_id: str,
    payload: payroll_schemas.PayrollRunUpdate,
    request: Request,
    db: Session = Depends(get_hr_db),
):
    run = get_or_404(db, PayrollRun, run_id, "Payroll run")
    changes = payload.model_dump(exclude_unset=True)

    new_status = changes.pop("status", None)
    for key, value in changes.items():
        # A cleared amount counts as zero
        if value is None and not key.endswith("_notes"):
            value = 0
        setattr(run, key, value)
    if any(key in COMPONENT_FIELDS for key in changes):
        _stamp_totals(run, components_from({name: getattr(run, name) for name in COMPONENT_FIELDS}))

    if new_status is not None:
        if new_status == "paid" and run.status != "paid":
            run.paid_at = utc_now()
        run.status = new_status

    db.commit()
    db.refresh(run)

    write_log(
        db, action="PAYROLL_RUN_UPDATE", resource="payroll", ip=client_ip(request),
        meta={"id": run.id, "status": run.status, "fields": sorted(changes)},
    )
    return run
