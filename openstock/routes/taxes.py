# openstock/routes/taxes.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db
from openstock.models.catalog import Tax
from openstock.schemas.catalog import TaxCreate, TaxOut, TaxUpdate
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update, delete_or_409, get_or_404
from openstock.utils.ids import generate_id

router = APIRouter(prefix="/taxes", tags=["Taxes"])


def _clear_default(db: Session, keep_id: str) -> None:
    # Only one tax may be the default at a time
    db.query(Tax).filter(Tax.id != keep_id, Tax.is_default.is_(True)).update(
        {Tax.is_default: False}, synchronize_session=False
    )


@router.get("/", response_model=List[TaxOut])
def list_taxes(db: Session = Depends(get_inventory_db)):
    return db.query(Tax).order_by(Tax.rate.asc()).all()


@router.post("/", response_model=TaxOut, status_code=201)
def create_tax(payload: TaxCreate, request: Request, db: Session = Depends(get_inventory_db)):
    tax = Tax(id=generate_id("tax"), **payload.model_dump())
    db.add(tax)
    if tax.is_default:
        _clear_default(db, tax.id)
    db.commit()
    db.refresh(tax)

    write_log(db, action="TAX_CREATE", resource="taxes", ip=client_ip(request), meta={"id": tax.id})
    return tax


@router.put("/{tax_id}", response_model=TaxOut)
def update_tax(tax_id: str, payload: TaxUpdate, request: Request, db: Session = Depends(get_inventory_db)):
    tax = get_or_404(db, Tax, tax_id, "Tax")
    apply_update(tax, payload)
    if tax.is_default:
        _clear_default(db, tax.id)
    db.commit()
    db.refresh(tax)

    write_log(db, action="TAX_UPDATE", resource="taxes", ip=client_ip(request), meta={"id": tax.id})
    return tax


@router.delete("/{tax_id}")
def delete_tax(tax_id: str, request: Request, db: Session = Depends(get_inventory_db)):
    tax = get_or_404(db, Tax, tax_id, "Tax")
    delete_or_409(db, tax, "Tax")
    write_log(db, action="TAX_DELETE", resource="taxes", ip=client_ip(request), meta={"id": tax_id})
    return {"success": True}
