# openstock/routes/suppliers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db
from openstock.models.catalog import Supplier
from openstock.schemas.catalog import SupplierCreate, SupplierOut, SupplierUpdate
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import apply_update, delete_or_409, get_or_404
from openstock.utils.ids import generate_id

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])


@router.get("/", response_model=List[SupplierOut])
def list_suppliers(
    q: Optional[str] = Query(None, description="Search by name or email"),
    active_only: bool = Query(False),
    db: Session = Depends(get_inventory_db),
):
    query = db.query(Supplier)
    if q:
        like = f"%{q}%"
        query = query.filter((Supplier.name.ilike(like)) | (Supplier.email.ilike(like)))
    if active_only:
        query = query.filter(Supplier.is_active.is_(True))
    return query.order_by(Supplier.name.asc()).all()


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(supplier_id: str, db: Session = Depends(get_inventory_db)):
    return get_or_404(db, Supplier, supplier_id, "Supplier")


@router.post("/", response_model=SupplierOut, status_code=201)
def create_supplier(payload: SupplierCreate, request: Request, db: Session = Depends(get_inventory_db)):
    supplier = Supplier(id=generate_id("sup"), **payload.model_dump())
    db.add(supplier)
    db.commit()
    db.refresh(supplier)

    write_log(db, action="SUPPLIER_CREATE", resource="suppliers", ip=client_ip(request), meta={"id": supplier.id})
    return supplier


@router.put("/{supplier_id}", response_model=SupplierOut)
def update_supplier(
    supplier_id: str, payload: SupplierUpdate, request: Request, db: Session = Depends(get_inventory_db)
):
    supplier = get_or_404(db, Supplier, supplier_id, "Supplier")
    changes = apply_update(supplier, payload)
    db.commit()
    db.refresh(supplier)

    write_log(
        db, action="SUPPLIER_UPDATE", resource="suppliers", ip=client_ip(request),
        meta={"id": supplier.id, "fields": sorted(changes)},
    )
    return supplier


@router.delete("/{supplier_id}")
def delete_supplier(supplier_id: str, request: Request, db: Session = Depends(get_inventory_db)):
    supplier = get_or_404(db, Supplier, supplier_id, "Supplier")
    delete_or_409(db, supplier, "Supplier")
    write_log(db, action="SUPPLIER_DELETE", resource="suppliers", ip=client_ip(request), meta={"id": supplier_id})
    return {"success": True}
