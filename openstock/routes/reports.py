# openstock/routes/reports.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db
from openstock.models.product import Product
from openstock.schemas.reports import LowStockItem, LowStockPage
from openstock.utils.stock import low_stock_gap

router = APIRouter(prefix="/reports", tags=["Reports"])


def low_stock_query(db: Session):
    """Active products at or below their minimum, most urgent first."""
    return (
        db.query(Product)
        .filter(Product.stock_quantity <= Product.stock_min, Product.is_active.is_(True))
        .order_by((Product.stock_quantity - Product.stock_min).asc(), Product.name.asc())
    )


def to_low_stock_item(p: Product) -> LowStockItem:
    return LowStockItem(
        product_id=p.id,
        name=p.name,
        sku=p.sku,
        stock_quantity=p.stock_quantity or 0,
        stock_min=p.stock_min or 0,
        gap=low_stock_gap(p.stock_quantity, p.stock_min),
    )


# -----------------------------
# Low stock
# -----------------------------
@router.get("/low-stock", response_model=LowStockPage)
def report_low_stock(
    q: Optional[str] = Query(None, description="Search by name or SKU"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_inventory_db),
):
    query = low_stock_query(db)
    if q:
        like = f"%{q}%"
        query = query.filter((Product.name.ilike(like)) | (Product.sku.ilike(like)))

    total = query.count()
    rows = query.offset((page - 1) * page_size).limit(page_size).all()

    items: List[LowStockItem] = [to_low_stock_item(p) for p in rows]
    return {"items": items, "total": total, "page": page, "page_size": page_size}
