# openstock/routes/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from openstock.database import get_inventory_db
from openstock.models.catalog import Supplier
from openstock.models.product import Product
from openstock.models.stock import StockMovement
from openstock.routes.reports import low_stock_query, to_low_stock_item
from openstock.schemas.reports import DashboardStats
from openstock.schemas.stock import StockMovementOut

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

TOP_LOW_STOCK = 5
RECENT_MOVEMENTS = 5


# === Dashboard summary ===
@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_inventory_db)):
    total_products = db.query(Product).filter(Product.is_active.is_(True)).count()
    total_suppliers = db.query(Supplier).filter(Supplier.is_active.is_(True)).count()

    low_stock = low_stock_query(db)
    low_stock_count = low_stock.count()
    low_stock_products = [to_low_stock_item(p) for p in low_stock.limit(TOP_LOW_STOCK).all()]

    # Value of what is on the shelves at cost
    stock_value = (
        db.query(func.coalesce(func.sum(Product.cost_price * Product.stock_quantity), 0.0))
        .filter(Product.is_active.is_(True))
        .scalar()
    )

    # Outbound movements store negative deltas
    moved_qty, moved_value, moved_count = (
        db.query(
            func.coalesce(func.sum(func.abs(StockMovement.quantity)), 0),
            func.coalesce(func.sum(func.abs(StockMovement.quantity) * func.coalesce(StockMovement.unit_cost, 0.0)), 0.0),
            func.count(StockMovement.id),
        )
        .filter(StockMovement.type == "out")
        .one()
    )

    recent_movements = (
        db.query(StockMovement)
        .order_by(StockMovement.created_at.desc())
        .limit(RECENT_MOVEMENTS)
        .all()
    )

    return DashboardStats(
        total_products=total_products,
        total_suppliers=total_suppliers,
        low_stock_count=low_stock_count,
        total_stock_value=round(float(stock_value or 0), 2),
        low_stock_products=low_stock_products,
        recent_movements=[StockMovementOut.model_validate(m) for m in recent_movements],
        moved_out_quantity=int(moved_qty or 0),
        moved_out_value=round(float(moved_value or 0), 2),
        moved_out_count=moved_count,
    )
