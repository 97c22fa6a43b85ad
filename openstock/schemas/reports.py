# schemas/reports.py
from typing import List, Optional

from pydantic import BaseModel

from openstock.schemas.stock import StockMovementOut


# Schemas for low stock alerting
class LowStockItem(BaseModel):
    product_id: str
    name: str
    sku: Optional[str] = None
    stock_quantity: int
    stock_min: int
    # stock_quantity - stock_min; the report is sorted on it ascending
    gap: int


class LowStockPage(BaseModel):
    items: List[LowStockItem]
    total: int
    page: int
    page_size: int


# Dashboard summary of the inventory store
class DashboardStats(BaseModel):
    total_products: int
    total_suppliers: int
    low_stock_count: int
    total_stock_value: float
    low_stock_products: List[LowStockItem]
    recent_movements: List[StockMovementOut]
    moved_out_quantity: int
    moved_out_value: float
    moved_out_count: int
