# schemas/stock.py
from datetime import datetime
from typing import List, Optional, Literal

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase

# Define allowed types for stock movements
StockMovementType = Literal["in", "out", "adjustment"]


# Schema for creating a new stock movement.
# For "adjustment" the quantity is the counted stock level, not a delta.
class StockMovementCreate(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    type: StockMovementType
    quantity: int
    unit_cost: Optional[float] = Field(default=None, ge=0)
    reference: Optional[str] = None
    reason: Optional[str] = None
    supplier_id: Optional[str] = None


# Schema for returning stock movement details
class StockMovementOut(ORMBase):
    id: str
    product_id: str
    variant_id: Optional[str] = None
    type: StockMovementType
    quantity: int
    stock_before: int
    stock_after: int
    unit_cost: Optional[float] = None
    reference: Optional[str] = None
    reason: Optional[str] = None
    supplier_id: Optional[str] = None
    created_at: datetime
    product_name: Optional[str] = None


# Paginated response for stock movement history
class StockMovementPage(BaseModel):
    items: List[StockMovementOut]
    total: int
    page: int
    page_size: int


# Schema for a single item within a bulk delivery
class DeliveryItem(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    unit_cost: Optional[float] = Field(default=None, ge=0)


# Schema for registering a bulk stock delivery
class DeliveryCreate(BaseModel):
    items: List[DeliveryItem]
    reason: Optional[str] = "Delivery"
    reference: Optional[str] = None
    supplier_id: Optional[str] = None  # Supplier for the entire delivery


class DeliveryResult(BaseModel):
    message: str
    movements: List[StockMovementOut]
