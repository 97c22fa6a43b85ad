from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase


class SupplierPriceCreate(BaseModel):
    supplier_id: str
    price: float = Field(ge=0)
    min_quantity: int = Field(default=1, ge=1)
    lead_time_days: Optional[int] = Field(default=None, ge=0)
    supplier_sku: Optional[str] = None
    purchase_url: Optional[str] = None
    is_preferred: bool = False


class SupplierPriceUpdate(BaseModel):
    price: Optional[float] = Field(None, ge=0)
    min_quantity: Optional[int] = Field(None, ge=1)
    lead_time_days: Optional[int] = Field(None, ge=0)
    supplier_sku: Optional[str] = None
    purchase_url: Optional[str] = None
    is_preferred: Optional[bool] = None
    # Who made the change, stored with the price history entry
    changed_by: Optional[str] = None


class SupplierPriceOut(ORMBase):
    id: str
    product_id: str
    supplier_id: str
    supplier_name: Optional[str] = None
    price: float
    min_quantity: int = 1
    lead_time_days: Optional[int] = None
    supplier_sku: Optional[str] = None
    purchase_url: Optional[str] = None
    is_preferred: bool = False


class PriceHistoryOut(ORMBase):
    id: str
    price: float
    created_at: datetime
    created_by: Optional[str] = None
    variant_id: Optional[str] = None
