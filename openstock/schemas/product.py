# schemas/product.py
from datetime import datetime
from typing import Optional, List, Any

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase


# Shared base attributes for product entities
class ProductBase(BaseModel):
    name: str
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    tax_id: Optional[str] = None
    cost_price: float = Field(default=0, ge=0)
    stock_min: int = Field(default=0, ge=0)
    stock_max: Optional[int] = Field(default=None, ge=0)
    unit: Optional[str] = "unit"
    is_active: bool = True
    options: Optional[Any] = None


# Schema for creating a new product; either price or margin may be given
class ProductCreate(ProductBase):
    selling_price: Optional[float] = Field(default=None, ge=0)
    margin_percent: Optional[float] = None
    # Opening stock, recorded as an "in" movement
    stock_quantity: int = Field(default=0, ge=0)


# Schema for partial product updates. Stock is changed through /stock-movements only.
class ProductUpdate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    tax_id: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)
    margin_percent: Optional[float] = None
    stock_min: Optional[int] = Field(None, ge=0)
    stock_max: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = None
    is_active: Optional[bool] = None
    options: Optional[Any] = None


# Full product representation including ID
class ProductOut(ProductBase, ORMBase):
    id: str
    selling_price: float
    margin_percent: float
    stock_quantity: int
    is_low_stock: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Paginated response for product listings
class ProductListPage(BaseModel):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int


# --- Variants ---
class VariantCreate(BaseModel):
    name: str
    sku: Optional[str] = None
    barcode: Optional[str] = None
    cost_price: float = Field(default=0, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    margin_percent: Optional[float] = None
    tax_id: Optional[str] = None
    stock_quantity: int = Field(default=0, ge=0)
    stock_min: int = Field(default=0, ge=0)
    stock_max: Optional[int] = Field(default=None, ge=0)
    supplier_id: Optional[str] = None


class VariantUpdate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    margin_percent: Optional[float] = None
    tax_id: Optional[str] = None
    stock_min: Optional[int] = Field(None, ge=0)
    stock_max: Optional[int] = Field(None, ge=0)
    supplier_id: Optional[str] = None


class VariantOut(ORMBase):
    id: str
    product_id: str
    name: str
    sku: Optional[str] = None
    barcode: Optional[str] = None
    cost_price: float
    margin_percent: float
    price: float
    tax_id: Optional[str] = None
    stock_quantity: int
    stock_min: int = 0
    stock_max: Optional[int] = None
    supplier_id: Optional[str] = None
