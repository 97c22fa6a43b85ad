# schemas/catalog.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# --- Taxes ---
class TaxCreate(BaseModel):
    name: str
    rate: float = Field(ge=0, le=100)
    is_default: bool = False


class TaxUpdate(BaseModel):
    name: Optional[str] = None
    rate: Optional[float] = Field(None, ge=0, le=100)
    is_default: Optional[bool] = None


class TaxOut(ORMBase):
    id: str
    name: str
    rate: float
    is_default: bool = False


# --- Suppliers ---
class SupplierBase(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = "France"
    notes: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


# Schema for partial supplier updates
class SupplierUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class SupplierOut(SupplierBase, ORMBase):
    id: str
    is_active: bool = True
    created_at: Optional[datetime] = None


# --- Categories ---
class CategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    color: Optional[str] = "#6B7280"


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    color: Optional[str] = None


class CategoryOut(ORMBase):
    id: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None
    color: Optional[str] = None
    product_count: int = 0
    created_at: Optional[datetime] = None
