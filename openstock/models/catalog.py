from sqlalchemy import Column, String, Float, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from openstock.database import InventoryBase
from openstock.utils.clock import utc_now


# Tax rate that can be attached to products and variants
class Tax(InventoryBase):
    __tablename__ = "taxes"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    rate = Column(Float, nullable=False)
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


# Supplier contact card
class Supplier(InventoryBase):
    __tablename__ = "suppliers"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    address = Column(String)
    city = Column(String)
    postal_code = Column(String)
    country = Column(String, default="France")
    notes = Column(String)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


# Product category; categories may be nested through parent_id
class Category(InventoryBase):
    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String)
    parent_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    color = Column(String, default="#6B7280")
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    parent = relationship("Category", remote_side=[id])

    @property
    def parent_name(self):
        return self.parent.name if self.parent else None
