from sqlalchemy import Column, String, Integer, Float, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from openstock.database import InventoryBase
from openstock.utils.clock import utc_now


# Price a supplier charges for a product
class SupplierPrice(InventoryBase):
    __tablename__ = "supplier_prices"

    id = Column(String, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    supplier_id = Column(String, ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False)
    price = Column(Float, nullable=False)
    min_quantity = Column(Integer, default=1)
    lead_time_days = Column(Integer, nullable=True)
    supplier_sku = Column(String, nullable=True)
    purchase_url = Column(String, nullable=True)
    # At most one preferred supplier price per product
    is_preferred = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    product = relationship("Product", back_populates="supplier_prices")
    supplier = relationship("Supplier")
    history = relationship(
        "SupplierPriceHistory", back_populates="supplier_price", cascade="all, delete-orphan",
        order_by="SupplierPriceHistory.created_at.desc()",
    )

    @property
    def supplier_name(self):
        return self.supplier.name if self.supplier else None


# Every price a supplier price has ever had, newest first
class SupplierPriceHistory(InventoryBase):
    __tablename__ = "supplier_price_history"

    id = Column(String, primary_key=True)
    supplier_price_id = Column(String, ForeignKey("supplier_prices.id", ondelete="CASCADE"), nullable=False, index=True)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    created_by = Column(String, nullable=True)

    supplier_price = relationship("SupplierPrice", back_populates="history")


# Selling price changes of a product (or one of its variants)
class SellingPriceHistory(InventoryBase):
    __tablename__ = "selling_price_history"

    id = Column(String, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    variant_id = Column(String, ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=True)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    created_by = Column(String, nullable=True)

    product = relationship("Product", back_populates="price_history")
