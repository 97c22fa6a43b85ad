# openstock/models/stock.py
from sqlalchemy import Column, String, Integer, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from openstock.database import InventoryBase
from openstock.utils.clock import utc_now


class StockMovement(InventoryBase):
    __tablename__ = "stock_movements"

    id = Column(String, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    # Set when the movement applies to a variant's counter instead of the product's
    variant_id = Column(String, ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=True)

    # Movement classification: in, out, adjustment
    type = Column(String, nullable=False, index=True)

    # Signed delta applied; stock_after = stock_before + quantity
    quantity = Column(Integer, nullable=False)
    stock_before = Column(Integer, nullable=False)
    stock_after = Column(Integer, nullable=False)

    unit_cost = Column(Float, nullable=True)
    reference = Column(String, nullable=True)
    reason = Column(String, nullable=True)

    # Supplier associated with the movement
    supplier_id = Column(String, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)

    product = relationship("Product", back_populates="movements")
    variant = relationship("ProductVariant", back_populates="movements")
    supplier = relationship("Supplier")

    @property
    def product_name(self):
        return self.product.name if self.product else None
