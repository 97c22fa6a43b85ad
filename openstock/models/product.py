# openstock/models/product.py
from sqlalchemy import Column, String, Integer, Float, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship

from openstock.database import InventoryBase
from openstock.utils.clock import utc_now
from openstock.utils.stock import is_low_stock as _is_low_stock


# Model Product
# Catalogue entry with prices, margin and the running stock total.
# stock_quantity is only ever changed together with a StockMovement row.
class Product(InventoryBase):
    __tablename__ = "products"

    id = Column(String, primary_key=True)
    sku = Column(String, unique=True, nullable=True, index=True)
    barcode = Column(String)
    name = Column(String, nullable=False, index=True)
    description = Column(String)

    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(String, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    tax_id = Column(String, ForeignKey("taxes.id", ondelete="SET NULL"), nullable=True)

    # Prices; selling_price and margin_percent are kept consistent by utils.pricing
    cost_price = Column(Float, default=0)
    selling_price = Column(Float, default=0)
    margin_percent = Column(Float, default=30)

    # Stock data
    stock_quantity = Column(Integer, default=0, nullable=False)
    stock_min = Column(Integer, default=0)
    stock_max = Column(Integer, nullable=True)
    unit = Column(String, default="unit")

    is_active = Column(Boolean, default=True)
    # Free-form option definitions (sizes, colours...) used by variants
    options = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    category = relationship("Category")
    supplier = relationship("Supplier")
    tax = relationship("Tax")
    variants = relationship("ProductVariant", back_populates="product", cascade="all, delete-orphan")
    movements = relationship("StockMovement", back_populates="product", cascade="all, delete-orphan")
    supplier_prices = relationship("SupplierPrice", back_populates="product", cascade="all, delete-orphan")
    price_history = relationship("SellingPriceHistory", back_populates="product", cascade="all, delete-orphan")

    @property
    def is_low_stock(self):
        return _is_low_stock(self.stock_quantity, self.stock_min, self.is_active)


# A sellable variation of a product with its own price and stock counter
class ProductVariant(InventoryBase):
    __tablename__ = "product_variants"

    id = Column(String, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    sku = Column(String)
    barcode = Column(String)
    cost_price = Column(Float, default=0)
    margin_percent = Column(Float, default=30)
    price = Column(Float, default=0)
    tax_id = Column(String, ForeignKey("taxes.id", ondelete="SET NULL"), nullable=True)
    stock_quantity = Column(Integer, default=0, nullable=False)
    stock_min = Column(Integer, default=0)
    stock_max = Column(Integer, nullable=True)
    supplier_id = Column(String, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    product = relationship("Product", back_populates="variants")
    movements = relationship("StockMovement", back_populates="variant", cascade="all, delete-orphan")
