from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime

from openstock.database import InventoryBase
from openstock.utils.clock import utc_now


# Business-wide preferences; the table holds a single row with id=1
class BusinessSettings(InventoryBase):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    business_name = Column(String, default="OpenStock Inc.")
    currency = Column(String, default="EUR")
    default_margin = Column(Float, default=30)
    low_stock_alert = Column(Boolean, default=True)
    out_of_stock_alert = Column(Boolean, default=True)
    email_daily_report = Column(Boolean, default=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
