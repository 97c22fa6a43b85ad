from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Schema for displaying business settings
class SettingsOut(BaseModel):
    business_name: Optional[str] = None
    currency: Optional[str] = None
    default_margin: float = 30
    low_stock_alert: bool = True
    out_of_stock_alert: bool = True
    email_daily_report: bool = False
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Schema for updating business settings
class SettingsUpdate(BaseModel):
    business_name: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    default_margin: Optional[float] = None
    low_stock_alert: Optional[bool] = None
    out_of_stock_alert: Optional[bool] = None
    email_daily_report: Optional[bool] = None
