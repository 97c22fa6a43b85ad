from sqlalchemy import Column, String, DateTime, JSON

from openstock.database import InventoryBase, HRBase, FinanceBase
from openstock.utils.clock import utc_now


# Audit trail of user-facing actions; every store keeps its own copy of the table
class LogMixin:
    id = Column(String, primary_key=True)

    # Event timestamp and core action details
    ts = Column(DateTime(timezone=True), default=utc_now, index=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # JSON container for flexible context data
    meta = Column(JSON, nullable=True)


class InventoryLog(LogMixin, InventoryBase):
    __tablename__ = "logs"


class HRLog(LogMixin, HRBase):
    __tablename__ = "logs"


class FinanceLog(LogMixin, FinanceBase):
    __tablename__ = "logs"


LOG_MODELS = {
    "inventory": InventoryLog,
    "hr": HRLog,
    "finance": FinanceLog,
}
