from sqlalchemy import Column, String, Float, DateTime

from openstock.database import FinanceBase
from openstock.utils.clock import utc_now


# Shared ledger of ins and outs across every business line, amounts in cedis
class Transaction(FinanceBase):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    type = Column(String, nullable=False)  # in | out
    business_line = Column(String, nullable=False, index=True)  # appliance | cross_border | forex | crypto
    description = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String, default="GHS")
    reference = Column(String)  # invoice/receipt number
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


# Nigeria <-> Ghana transfers; profit is computed by the caller
class CrossBorderTransaction(FinanceBase):
    __tablename__ = "cross_border_transactions"

    id = Column(String, primary_key=True)
    direction = Column(String, nullable=False)  # ng_to_gh | gh_to_ng
    description = Column(String, nullable=False)

    sent_amount = Column(Float, nullable=False)
    sent_currency = Column(String, nullable=False)
    received_amount = Column(Float, nullable=False)
    received_currency = Column(String, nullable=False)
    exchange_rate = Column(Float, nullable=False)

    fees = Column(Float, default=0)
    other_costs = Column(Float, default=0)
    profit_ghs = Column(Float, nullable=False)

    customer_name = Column(String)
    reference = Column(String)
    status = Column(String, default="completed")
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


# USD <-> cedis exchange
class ForexTransaction(FinanceBase):
    __tablename__ = "forex_transactions"

    id = Column(String, primary_key=True)
    type = Column(String, nullable=False)  # buy | sell (USD)
    usd_amount = Column(Float, nullable=False)
    ghs_amount = Column(Float, nullable=False)
    exchange_rate = Column(Float, nullable=False)
    # Market rate at the time, to see whether the deal beat the market
    market_rate = Column(Float, nullable=True)
    profit_ghs = Column(Float, default=0)

    customer_name = Column(String)
    reference = Column(String)
    status = Column(String, default="completed")
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


class CryptoTransaction(FinanceBase):
    __tablename__ = "crypto_transactions"

    id = Column(String, primary_key=True)
    type = Column(String, nullable=False)  # buy | sell
    coin = Column(String, nullable=False)  # BTC, ETH, USDT...
    coin_amount = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)  # GHS per coin
    total_ghs = Column(Float, nullable=False)
    # For sells: what the coins were originally bought at
    buy_price_per_unit = Column(Float, nullable=True)
    profit_ghs = Column(Float, default=0)

    customer_name = Column(String)
    reference = Column(String)
    status = Column(String, default="completed")
    notes = Column(String)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
