from datetime import datetime
from typing import Dict, List, Optional, Literal

from pydantic import BaseModel, Field

from openstock.schemas.catalog import ORMBase

TransactionType = Literal["in", "out"]
BusinessLine = Literal["appliance", "cross_border", "forex", "crypto"]
TradeSide = Literal["buy", "sell"]
Direction = Literal["ng_to_gh", "gh_to_ng"]
TradeStatus = Literal["pending", "completed", "cancelled"]


# --- Ledger ---
class TransactionCreate(BaseModel):
    type: TransactionType
    business_line: BusinessLine
    description: str
    amount: float
    currency: str = "GHS"
    reference: Optional[str] = None
    notes: Optional[str] = None


class TransactionOut(ORMBase):
    id: str
    type: TransactionType
    business_line: BusinessLine
    description: str
    amount: float
    currency: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


# --- Cross-border ---
class CrossBorderCreate(BaseModel):
    direction: Direction
    description: str
    sent_amount: float = Field(ge=0)
    sent_currency: str
    received_amount: float = Field(ge=0)
    received_currency: str
    exchange_rate: float = Field(gt=0)
    fees: float = Field(default=0, ge=0)
    other_costs: float = Field(default=0, ge=0)
    # Converted by the caller; stored and mirrored as-is
    profit_ghs: float = 0
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    status: TradeStatus = "completed"
    notes: Optional[str] = None


class CrossBorderOut(ORMBase):
    id: str
    direction: Direction
    description: str
    sent_amount: float
    sent_currency: str
    received_amount: float
    received_currency: str
    exchange_rate: float
    fees: float = 0
    other_costs: float = 0
    profit_ghs: float
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


# --- Forex ---
class ForexCreate(BaseModel):
    type: TradeSide
    usd_amount: float = Field(gt=0)
    ghs_amount: float = Field(gt=0)
    exchange_rate: float = Field(gt=0)
    market_rate: Optional[float] = Field(None, gt=0)
    profit_ghs: float = 0
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    status: TradeStatus = "completed"
    notes: Optional[str] = None


class ForexOut(ORMBase):
    id: str
    type: TradeSide
    usd_amount: float
    ghs_amount: float
    exchange_rate: float
    market_rate: Optional[float] = None
    profit_ghs: float = 0
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


# --- Crypto ---
class CryptoCreate(BaseModel):
    type: TradeSide
    coin: str
    coin_amount: float = Field(gt=0)
    unit_price: float = Field(gt=0)
    # Defaults to coin_amount * unit_price
    total_ghs: Optional[float] = Field(None, ge=0)
    buy_price_per_unit: Optional[float] = Field(None, ge=0)
    # Derived for sells from buy_price_per_unit when omitted
    profit_ghs: Optional[float] = None
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    status: TradeStatus = "completed"
    notes: Optional[str] = None


class CryptoOut(ORMBase):
    id: str
    type: TradeSide
    coin: str
    coin_amount: float
    unit_price: float
    total_ghs: float
    buy_price_per_unit: Optional[float] = None
    profit_ghs: float = 0
    customer_name: Optional[str] = None
    reference: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


# Specialised transaction together with the ledger row that mirrors it
class MirroredResult(BaseModel):
    success: bool = True
    id: str
    profit_ghs: float
    ledger_transaction: TransactionOut


# --- Summary ---
class LineTotals(BaseModel):
    total_in: float
    total_out: float
    net: float


class Profits(BaseModel):
    cross_border: float
    forex: float
    crypto: float
    total: float


class Counts(BaseModel):
    cross_border: int
    forex: int
    crypto: int
    total: int


class Reconciliation(BaseModel):
    profit: float
    ledger_net: float
    difference: float
    reconciled: bool


class FinanceSummary(BaseModel):
    summary: Dict[str, LineTotals]
    profits: Profits
    recent_transactions: List[TransactionOut]
    counts: Counts
    reconciliation: Dict[str, Reconciliation]
