# openstock/utils/ledger.py
"""Ledger bookkeeping for the finance store.

Every specialised transaction (cross-border, forex, crypto) is mirrored by one
row on the shared ``transactions`` ledger carrying its profit in cedis. The
helpers here build those mirrored rows and aggregate the ledger for reporting;
they never touch the database themselves.
"""
from typing import Dict, Iterable, Optional

BUSINESS_LINES = ("appliance", "cross_border", "forex", "crypto")
BASE_CURRENCY = "GHS"


def _fmt(value) -> str:
    # 75.0 -> "75", 0.5 -> "0.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def cross_border_entry(
    *,
    direction: str,
    description: str,
    sent_amount: float,
    sent_currency: str,
    received_amount: float,
    received_currency: str,
    profit_ghs: float,
    reference: Optional[str] = None,
) -> dict:
    return {
        "type": "in",
        "business_line": "cross_border",
        "description": f"Cross-border: {description}",
        "amount": profit_ghs,
        "currency": BASE_CURRENCY,
        "reference": reference,
        "notes": (
            f"{direction} | Sent: {_fmt(sent_amount)} {sent_currency} "
            f"→ Received: {_fmt(received_amount)} {received_currency}"
        ),
    }


def forex_entry(
    *,
    type: str,
    usd_amount: float,
    ghs_amount: float,
    exchange_rate: float,
    profit_ghs: float,
    reference: Optional[str] = None,
) -> dict:
    return {
        "type": "in" if type == "sell" else "out",
        "business_line": "forex",
        "description": f"Forex {type}: ${_fmt(usd_amount)} USD @ {_fmt(exchange_rate)}",
        "amount": profit_ghs,
        "currency": BASE_CURRENCY,
        "reference": reference,
        "notes": f"GHS {_fmt(ghs_amount)}",
    }


def crypto_entry(
    *,
    type: str,
    coin: str,
    coin_amount: float,
    unit_price: float,
    total_ghs: float,
    profit_ghs: float,
    reference: Optional[str] = None,
) -> dict:
    return {
        "type": "in" if type == "sell" else "out",
        "business_line": "crypto",
        "description": f"Crypto {type}: {_fmt(coin_amount)} {coin} @ GHS {_fmt(unit_price)}",
        "amount": profit_ghs,
        "currency": BASE_CURRENCY,
        "reference": reference,
        "notes": f"Total GHS {_fmt(total_ghs)}",
    }


def crypto_profit(
    *,
    type: str,
    coin_amount: float,
    unit_price: float,
    buy_price_per_unit: Optional[float],
) -> float:
    """Realised profit of a sell given what the coins were bought at; buys realise nothing."""
    if type != "sell" or buy_price_per_unit is None:
        return 0.0
    return round((unit_price - buy_price_per_unit) * coin_amount, 2)


def _empty_totals() -> Dict[str, float]:
    return {"total_in": 0.0, "total_out": 0.0, "net": 0.0}


def summarize(transactions: Iterable) -> Dict[str, Dict[str, float]]:
    """Totals in/out/net per business line plus an ``overall`` bucket."""
    summary = {line: _empty_totals() for line in BUSINESS_LINES}
    summary["overall"] = _empty_totals()

    for txn in transactions:
        bucket = summary.get(txn.business_line)
        if bucket is None:
            continue
        key = "total_in" if txn.type == "in" else "total_out"
        bucket[key] += txn.amount or 0.0
        summary["overall"][key] += txn.amount or 0.0

    for totals in summary.values():
        totals["total_in"] = round(totals["total_in"], 2)
        totals["total_out"] = round(totals["total_out"], 2)
        totals["net"] = round(totals["total_in"] - totals["total_out"], 2)
    return summary


def reconcile(profits: Dict[str, float], summary: Dict[str, Dict[str, float]]) -> Dict[str, dict]:
    """Compare realised profit per specialised line with the ledger net of that line."""
    result = {}
    for line, profit in profits.items():
        ledger_net = summary[line]["net"]
        difference = round(profit - ledger_net, 2)
        result[line] = {
            "profit": round(profit, 2),
            "ledger_net": ledger_net,
            "difference": difference,
            "reconciled": difference == 0,
        }
    return result
