# openstock/routes/finance.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from openstock.database import get_finance_db, transaction
from openstock.models.finance import CrossBorderTransaction, CryptoTransaction, ForexTransaction, Transaction
from openstock.utils.audit import client_ip, write_log
from openstock.utils.crud import delete_or_409, get_or_404
from openstock.utils.ids import generate_id
from openstock.utils.ledger import (
    crypto_entry,
    crypto_profit,
    cross_border_entry,
    forex_entry,
    reconcile,
    summarize,
)
import openstock.schemas.finance as finance_schemas

router = APIRouter(prefix="/finance", tags=["Finance"])

RECENT_TRANSACTIONS = 10


def _mirror(db: Session, specialised, entry: dict) -> Transaction:
    """Insert a specialised transaction and its ledger row in one commit."""
    ledger_row = Transaction(id=generate_id("txn"), **entry)
    with transaction(db):
        db.add(specialised)
        db.add(ledger_row)
    db.refresh(ledger_row)
    return ledger_row


def _mirrored_result(specialised, ledger_row: Transaction) -> dict:
    return {
        "id": specialised.id,
        "profit_ghs": specialised.profit_ghs,
        "ledger_transaction": ledger_row,
    }


# =========================
# LEDGER
# =========================
@router.get("/transactions", response_model=List[finance_schemas.TransactionOut])
def list_transactions(
    business_line: Optional[finance_schemas.BusinessLine] = Query(None),
    db: Session = Depends(get_finance_db),
):
    query = db.query(Transaction)
    if business_line:
        query = query.filter(Transaction.business_line == business_line)
    return query.order_by(Transaction.created_at.desc()).all()


@router.post("/transactions", response_model=finance_schemas.TransactionOut, status_code=201)
def create_transaction(
    payload: finance_schemas.TransactionCreate,
    request: Request,
    db: Session = Depends(get_finance_db),
):
    txn = Transaction(id=generate_id("txn"), **payload.model_dump())
    db.add(txn)
    db.commit()
    db.refresh(txn)

    write_log(
        db, action="TRANSACTION_CREATE", resource="finance", ip=client_ip(request),
        meta={"id": txn.id, "business_line": txn.business_line, "type": txn.type, "amount": txn.amount},
    )
    return txn


@router.delete("/transactions/{transaction_id}")
def delete_transaction(transaction_id: str, request: Request, db: Session = Depends(get_finance_db)):
    txn = get_or_404(db, Transaction, transaction_id, "Transaction")
    delete_or_409(db, txn, "Transaction")
    write_log(db, action="TRANSACTION_DELETE", resource="finance", ip=client_ip(request), meta={"id": transaction_id})
    return {"success": True}


# =========================
# CROSS-BORDER
# =========================
@router.get("/cross-border", response_model=List[finance_schemas.CrossBorderOut])
def list_cross_border(db: Session = Depends(get_finance_db)):
    return db.query(CrossBorderTransaction).order_by(CrossBorderTransaction.created_at.desc()).all()


@router.post("/cross-border", response_model=finance_schemas.MirroredResult, status_code=201)
def create_cross_border(
    payload: finance_schemas.CrossBorderCreate,
    request: Request,
    db: Session = Depends(get_finance_db),
):
    cb = CrossBorderTransaction(id=generate_id("cb"), **payload.model_dump())
    ledger_row = _mirror(db, cb, cross_border_entry(
        direction=payload.direction,
        description=payload.description,
        sent_amount=payload.sent_amount,
        sent_currency=payload.sent_currency,
        received_amount=payload.received_amount,
        received_currency=payload.received_currency,
        profit_ghs=payload.profit_ghs,
        reference=payload.reference,
    ))

    write_log(
        db, action="CROSS_BORDER_CREATE", resource="finance", ip=client_ip(request),
        meta={"id": cb.id, "profit_ghs": cb.profit_ghs, "ledger_id": ledger_row.id},
    )
    return _mirrored_result(cb, ledger_row)


# =========================
# FOREX
# =========================
@router.get("/forex", response_model=List[finance_schemas.ForexOut])
def list_forex(db: Session = Depends(get_finance_db)):
    return db.query(ForexTransaction).order_by(ForexTransaction.created_at.desc()).all()


@router.post("/forex", response_model=finance_schemas.MirroredResult, status_code=201)
def create_forex(
    payload: finance_schemas.ForexCreate,
    request: Request,
    db: Session = Depends(get_finance_db),
):
    fx = ForexTransaction(id=generate_id("fx"), **payload.model_dump())
    ledger_row = _mirror(db, fx, forex_entry(
        type=payload.type,
        usd_amount=payload.usd_amount,
        ghs_amount=payload.ghs_amount,
        exchange_rate=payload.exchange_rate,
        profit_ghs=payload.profit_ghs,
        reference=payload.reference,
    ))

    write_log(
        db, action="FOREX_CREATE", resource="finance", ip=client_ip(request),
        meta={"id": fx.id, "type": fx.type, "profit_ghs": fx.profit_ghs, "ledger_id": ledger_row.id},
    )
    return _mirrored_result(fx, ledger_row)


# =========================
# CRYPTO
# =========================
@router.get("/crypto", response_model=List[finance_schemas.CryptoOut])
def list_crypto(db: Session = Depends(get_finance_db)):
    return db.query(CryptoTransaction).order_by(CryptoTransaction.created_at.desc()).all()


@router.post("/crypto", response_model=finance_schemas.MirroredResult, status_code=201)
def create_crypto(
    payload: finance_schemas.CryptoCreate,
    request: Request,
    db: Session = Depends(get_finance_db),
):
    total_ghs = payload.total_ghs
    if total_ghs is None:
        total_ghs = round(payload.coin_amount * payload.unit_price, 2)

    profit_ghs = payload.profit_ghs
    if profit_ghs is None:
        profit_ghs = crypto_profit(
            type=payload.type,
            coin_amount=payload.coin_amount,
            unit_price=payload.unit_price,
            buy_price_per_unit=payload.buy_price_per_unit,
        )

    data = payload.model_dump(exclude={"total_ghs", "profit_ghs"})
    cry = CryptoTransaction(id=generate_id("cry"), total_ghs=total_ghs, profit_ghs=profit_ghs, **data)
    ledger_row = _mirror(db, cry, crypto_entry(
        type=payload.type,
        coin=payload.coin,
        coin_amount=payload.coin_amount,
        unit_price=payload.unit_price,
        total_ghs=total_ghs,
        profit_ghs=profit_ghs,
        reference=payload.reference,
    ))

    write_log(
        db, action="CRYPTO_CREATE", resource="finance", ip=client_ip(request),
        meta={"id": cry.id, "coin": cry.coin, "profit_ghs": cry.profit_ghs, "ledger_id": ledger_row.id},
    )
    return _mirrored_result(cry, ledger_row)


# =========================
# SUMMARY
# =========================
@router.get("/summary", response_model=finance_schemas.FinanceSummary)
def finance_summary(db: Session = Depends(get_finance_db)):
    ledger = db.query(Transaction).all()
    summary = summarize(ledger)

    cb_profits = [t.profit_ghs or 0 for t in db.query(CrossBorderTransaction).all()]
    fx_profits = [t.profit_ghs or 0 for t in db.query(ForexTransaction).all()]
    cry_profits = [t.profit_ghs or 0 for t in db.query(CryptoTransaction).all()]

    profits = {
        "cross_border": round(sum(cb_profits), 2),
        "forex": round(sum(fx_profits), 2),
        "crypto": round(sum(cry_profits), 2),
    }

    recent = db.query(Transaction).order_by(Transaction.created_at.desc()).limit(RECENT_TRANSACTIONS).all()

    return {
        "summary": summary,
        "profits": {**profits, "total": round(sum(profits.values()), 2)},
        "recent_transactions": recent,
        "counts": {
            "cross_border": len(cb_profits),
            "forex": len(fx_profits),
            "crypto": len(cry_profits),
            "total": len(ledger),
        },
        "reconciliation": reconcile(profits, summary),
    }
