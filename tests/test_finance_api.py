"""
Finance store through the HTTP API: the ledger, the mirrored specialised
transactions and the summary.
"""

import pytest
from sqlalchemy.exc import IntegrityError

import openstock.routes.finance as finance_routes


def _ledger(client, business_line=None):
    params = {"business_line": business_line} if business_line else {}
    resp = client.get("/finance/transactions", params=params)
    assert resp.status_code == 200
    return resp.json()


CROSS_BORDER = {
    "direction": "ng_to_gh",
    "description": "Lagos run",
    "sent_amount": 100000,
    "sent_currency": "NGN",
    "received_amount": 800,
    "received_currency": "GHS",
    "exchange_rate": 0.008,
    "profit_ghs": 75,
}


class TestLedger:
    def test_create_list_delete(self, client):
        resp = client.post("/finance/transactions", json={
            "type": "in", "business_line": "appliance", "description": "Fridge sale", "amount": 500,
        })
        assert resp.status_code == 201
        txn = resp.json()
        assert txn["currency"] == "GHS"
        assert [t["id"] for t in _ledger(client, "appliance")] == [txn["id"]]

        assert client.delete(f"/finance/transactions/{txn['id']}").status_code == 200
        assert client.delete(f"/finance/transactions/{txn['id']}").status_code == 404
        assert _ledger(client) == []

    def test_unknown_business_line(self, client):
        resp = client.post("/finance/transactions", json={
            "type": "in", "business_line": "lottery", "description": "x", "amount": 1,
        })
        assert resp.status_code == 422


class TestMirroring:
    def test_cross_border_writes_one_ledger_row(self, client):
        resp = client.post("/finance/cross-border", json=CROSS_BORDER)
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["profit_ghs"] == 75

        rows = _ledger(client)
        assert len(rows) == 1
        row = rows[0]
        assert (row["type"], row["amount"], row["currency"], row["business_line"]) == ("in", 75, "GHS", "cross_border")
        assert row["description"] == "Cross-border: Lagos run"
        assert row["id"] == body["ledger_transaction"]["id"]

        listed = client.get("/finance/cross-border").json()
        assert listed[0]["id"] == body["id"]

    def test_forex_side_sets_ledger_direction(self, client):
        client.post("/finance/forex", json={
            "type": "sell", "usd_amount": 100, "ghs_amount": 1250, "exchange_rate": 12.5, "profit_ghs": 20,
        })
        client.post("/finance/forex", json={
            "type": "buy", "usd_amount": 100, "ghs_amount": 1200, "exchange_rate": 12.0, "profit_ghs": 5,
        })

        by_type = {t["type"]: t for t in _ledger(client, "forex")}
        assert by_type["in"]["amount"] == 20
        assert by_type["out"]["amount"] == 5
        assert by_type["in"]["description"] == "Forex sell: $100 USD @ 12.5"

    def test_crypto_derives_total_and_profit(self, client):
        resp = client.post("/finance/crypto", json={
            "type": "sell", "coin": "BTC", "coin_amount": 0.5,
            "unit_price": 900000, "buy_price_per_unit": 800000,
        })
        assert resp.status_code == 201
        assert resp.json()["profit_ghs"] == 50000

        trade = client.get("/finance/crypto").json()[0]
        assert trade["total_ghs"] == 450000
        assert _ledger(client, "crypto")[0]["amount"] == 50000

    def test_invalid_trade_leaves_no_ledger_row(self, client):
        resp = client.post("/finance/forex", json={"type": "sell", "usd_amount": 0, "ghs_amount": 10, "exchange_rate": 1})
        assert resp.status_code == 422
        assert _ledger(client) == []


def test_summary(client):
    client.post("/finance/transactions", json={
        "type": "in", "business_line": "appliance", "description": "Fridge sale", "amount": 500,
    })
    client.post("/finance/transactions", json={
        "type": "out", "business_line": "appliance", "description": "Rent", "amount": 200,
    })
    client.post("/finance/cross-border", json=CROSS_BORDER)
    client.post("/finance/forex", json={
        "type": "sell", "usd_amount": 100, "ghs_amount": 1250, "exchange_rate": 12.5, "profit_ghs": 20,
    })
    client.post("/finance/forex", json={
        "type": "buy", "usd_amount": 100, "ghs_amount": 1200, "exchange_rate": 12.0, "profit_ghs": 5,
    })

    body = client.get("/finance/summary").json()

    assert body["summary"]["appliance"] == {"total_in": 500, "total_out": 200, "net": 300}
    assert body["summary"]["forex"]["net"] == 15
    assert body["summary"]["overall"]["net"] == 390
    assert body["profits"] == {"cross_border": 75, "forex": 25, "crypto": 0, "total": 100}
    assert body["counts"] == {"cross_border": 1, "forex": 2, "crypto": 0, "total": 5}
    assert len(body["recent_transactions"]) == 5

    assert body["reconciliation"]["cross_border"]["reconciled"] is True
    forex = body["reconciliation"]["forex"]
    assert forex["reconciled"] is False
    assert forex["difference"] == 10


def test_failed_ledger_insert_rolls_back_the_trade(client, monkeypatch):
    existing = client.post("/finance/transactions", json={
        "type": "in", "business_line": "appliance", "description": "Fridge sale", "amount": 500,
    }).json()

    real_generate_id = finance_routes.generate_id

    def reuse_ledger_id(prefix):
        return existing["id"] if prefix == "txn" else real_generate_id(prefix)

    monkeypatch.setattr(finance_routes, "generate_id", reuse_ledger_id)

    with pytest.raises(IntegrityError):
        client.post("/finance/cross-border", json=CROSS_BORDER)

    assert client.get("/finance/cross-border").json() == []
    assert [t["id"] for t in _ledger(client)] == [existing["id"]]
