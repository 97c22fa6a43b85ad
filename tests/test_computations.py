"""
Unit tests for the pure computations in ``openstock.utils``.
"""

from types import SimpleNamespace

import pytest

from openstock.utils.attendance import AttendanceError, overtime_minutes, parse_hhmm, worked_minutes
from openstock.utils.ledger import (
    cross_border_entry,
    crypto_entry,
    crypto_profit,
    forex_entry,
    reconcile,
    summarize,
)
from openstock.utils.payroll import (
    PayrollError,
    check_period_transition,
    components_from,
    statutory_components,
)
from openstock.utils.pricing import derive_prices
from openstock.utils.stock import StockError, compute_movement, is_low_stock, low_stock_gap


# =============================================================================
# STOCK
# =============================================================================


class TestStockMovements:
    def test_in_adds(self):
        change = compute_movement(10, "in", 5)
        assert (change.stock_before, change.stock_after, change.quantity) == (10, 15, 5)

    def test_out_subtracts_and_stores_negative_delta(self):
        change = compute_movement(10, "out", 3)
        assert change.stock_after == 7
        assert change.quantity == -3

    def test_adjustment_sets_absolute_level(self):
        change = compute_movement(10, "adjustment", 4)
        assert change.stock_after == 4
        assert change.quantity == -6

    def test_out_below_zero_is_rejected(self):
        with pytest.raises(StockError, match="Insufficient stock"):
            compute_movement(2, "out", 5)

    def test_out_below_zero_allowed_by_policy(self):
        change = compute_movement(2, "out", 5, allow_negative=True)
        assert change.stock_after == -3

    def test_negative_quantity_rejected(self):
        with pytest.raises(StockError):
            compute_movement(2, "in", -1)

    def test_unknown_type(self):
        with pytest.raises(StockError):
            compute_movement(2, "transfer", 1)

    def test_low_stock_is_inclusive_and_ignores_inactive(self):
        assert is_low_stock(5, 5, True)
        assert not is_low_stock(6, 5, True)
        assert not is_low_stock(0, 5, False)
        assert low_stock_gap(1, 5) == -4


# =============================================================================
# ATTENDANCE
# =============================================================================


class TestOvertime:
    def test_nine_hour_day_with_half_hour_break(self):
        assert worked_minutes("09:00", "18:00", 30) == 510
        assert overtime_minutes("09:00", "18:00", 30) == 30

    def test_longer_day(self):
        assert overtime_minutes("09:00", "18:30", 30) == 60

    def test_short_day_has_no_overtime(self):
        assert overtime_minutes("09:00", "17:00", 0) == 0

    def test_custom_standard_day(self):
        assert overtime_minutes("08:00", "16:00", 0, standard_minutes=420) == 60

    def test_clock_out_before_clock_in(self):
        with pytest.raises(AttendanceError):
            worked_minutes("18:00", "09:00")

    @pytest.mark.parametrize("value", ["9h", "24:00", "12:60", None])
    def test_bad_times(self, value):
        with pytest.raises(AttendanceError):
            parse_hhmm(value)


# =============================================================================
# PAYROLL
# =============================================================================


class TestPayroll:
    def test_statutory_deductions(self):
        c = statutory_components(3000)
        assert c.gross_pay == 3000
        assert c.tax_amount == 450
        assert c.social_security == 240
        assert c.health_insurance == 90
        assert c.net_pay == 2220

    def test_manual_components(self):
        c = components_from({
            "base_salary": 2000, "overtime_pay": 100, "bonuses": 50,
            "deductions": 20, "tax_amount": 300,
        })
        assert c.gross_pay == 2150
        assert c.net_pay == 1830

    def test_missing_and_null_components_count_as_zero(self):
        c = components_from({"base_salary": 1000, "bonuses": None})
        assert c.gross_pay == 1000
        assert c.net_pay == 1000

    def test_period_lifecycle(self):
        check_period_transition("draft", "processing")
        check_period_transition("processing", "completed")
        with pytest.raises(PayrollError):
            check_period_transition("completed", "processing")
        with pytest.raises(PayrollError):
            check_period_transition("cancelled", "draft")


# =============================================================================
# LEDGER
# =============================================================================


def _txn(business_line, type, amount):
    return SimpleNamespace(business_line=business_line, type=type, amount=amount)


class TestLedger:
    def test_cross_border_entry(self):
        entry = cross_border_entry(
            direction="ng_to_gh", description="Lagos run",
            sent_amount=100000.0, sent_currency="NGN",
            received_amount=800.0, received_currency="GHS",
            profit_ghs=75.0,
        )
        assert entry["type"] == "in"
        assert entry["amount"] == 75.0
        assert entry["currency"] == "GHS"
        assert entry["description"] == "Cross-border: Lagos run"
        assert entry["notes"] == "ng_to_gh | Sent: 100000 NGN → Received: 800 GHS"

    def test_forex_side_decides_type(self):
        sell = forex_entry(type="sell", usd_amount=100.0, ghs_amount=1250.0, exchange_rate=12.5, profit_ghs=20.0)
        buy = forex_entry(type="buy", usd_amount=100.0, ghs_amount=1200.0, exchange_rate=12.0, profit_ghs=0.0)
        assert sell["type"] == "in" and buy["type"] == "out"
        assert sell["description"] == "Forex sell: $100 USD @ 12.5"
        assert sell["amount"] == 20.0

    def test_crypto_entry_and_profit(self):
        entry = crypto_entry(
            type="sell", coin="BTC", coin_amount=0.5, unit_price=900000.0, total_ghs=450000.0, profit_ghs=50000.0
        )
        assert entry["type"] == "in"
        assert entry["description"] == "Crypto sell: 0.5 BTC @ GHS 900000"
        assert crypto_profit(type="sell", coin_amount=0.5, unit_price=900000.0, buy_price_per_unit=800000.0) == 50000
        assert crypto_profit(type="buy", coin_amount=0.5, unit_price=900000.0, buy_price_per_unit=800000.0) == 0

    def test_summarize_and_reconcile(self):
        summary = summarize([
            _txn("appliance", "in", 500.0),
            _txn("appliance", "out", 200.0),
            _txn("cross_border", "in", 75.0),
            _txn("forex", "in", 20.0),
            _txn("forex", "out", 5.0),
        ])
        assert summary["appliance"] == {"total_in": 500.0, "total_out": 200.0, "net": 300.0}
        assert summary["overall"]["net"] == 390.0
        assert summary["crypto"]["net"] == 0

        result = reconcile({"cross_border": 75.0, "forex": 20.0}, summary)
        assert result["cross_border"]["reconciled"] is True
        assert result["forex"]["difference"] == 5.0
        assert result["forex"]["reconciled"] is False


# =============================================================================
# PRICING
# =============================================================================


class TestPricing:
    def test_default_margin(self):
        assert derive_prices(100) == (130.0, 30.0)

    def test_margin_given(self):
        assert derive_prices(100, margin_percent=25) == (125.0, 25.0)

    def test_selling_price_recomputes_margin(self):
        assert derive_prices(100, selling_price=150) == (150.0, 50.0)

    def test_zero_cost_keeps_margin(self):
        assert derive_prices(0, selling_price=10) == (10.0, 30.0)
