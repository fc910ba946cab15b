"""Tests for execution.validation: pre-ledger order checks."""

import math

from execution.validation import OrderCheck, check_intent
from ledger.contracts import TradeIntent, TransactionType, Wallet
from market.registry import InstrumentRegistry

WALLET = Wallet(balance=10_000.0, initial_balance=10_000.0)


def _intent(qty=1, price=100.0, side=TransactionType.BUY, iid="inf", **kw) -> TradeIntent:
    return TradeIntent(iid, "INFY", side, qty, price, **kw)


class TestOrderCheck:
    def test_allowed(self):
        r = OrderCheck(allowed=True)
        assert r.allowed is True
        assert r.reason == ""

    def test_blocked(self):
        r = OrderCheck(allowed=False, reason="nope")
        assert r.allowed is False
        assert r.reason == "nope"


class TestQuantityAndPrice:
    def test_valid_buy_allowed(self, registry: InstrumentRegistry):
        assert check_intent(_intent(), registry, WALLET).allowed is True

    def test_zero_quantity(self, registry: InstrumentRegistry):
        r = check_intent(_intent(qty=0), registry, WALLET)
        assert r.allowed is False
        assert "Quantity" in r.reason

    def test_fractional_quantity(self, registry: InstrumentRegistry):
        assert check_intent(_intent(qty=1.5), registry, WALLET).allowed is False

    def test_bool_quantity(self, registry: InstrumentRegistry):
        assert check_intent(_intent(qty=True), registry, WALLET).allowed is False

    def test_non_positive_price(self, registry: InstrumentRegistry):
        r = check_intent(_intent(price=0.0), registry, WALLET)
        assert r.allowed is False
        assert "Price" in r.reason

    def test_nan_price(self, registry: InstrumentRegistry):
        assert check_intent(_intent(price=math.nan), registry, WALLET).allowed is False


class TestInstrumentAndTriggers:
    def test_unknown_instrument(self, registry: InstrumentRegistry):
        r = check_intent(_intent(iid="missing"), registry, WALLET)
        assert r.allowed is False
        assert "Unknown instrument" in r.reason

    def test_negative_stop_loss(self, registry: InstrumentRegistry):
        r = check_intent(_intent(stop_loss=-1.0), registry, WALLET)
        assert r.allowed is False
        assert "Stop loss" in r.reason

    def test_zero_take_profit(self, registry: InstrumentRegistry):
        r = check_intent(_intent(take_profit=0.0), registry, WALLET)
        assert r.allowed is False
        assert "Take profit" in r.reason


class TestFunds:
    def test_buy_over_balance_rejected(self, registry: InstrumentRegistry):
        r = check_intent(_intent(qty=101, price=100.0), registry, WALLET)
        assert r.allowed is False
        assert "Insufficient funds" in r.reason

    def test_buy_exactly_balance_allowed(self, registry: InstrumentRegistry):
        assert check_intent(_intent(qty=100, price=100.0), registry, WALLET).allowed is True

    def test_sell_not_limited_by_balance(self, registry: InstrumentRegistry):
        r = check_intent(_intent(qty=1_000, side=TransactionType.SELL), registry, WALLET)
        assert r.allowed is True
