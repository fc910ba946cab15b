"""Tests for price propagation: random-walk ticks and external quotes."""

import math
import random

import pytest

from ledger.contracts import Exchange, Instrument
from market.prices import (
    MIN_PRICE,
    apply_external_price,
    apply_quotes,
    session_open,
    start_session,
    tick,
    tick_all,
)


def _inst(price=100.0, change_percent=0.0, open_price=None, symbol="INFY", iid="inf") -> Instrument:
    return Instrument(iid, symbol, symbol, Exchange.NSE, price, 0.0, change_percent, open_price)


def test_session_open_back_derived_when_not_pinned() -> None:
    assert session_open(_inst(price=110.0, change_percent=10.0)) == pytest.approx(100.0)


def test_session_open_uses_stored_value() -> None:
    assert session_open(_inst(price=110.0, change_percent=10.0, open_price=90.0)) == 90.0


def test_tick_stays_within_band(rng: random.Random) -> None:
    inst = _inst(open_price=100.0)
    for _ in range(200):
        nxt = tick(inst, 0.02, rng)
        assert abs(nxt.price - inst.price) <= inst.price * 0.02 * 0.5 + 1e-9
        inst = nxt


def test_tick_change_measured_from_open(rng: random.Random) -> None:
    inst = _inst(open_price=100.0)
    for _ in range(10):
        inst = tick(inst, 0.01, rng)
    assert inst.open_price == 100.0
    assert inst.change == pytest.approx(inst.price - 100.0)
    assert inst.change_percent == pytest.approx((inst.price - 100.0) / 100.0 * 100)


def test_tick_pins_open_on_first_use(rng: random.Random) -> None:
    nxt = tick(_inst(price=110.0, change_percent=10.0), 0.01, rng)
    assert nxt.open_price == pytest.approx(100.0)


def test_tick_never_below_floor() -> None:
    class Low:
        def random(self) -> float:
            return 0.0

    nxt = tick(_inst(price=MIN_PRICE, open_price=1.0), 4.0, Low())
    assert nxt.price == MIN_PRICE


def test_tick_is_deterministic_with_seeded_rng() -> None:
    a = tick_all([_inst(), _inst(iid="b")], 0.01, random.Random(7))
    b = tick_all([_inst(), _inst(iid="b")], 0.01, random.Random(7))
    assert [i.price for i in a] == [i.price for i in b]


def test_apply_external_price() -> None:
    inst = apply_external_price(_inst(open_price=100.0), 105.0)
    assert inst.price == 105.0
    assert inst.change == pytest.approx(5.0)
    assert inst.change_percent == pytest.approx(5.0)


def test_start_session_resets_change() -> None:
    inst = start_session(apply_external_price(_inst(open_price=100.0), 120.0))
    assert inst.open_price == 120.0
    assert inst.change == 0.0
    assert inst.change_percent == 0.0


def test_apply_quotes_updates_every_listing_of_symbol() -> None:
    instruments = [_inst(iid="a"), _inst(iid="b"), _inst(symbol="TCS", iid="c")]
    out, updated = apply_quotes(instruments, {"INFY": 101.0})
    assert updated == 2
    assert [i.price for i in out] == [101.0, 101.0, 100.0]


def test_apply_quotes_ignores_bad_values() -> None:
    instruments = [_inst(iid="a"), _inst(symbol="TCS", iid="b"), _inst(symbol="ITC", iid="c")]
    out, updated = apply_quotes(instruments, {"INFY": math.nan, "TCS": -5.0, "ITC": 0.0})
    assert updated == 0
    assert out == instruments
