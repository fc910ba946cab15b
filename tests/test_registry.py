"""Tests for the instrument registry (watchlist)."""

import random

import pytest

from ledger.contracts import Exchange
from market.registry import (
    DEFAULT_INSTRUMENTS,
    DuplicateInstrumentError,
    InstrumentRegistry,
    UnknownInstrumentError,
)
from market.prices import apply_external_price


def test_default_registry() -> None:
    reg = InstrumentRegistry()
    assert len(reg) == len(DEFAULT_INSTRUMENTS)
    assert reg.find("reliance", "BSE").id == "bse-reliance"
    assert reg.find("RELIANCE", Exchange.NSE).id == "1"


def test_symbols_unique_in_order(registry: InstrumentRegistry) -> None:
    assert registry.symbols() == ["INFY", "TCS"]


def test_listings_and_prices(registry: InstrumentRegistry) -> None:
    assert [i.id for i in registry.listings("infy")] == ["inf", "inf-bse"]
    assert registry.prices() == {"inf": 100.0, "tcs": 200.0, "inf-bse": 100.5}
    assert registry.price_of("tcs") == 200.0
    assert registry.price_of("missing") is None


def test_get_unknown_raises(registry: InstrumentRegistry) -> None:
    with pytest.raises(UnknownInstrumentError):
        registry.get("missing")


def test_add_goes_to_front(registry: InstrumentRegistry) -> None:
    inst = registry.add(" wipro ", "NSE", price=450.0)
    assert inst.symbol == "WIPRO"
    assert inst.name == "WIPRO (Custom)"
    assert inst.open_price == 450.0
    assert next(iter(registry)).id == inst.id
    assert inst.id in registry


def test_add_random_price(registry: InstrumentRegistry) -> None:
    inst = registry.add("WIPRO", Exchange.BSE, rng=random.Random(1))
    assert 100 <= inst.price < 5100
    assert inst.price == int(inst.price)


def test_add_same_symbol_other_exchange_allowed(registry: InstrumentRegistry) -> None:
    inst = registry.add("TCS", "BSE", price=201.0)
    assert [i.id for i in registry.listings("TCS")] == [inst.id, "tcs"]


def test_add_duplicate_rejected(registry: InstrumentRegistry) -> None:
    with pytest.raises(DuplicateInstrumentError):
        registry.add("infy", "NSE", price=1.0)


def test_add_empty_symbol_rejected(registry: InstrumentRegistry) -> None:
    with pytest.raises(ValueError, match="empty"):
        registry.add("  ", "NSE")


def test_add_unknown_exchange_rejected(registry: InstrumentRegistry) -> None:
    with pytest.raises(ValueError):
        registry.add("WIPRO", "NYSE")


def test_replace_all(registry: InstrumentRegistry) -> None:
    registry.replace_all([apply_external_price(i, 150.0) for i in registry])
    assert set(registry.prices().values()) == {150.0}


def test_replace_unknown_raises(registry: InstrumentRegistry) -> None:
    inst = registry.get("inf")
    registry_other = InstrumentRegistry([])
    with pytest.raises(UnknownInstrumentError):
        registry_other.replace(inst)
