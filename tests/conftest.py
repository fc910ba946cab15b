"""Pytest fixtures: instruments, fresh ledgers, deterministic RNG."""

import random
from datetime import datetime, timezone

import pytest

from ledger.contracts import Exchange, Instrument, LedgerState
from market.registry import InstrumentRegistry

INITIAL_BALANCE = 100_000.0


def _ts(year: int, month: int, day: int, hour: int = 9, minute: int = 30) -> datetime:
    return datetime(year, month, day, hour, minute, 0, tzinfo=timezone.utc)


@pytest.fixture
def ts() -> datetime:
    return _ts(2026, 2, 17)


@pytest.fixture
def state() -> LedgerState:
    return LedgerState.fresh(INITIAL_BALANCE)


@pytest.fixture
def instruments() -> list[Instrument]:
    """Two NSE listings and one BSE listing of the same symbol."""
    return [
        Instrument("inf", "INFY", "Infosys Ltd.", Exchange.NSE, 100.0, 0.0, 0.0, 100.0),
        Instrument("tcs", "TCS", "Tata Consultancy Services", Exchange.NSE, 200.0, 0.0, 0.0, 200.0),
        Instrument("inf-bse", "INFY", "Infosys (BSE)", Exchange.BSE, 100.5, 0.0, 0.0, 100.5),
    ]


@pytest.fixture
def registry(instruments: list[Instrument]) -> InstrumentRegistry:
    return InstrumentRegistry(instruments)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
