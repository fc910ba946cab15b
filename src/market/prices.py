"""
Price update propagation: random-walk ticks and external quotes.

change / change_percent are measured against the session-open price, which is
pinned on the instrument (open_price) the first time it is needed rather than
re-derived from change_percent on every tick.
"""

from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Iterable, Mapping

from ledger.contracts import Instrument

MIN_PRICE = 0.01


def session_open(instrument: Instrument) -> float:
    """Stored open price, or back-derived from price and change_percent if not pinned."""
    if instrument.open_price:
        return instrument.open_price
    return instrument.price / (1 + instrument.change_percent / 100)


def _with_price(instrument: Instrument, new_price: float) -> Instrument:
    open_price = session_open(instrument)
    change = new_price - open_price
    return replace(
        instrument,
        price=new_price,
        change=change,
        change_percent=change / open_price * 100,
        open_price=open_price,
    )


def tick(instrument: Instrument, volatility: float, rng: random.Random | None = None) -> Instrument:
    """One bounded random-walk step: +/- half of ``volatility`` times price."""
    draw = (rng or random).random() - 0.5
    new_price = max(MIN_PRICE, instrument.price + draw * instrument.price * volatility)
    return _with_price(instrument, new_price)


def apply_external_price(instrument: Instrument, new_price: float) -> Instrument:
    return _with_price(instrument, max(MIN_PRICE, new_price))


def start_session(instrument: Instrument) -> Instrument:
    """Pin the current price as the new session open."""
    return replace(instrument, change=0.0, change_percent=0.0, open_price=instrument.price)


def tick_all(
    instruments: Iterable[Instrument],
    volatility: float,
    rng: random.Random | None = None,
) -> list[Instrument]:
    return [tick(i, volatility, rng) for i in instruments]


def apply_quotes(instruments: Iterable[Instrument], quotes: Mapping[str, float]) -> tuple[list[Instrument], int]:
    """Apply symbol -> LTP quotes to every listing of that symbol.

    Returns (instruments, number updated). Non-finite or non-positive quotes are ignored.
    """
    out: list[Instrument] = []
    updated = 0
    for inst in instruments:
        quote = quotes.get(inst.symbol)
        if quote is None or not math.isfinite(quote) or quote <= 0:
            out.append(inst)
            continue
        out.append(apply_external_price(inst, quote))
        updated += 1
    return out, updated
