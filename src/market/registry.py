"""
Instrument registry: the watchlist and the latest price per (symbol, exchange) listing.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import Iterable, Iterator

from ledger.contracts import Exchange, Instrument

logger = logging.getLogger("papertrade.market")


class DuplicateInstrumentError(KeyError):
    """Listing (symbol, exchange) already in the registry."""


class UnknownInstrumentError(KeyError):
    """No instrument with that id or listing."""


DEFAULT_INSTRUMENTS: tuple[Instrument, ...] = (
    Instrument("1", "RELIANCE", "Reliance Industries Ltd.", Exchange.NSE, 1268.45, 4.20, 0.33),
    Instrument("2", "TCS", "Tata Consultancy Services", Exchange.NSE, 3942.80, -12.20, -0.31),
    Instrument("bse-sensex", "SENSEX", "S&P BSE SENSEX", Exchange.BSE, 77209.90, 350.25, 0.46),
    Instrument("3", "HDFCBANK", "HDFC Bank Ltd.", Exchange.NSE, 1728.15, 8.30, 0.48),
    Instrument("4", "INFY", "Infosys Ltd.", Exchange.NSE, 1882.40, -5.10, -0.27),
    Instrument("5", "ICICIBANK", "ICICI Bank Ltd.", Exchange.NSE, 1242.65, 12.25, 1.00),
    Instrument("bse-reliance", "RELIANCE", "Reliance (BSE)", Exchange.BSE, 1268.60, 4.35, 0.34),
    Instrument("7", "SBIN", "State Bank of India", Exchange.NSE, 782.40, -2.20, -0.28),
    Instrument("bse-sbi", "SBIN", "SBI (BSE)", Exchange.BSE, 782.55, -2.10, -0.27),
    Instrument("8", "ITC", "ITC Ltd.", Exchange.NSE, 492.10, 2.05, 0.42),
    Instrument("bse-itc", "ITC", "ITC (BSE)", Exchange.BSE, 492.25, 2.15, 0.44),
    Instrument("10", "LICI", "LIC of India", Exchange.NSE, 1045.20, 5.60, 0.54),
)


class InstrumentRegistry:
    """Ordered id -> Instrument mapping. Insertion order is display order."""

    def __init__(self, instruments: Iterable[Instrument] = DEFAULT_INSTRUMENTS) -> None:
        self._by_id: dict[str, Instrument] = {i.id: i for i in instruments}

    def __iter__(self) -> Iterator[Instrument]:
        return iter(list(self._by_id.values()))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, instrument_id: object) -> bool:
        return instrument_id in self._by_id

    def get(self, instrument_id: str) -> Instrument:
        try:
            return self._by_id[instrument_id]
        except KeyError:
            raise UnknownInstrumentError(instrument_id) from None

    def find(self, symbol: str, exchange: Exchange | str) -> Instrument | None:
        sym = symbol.upper().strip()
        exch = Exchange(exchange)
        for inst in self._by_id.values():
            if inst.symbol == sym and inst.exchange == exch:
                return inst
        return None

    def listings(self, symbol: str) -> list[Instrument]:
        sym = symbol.upper().strip()
        return [i for i in self._by_id.values() if i.symbol == sym]

    def symbols(self) -> list[str]:
        """Unique symbols, registry order."""
        return list(dict.fromkeys(i.symbol for i in self._by_id.values()))

    def prices(self) -> dict[str, float]:
        return {i.id: i.price for i in self._by_id.values()}

    def price_of(self, instrument_id: str) -> float | None:
        inst = self._by_id.get(instrument_id)
        return inst.price if inst else None

    def replace(self, instrument: Instrument) -> None:
        if instrument.id not in self._by_id:
            raise UnknownInstrumentError(instrument.id)
        self._by_id[instrument.id] = instrument

    def replace_all(self, instruments: Iterable[Instrument]) -> None:
        for inst in instruments:
            self.replace(inst)

    def add(
        self,
        symbol: str,
        exchange: Exchange | str,
        *,
        price: float | None = None,
        name: str | None = None,
        rng: random.Random | None = None,
    ) -> Instrument:
        """Add a custom listing at the front of the watchlist.

        Without a price the listing starts at a random whole price in [100, 5100).
        """
        sym = symbol.upper().strip()
        exch = Exchange(exchange)
        if not sym:
            raise ValueError("Symbol must not be empty")
        if self.find(sym, exch) is not None:
            raise DuplicateInstrumentError(f"{sym} ({exch.value}) already in watchlist")
        if price is None:
            price = float((rng or random).randrange(100, 5100))
        inst = Instrument(
            id=uuid.uuid4().hex[:9],
            symbol=sym,
            name=name or f"{sym} (Custom)",
            exchange=exch,
            price=price,
            open_price=price,
        )
        self._by_id = {inst.id: inst, **self._by_id}
        logger.info("Added %s (%s) @ %.2f", sym, exch.value, price)
        return inst
