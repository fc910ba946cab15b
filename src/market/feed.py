"""
Price feeds: symbol -> last traded price, or None on failure.

Feeds are collaborators, not core. A failed fetch must never change state or
raise into the tick cycle; use safe_fetch at the call site.
"""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Mapping, Protocol, Sequence

logger = logging.getLogger("papertrade.feed")

_QUOTE_LINE = re.compile(r"^([A-Z0-9&\-]+)\s*:\s*(\d{1,3}(?:,\d{2,3})*(?:\.\d+)?|\d+(?:\.\d+)?)$")


class PriceFeed(Protocol):
    """Protocol for quote sources. Implement per provider."""

    def fetch_prices(self, symbols: Sequence[str]) -> dict[str, float] | None:
        """Return LTP per requested symbol (subset allowed), or None on failure."""
        ...


def parse_quote_lines(text: str) -> dict[str, float] | None:
    """Parse ``SYMBOL: PRICE`` lines strictly.

    Blank lines are skipped. Any other line that does not match, or a
    non-positive price, rejects the whole batch (returns None).
    """
    quotes: dict[str, float] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        m = _QUOTE_LINE.match(line)
        if not m:
            logger.warning("Rejecting quote batch: malformed line %r", line)
            return None
        price = float(m.group(2).replace(",", ""))
        if not math.isfinite(price) or price <= 0:
            logger.warning("Rejecting quote batch: bad price in %r", line)
            return None
        quotes[m.group(1)] = price
    return quotes


class StaticPriceFeed:
    """Returns fixed quotes; for tests and offline runs."""

    def __init__(self, quotes: Mapping[str, float]) -> None:
        self._quotes = dict(quotes)

    def fetch_prices(self, symbols: Sequence[str]) -> dict[str, float] | None:
        return {s: self._quotes[s] for s in symbols if s in self._quotes}


class QuoteFilePriceFeed:
    """Reads ``SYMBOL: PRICE`` lines from a text file on every fetch."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def fetch_prices(self, symbols: Sequence[str]) -> dict[str, float] | None:
        try:
            text = self._path.read_text()
        except OSError as exc:
            logger.warning("Quote file unreadable (%s): %s", self._path, exc)
            return None
        quotes = parse_quote_lines(text)
        if quotes is None:
            return None
        wanted = set(symbols)
        return {s: p for s, p in quotes.items() if s in wanted}


def safe_fetch(feed: PriceFeed, symbols: Sequence[str]) -> dict[str, float] | None:
    """Call *feed*; any exception is logged and reported as None."""
    try:
        return feed.fetch_prices(symbols)
    except Exception as exc:
        logger.warning("Price sync failed: %s", exc)
        return None
