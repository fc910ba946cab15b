"""
Market side: instrument registry, price propagation, quote and commentary feeds.

Depends on ledger.contracts for Instrument; nothing in ledger depends back on market.
"""

from market.feed import PriceFeed, QuoteFilePriceFeed, StaticPriceFeed, parse_quote_lines, safe_fetch
from market.prices import MIN_PRICE, apply_external_price, apply_quotes, start_session, tick, tick_all
from market.registry import (
    DEFAULT_INSTRUMENTS,
    DuplicateInstrumentError,
    InstrumentRegistry,
    UnknownInstrumentError,
)

__all__ = [
    "DEFAULT_INSTRUMENTS",
    "DuplicateInstrumentError",
    "InstrumentRegistry",
    "MIN_PRICE",
    "PriceFeed",
    "QuoteFilePriceFeed",
    "StaticPriceFeed",
    "UnknownInstrumentError",
    "apply_external_price",
    "apply_quotes",
    "get_alpaca_feed",
    "parse_quote_lines",
    "safe_fetch",
    "start_session",
    "tick",
    "tick_all",
]


def get_alpaca_feed(api_key: str, api_secret: str):
    """Lazy import to avoid requiring alpaca-py when not used."""
    from market.alpaca_feed import AlpacaPriceFeed

    return AlpacaPriceFeed(api_key, api_secret)
