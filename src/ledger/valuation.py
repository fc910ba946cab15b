"""Portfolio valuation. Read-only; recomputed from the latest snapshot on every call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from ledger.contracts import LedgerState, Order, Position, Wallet

PriceLookup = Callable[[str], "float | None"]


@dataclass(frozen=True)
class PortfolioSummary:
    balance: float
    invested_value: float
    unrealized_pnl: float
    realized_pnl: float
    total_equity: float
    open_positions: int


def position_pnl(position: Position, ltp: float | None) -> float:
    """Mark-to-market P&L of one position. Unknown LTP marks at cost (zero P&L)."""
    price = ltp if ltp else position.avg_price
    return (price - position.avg_price) * position.quantity


def unrealized_pnl(positions: Iterable[Position], latest_price_of: PriceLookup) -> float:
    return sum(position_pnl(p, latest_price_of(p.instrument_id)) for p in positions)


def total_equity(wallet: Wallet, unrealized: float) -> float:
    return wallet.balance + unrealized


def realized_pnl(orders: Iterable[Order]) -> float:
    return sum(o.realized_pnl for o in orders if o.realized_pnl is not None)


def summarize(state: LedgerState, latest_price_of: PriceLookup) -> PortfolioSummary:
    upnl = unrealized_pnl(state.positions, latest_price_of)
    return PortfolioSummary(
        balance=state.wallet.balance,
        invested_value=state.wallet.invested_value,
        unrealized_pnl=upnl,
        realized_pnl=realized_pnl(state.orders),
        total_equity=total_equity(state.wallet, upnl),
        open_positions=len(state.positions),
    )
