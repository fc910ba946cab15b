"""
Human-readable account output for the terminal.

Every CLI command uses these formatters. Journal receives the same data.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Iterable, Sequence

from ledger.contracts import Instrument, Order, Position
from ledger.valuation import PortfolioSummary, position_pnl
from market.registry import InstrumentRegistry


def _signed(value: float) -> str:
    return f"{'+' if value >= 0 else '-'}₹{abs(value):,.2f}"


def format_summary(summary: PortfolioSummary) -> str:
    """Wallet and portfolio figures."""
    lines = [
        "=== Account Status ===",
        f"Cash              : ₹{summary.balance:,.2f}",
        f"Invested value    : ₹{summary.invested_value:,.2f}",
        f"M2M P&L           : {_signed(summary.unrealized_pnl)}",
        f"Realized P&L      : {_signed(summary.realized_pnl)}",
        f"Total equity      : ₹{summary.total_equity:,.2f}",
        f"Open positions    : {summary.open_positions}",
        "===",
    ]
    return "\n".join(lines)


def format_positions(positions: Sequence[Position], price_of: Callable[[str], float | None]) -> str:
    if not positions:
        return "Positions: flat (no open positions)"
    lines = [f"{'Symbol':12s} {'Side':5s} {'Qty':>7s} {'Avg':>11s} {'LTP':>11s} {'P&L':>14s}  SL / TP"]
    for p in positions:
        ltp = price_of(p.instrument_id) or p.avg_price
        sl = f"{p.stop_loss:.2f}" if p.stop_loss else "-"
        tp = f"{p.take_profit:.2f}" if p.take_profit else "-"
        lines.append(
            f"{p.symbol:12s} {'LONG' if p.is_long else 'SHORT':5s} {abs(p.quantity):>7d} "
            f"{p.avg_price:>11.2f} {ltp:>11.2f} {_signed(position_pnl(p, ltp)):>14s}  {sl} / {tp}"
        )
    return "\n".join(lines)


def format_order(order: Order) -> str:
    pnl = f"  P&L {_signed(order.realized_pnl)}" if order.realized_pnl is not None else ""
    tag = f"  [{order.trigger.value}]" if order.trigger else ""
    return (
        f"{order.timestamp:%H:%M:%S}  {order.transaction_type.value:4s} {order.quantity:>6d} "
        f"{order.symbol:10s} @ {order.price:>10.2f}  {order.product_type.value} {order.order_type.value}"
        f"  {order.status.value}{pnl}{tag}"
    )


def group_orders_by_date(orders: Iterable[Order]) -> "OrderedDict[str, list[Order]]":
    """Orders bucketed by calendar day, newest day first; order within a day is preserved."""
    ordered = sorted(orders, key=lambda o: o.timestamp, reverse=True)
    groups: OrderedDict[str, list[Order]] = OrderedDict()
    for order in ordered:
        groups.setdefault(order.timestamp.strftime("%d %b %Y"), []).append(order)
    return groups


def format_orders(orders: Sequence[Order]) -> str:
    if not orders:
        return "No orders yet."
    lines: list[str] = []
    for day, day_orders in group_orders_by_date(orders).items():
        lines.append(f"--- {day} ({len(day_orders)}) ---")
        lines.extend(f"  {format_order(o)}" for o in day_orders)
    return "\n".join(lines)


def format_instrument(inst: Instrument) -> str:
    return (
        f"{inst.symbol:12s} {inst.exchange.value:4s} {inst.price:>11.2f} "
        f"{inst.change:>+9.2f} ({inst.change_percent:+.2f}%)  {inst.name}"
    )


def format_watchlist(registry: InstrumentRegistry) -> str:
    if not len(registry):
        return "Watchlist is empty."
    return "\n".join(format_instrument(i) for i in registry)
