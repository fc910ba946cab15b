"""
Ledger core: wallet, net positions and order log, plus trigger evaluation and valuation.

Pure records and functions; the only stateful piece is LedgerEngine (single writer).
"""

from ledger.contracts import (
    Exchange,
    Instrument,
    LedgerState,
    Order,
    OrderStatus,
    OrderType,
    Position,
    ProductType,
    TradeIntent,
    TransactionType,
    TriggerKind,
    Wallet,
)
from ledger.engine import LedgerEngine, apply_trade, clear_order_log, closing_intent, reset_wallet
from ledger.triggers import TriggerHit, evaluate_triggers, run_triggers, scan_triggers
from ledger.valuation import PortfolioSummary, summarize, total_equity, unrealized_pnl

__all__ = [
    "Exchange",
    "Instrument",
    "LedgerEngine",
    "LedgerState",
    "Order",
    "OrderStatus",
    "OrderType",
    "PortfolioSummary",
    "Position",
    "ProductType",
    "TradeIntent",
    "TransactionType",
    "TriggerHit",
    "TriggerKind",
    "Wallet",
    "apply_trade",
    "clear_order_log",
    "closing_intent",
    "evaluate_triggers",
    "reset_wallet",
    "run_triggers",
    "scan_triggers",
    "summarize",
    "total_equity",
    "unrealized_pnl",
]
