"""
Pre-ledger order checks.

The ledger applies whatever it is given; everything that can make an intent
unacceptable is decided here, before submission:

- quantity must be a positive whole number
- price must be positive and finite
- the instrument must be in the registry
- stop-loss / take-profit, when given, must be positive
- a BUY must not cost more than the free balance
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ledger.contracts import TradeIntent, Wallet
from market.registry import InstrumentRegistry


@dataclass
class OrderCheck:
    allowed: bool
    reason: str = ""


def check_intent(intent: TradeIntent, registry: InstrumentRegistry, wallet: Wallet) -> OrderCheck:
    """Return OrderCheck(allowed=True) or the first reason the intent is rejected."""
    if isinstance(intent.quantity, bool) or not isinstance(intent.quantity, int) or intent.quantity <= 0:
        return OrderCheck(allowed=False, reason=f"Quantity must be a positive whole number, got {intent.quantity!r}")

    if not math.isfinite(intent.price) or intent.price <= 0:
        return OrderCheck(allowed=False, reason=f"Price must be positive, got {intent.price!r}")

    if intent.instrument_id not in registry:
        return OrderCheck(allowed=False, reason=f"Unknown instrument: {intent.symbol} ({intent.instrument_id})")

    for label, level in (("Stop loss", intent.stop_loss), ("Take profit", intent.take_profit)):
        if level is not None and (not math.isfinite(level) or level <= 0):
            return OrderCheck(allowed=False, reason=f"{label} must be positive, got {level!r}")

    if intent.is_buy and intent.value > wallet.balance:
        return OrderCheck(
            allowed=False,
            reason=f"Insufficient funds: need {intent.value:,.2f}, available {wallet.balance:,.2f}",
        )

    return OrderCheck(allowed=True)
