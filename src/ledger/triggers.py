"""
Trigger evaluator: stop-loss / take-profit auto-exits.

Long:  TP when price >= take_profit, SL when price <= stop_loss.
Short: TP when price <= take_profit, SL when price >= stop_loss.

At most one full-close MARKET exit per position per tick, booked as MIS.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from ledger.contracts import LedgerState, Position, ProductType, TradeIntent, TriggerKind
from ledger.engine import LedgerEngine, closing_intent


@dataclass(frozen=True)
class TriggerHit:
    """A position that crossed a threshold, and the exit intent it produced."""

    position: Position
    kind: TriggerKind
    price: float
    intent: TradeIntent


def _take_profit_hit(position: Position, price: float) -> bool:
    if not position.take_profit:
        return False
    if position.quantity > 0:
        return price >= position.take_profit
    return price <= position.take_profit


def _stop_loss_hit(position: Position, price: float) -> bool:
    if not position.stop_loss:
        return False
    if position.quantity > 0:
        return price <= position.stop_loss
    return price >= position.stop_loss


def scan_triggers(positions: Iterable[Position], latest_prices: Mapping[str, float]) -> list[TriggerHit]:
    """Check every position with SL/TP against its instrument's latest price.

    Positions without a latest price are skipped. When both conditions hold the
    hit is labelled stop-loss; either way a single exit is produced.
    """
    hits: list[TriggerHit] = []
    for position in positions:
        if not position.has_triggers:
            continue
        price = latest_prices.get(position.instrument_id)
        if price is None:
            continue
        kind = None
        if _take_profit_hit(position, price):
            kind = TriggerKind.TAKE_PROFIT
        if _stop_loss_hit(position, price):
            kind = TriggerKind.STOP_LOSS
        if kind is None:
            continue
        intent = closing_intent(position, price, product_type=ProductType.MIS, trigger=kind)
        hits.append(TriggerHit(position=position, kind=kind, price=price, intent=intent))
    return hits


def evaluate_triggers(positions: Iterable[Position], latest_prices: Mapping[str, float]) -> list[TradeIntent]:
    """Synthetic exit intents for every triggered position, in position order."""
    return [hit.intent for hit in scan_triggers(positions, latest_prices)]


def run_triggers(engine: LedgerEngine, latest_prices: Mapping[str, float]) -> list[TriggerHit]:
    """Evaluate triggers on the engine's current positions and apply the exits in the same pass.

    Scan and apply share one critical section, so a concurrent manual exit
    cannot leave a stale full-close quantity behind.
    """
    hits: list[TriggerHit] = []

    def plan(state: LedgerState) -> list[TradeIntent]:
        hits.extend(scan_triggers(state.positions, latest_prices))
        return [hit.intent for hit in hits]

    engine.transact(plan)
    return hits
