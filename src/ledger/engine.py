"""
Ledger engine: apply trade intents to {wallet, positions, orders} atomically.

Weighted-average-cost accounting. Reducing trades realize P&L on the closed
size; a trade larger than the open position flips it and the residual opens
at the fill price. No validation here: intents arrive pre-checked.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable

from ledger.contracts import (
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

logger = logging.getLogger("papertrade.ledger")

PriceLookup = Callable[[str], "float | None"]
OrderListener = Callable[[Order], None]


def _new_order_id() -> str:
    return uuid.uuid4().hex[:9]


def _realized(position: Position, intent: TradeIntent) -> float | None:
    """P&L locked in by *intent* against *position*, or None if it does not reduce."""
    reducing = (position.quantity > 0 and not intent.is_buy) or (position.quantity < 0 and intent.is_buy)
    if not reducing:
        return None
    closed = min(abs(position.quantity), intent.quantity)
    if intent.is_buy:
        return (position.avg_price - intent.price) * closed
    return (intent.price - position.avg_price) * closed


def _next_position(position: Position, intent: TradeIntent) -> Position | None:
    new_qty = position.quantity + intent.signed_quantity
    if new_qty == 0:
        return None

    adding = (position.quantity > 0) == intent.is_buy
    if adding:
        avg = (abs(position.avg_price * position.quantity) + intent.price * intent.quantity) / abs(new_qty)
    elif (new_qty > 0) != (position.quantity > 0):
        avg = intent.price  # flipped: residual is a fresh entry
    else:
        avg = position.avg_price  # partial reduce keeps the cost basis

    return replace(
        position,
        quantity=new_qty,
        avg_price=avg,
        stop_loss=intent.stop_loss or position.stop_loss,
        take_profit=intent.take_profit or position.take_profit,
    )


def apply_trade(
    state: LedgerState,
    intent: TradeIntent,
    *,
    order_id: str | None = None,
    now: datetime | None = None,
) -> LedgerState:
    """Return the snapshot after *intent* executes. *state* is left untouched."""
    existing = state.position_for(intent.instrument_id)
    realized_pnl: float | None = None

    if existing is None:
        positions = state.positions + (
            Position(
                instrument_id=intent.instrument_id,
                symbol=intent.symbol,
                quantity=intent.signed_quantity,
                avg_price=intent.price,
                stop_loss=intent.stop_loss,
                take_profit=intent.take_profit,
            ),
        )
    else:
        realized_pnl = _realized(existing, intent)
        updated = _next_position(existing, intent)
        positions = tuple(
            updated if p.instrument_id == intent.instrument_id else p
            for p in state.positions
            if p.instrument_id != intent.instrument_id or updated is not None
        )

    order = Order(
        id=order_id or _new_order_id(),
        instrument_id=intent.instrument_id,
        symbol=intent.symbol,
        order_type=intent.order_type,
        product_type=intent.product_type,
        transaction_type=intent.transaction_type,
        quantity=intent.quantity,
        price=intent.price,
        status=OrderStatus.EXECUTED,
        timestamp=now or datetime.now(timezone.utc),
        realized_pnl=realized_pnl,
        trigger=intent.trigger,
    )
    cash_delta = -intent.value if intent.is_buy else intent.value
    wallet = replace(state.wallet, balance=state.wallet.balance + cash_delta)
    return replace(state, wallet=wallet, positions=positions, orders=(order,) + state.orders)


def clear_order_log(state: LedgerState) -> LedgerState:
    return replace(state, orders=())


def reset_wallet(state: LedgerState, initial_balance: float) -> LedgerState:
    """Destructive session reset: fresh wallet, no positions, no orders. Holdings survive."""
    return replace(
        state,
        wallet=Wallet(balance=initial_balance, initial_balance=initial_balance),
        positions=(),
        orders=(),
    )


def closing_intent(
    position: Position,
    price: float,
    *,
    product_type: ProductType = ProductType.CNC,
    trigger: TriggerKind | None = None,
) -> TradeIntent:
    """MARKET intent that fully closes *position* at *price*."""
    return TradeIntent(
        instrument_id=position.instrument_id,
        symbol=position.symbol,
        transaction_type=TransactionType.SELL if position.quantity > 0 else TransactionType.BUY,
        quantity=abs(position.quantity),
        price=price,
        product_type=product_type,
        order_type=OrderType.MARKET,
        trigger=trigger,
    )


class LedgerEngine:
    """
    Single writer over one LedgerState.

    Every mutation is a read-modify-write of the whole snapshot under a lock, so
    readers of ``state`` always see a consistent wallet/positions/orders triple.
    Intents derived from the current positions (exits, trigger closes) are built
    inside the same critical section that applies them. Price lookups and
    listeners run outside the lock.
    """

    def __init__(self, state: LedgerState, *, on_order: OrderListener | None = None) -> None:
        self._state = state
        self._lock = threading.Lock()
        self._listeners: list[OrderListener] = [on_order] if on_order else []

    @property
    def state(self) -> LedgerState:
        return self._state

    def subscribe(self, listener: OrderListener) -> None:
        self._listeners.append(listener)

    def _apply_locked(self, intent: TradeIntent) -> Order:
        # caller holds self._lock
        self._state = apply_trade(self._state, intent)
        return self._state.orders[0]

    def _notify(self, orders: Iterable[Order]) -> None:
        for order in orders:
            logger.info(
                "Executed %s %d %s @ %.2f%s",
                order.transaction_type.value,
                order.quantity,
                order.symbol,
                order.price,
                f" (realized {order.realized_pnl:+.2f})" if order.realized_pnl is not None else "",
            )
            for listener in self._listeners:
                listener(order)

    def transact(self, plan: Callable[[LedgerState], Iterable[TradeIntent]]) -> list[Order]:
        """Build intents from the current snapshot with *plan* and apply them atomically.

        *plan* runs under the lock and must be pure (no I/O, no engine calls).
        """
        with self._lock:
            orders = [self._apply_locked(intent) for intent in list(plan(self._state))]
        self._notify(orders)
        return orders

    def apply_trade(self, intent: TradeIntent) -> LedgerState:
        with self._lock:
            order = self._apply_locked(intent)
            state = self._state
        self._notify([order])
        return state

    def apply_all(self, intents: Iterable[TradeIntent]) -> LedgerState:
        """Apply intents in order, as one critical section."""
        batch = list(intents)
        self.transact(lambda _state: batch)
        return self._state

    def clear_order_log(self) -> LedgerState:
        with self._lock:
            self._state = clear_order_log(self._state)
            return self._state

    def reset_wallet(self, initial_balance: float) -> LedgerState:
        with self._lock:
            self._state = reset_wallet(self._state, initial_balance)
            logger.info("Wallet reset to %.2f", initial_balance)
            return self._state

    def exit_position(self, instrument_id: str, price_of: PriceLookup) -> Order | None:
        """Close one position at its latest price (avg price if unknown). None if flat."""
        ltp = price_of(instrument_id)

        def plan(state: LedgerState) -> list[TradeIntent]:
            position = state.position_for(instrument_id)
            if position is None:
                return []
            return [closing_intent(position, ltp or position.avg_price)]

        orders = self.transact(plan)
        return orders[0] if orders else None

    def square_off_all(self, price_of: PriceLookup) -> list[Order]:
        """Close every open position at market. Returns the exit orders, oldest first."""
        prices = {p.instrument_id: price_of(p.instrument_id) for p in self._state.positions}

        def plan(state: LedgerState) -> list[TradeIntent]:
            return [closing_intent(p, prices.get(p.instrument_id) or p.avg_price) for p in state.positions]

        return self.transact(plan)
