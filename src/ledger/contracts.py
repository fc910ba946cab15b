"""
Data contracts for the ledger: Instrument, TradeIntent, Position, Order, Wallet, LedgerState.

All records are frozen dataclasses. The engine never mutates a record in place;
every update produces a new value. No I/O here.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Exchange(str, Enum):
    NSE = "NSE"
    BSE = "BSE"


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class ProductType(str, Enum):
    """Accounting tag only; no margin difference is modelled."""

    CNC = "CNC"  # delivery
    MIS = "MIS"  # intraday


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderStatus(str, Enum):
    """Only EXECUTED is produced by the ledger (no resting or partial orders)."""

    PENDING = "PENDING"
    EXECUTED = "EXECUTED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


class TriggerKind(str, Enum):
    TAKE_PROFIT = "take_profit"
    STOP_LOSS = "stop_loss"


@dataclass(frozen=True)
class Instrument:
    """One exchange listing and its latest price.

    ``open_price`` is the session-open reference that ``change`` and
    ``change_percent`` are measured against. ``None`` means it has not been
    pinned yet and is back-derived from price and change_percent on first use.
    """

    id: str
    symbol: str
    name: str
    exchange: Exchange
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    open_price: float | None = None


@dataclass(frozen=True)
class TradeIntent:
    """A request to trade, already validated by the caller."""

    instrument_id: str
    symbol: str
    transaction_type: TransactionType
    quantity: int
    price: float
    product_type: ProductType = ProductType.CNC
    order_type: OrderType = OrderType.MARKET
    stop_loss: float | None = None
    take_profit: float | None = None
    trigger: TriggerKind | None = None  # set only on synthetic auto-exits

    @property
    def is_buy(self) -> bool:
        return self.transaction_type == TransactionType.BUY

    @property
    def signed_quantity(self) -> int:
        return self.quantity if self.is_buy else -self.quantity

    @property
    def value(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class Position:
    """Net position in one instrument. quantity > 0 long, < 0 short, never 0."""

    instrument_id: str
    symbol: str
    quantity: int
    avg_price: float
    stop_loss: float | None = None
    take_profit: float | None = None

    @property
    def is_long(self) -> bool:
        return self.quantity > 0

    @property
    def has_triggers(self) -> bool:
        return bool(self.stop_loss) or bool(self.take_profit)


@dataclass(frozen=True)
class Order:
    """Append-only order log entry."""

    id: str
    instrument_id: str
    symbol: str
    order_type: OrderType
    product_type: ProductType
    transaction_type: TransactionType
    quantity: int
    price: float
    status: OrderStatus
    timestamp: datetime
    realized_pnl: float | None = None
    trigger: TriggerKind | None = None


@dataclass(frozen=True)
class Wallet:
    balance: float
    initial_balance: float

    @property
    def invested_value(self) -> float:
        return self.initial_balance - self.balance


@dataclass(frozen=True)
class LedgerState:
    """Wallet, positions and orders as one consistent snapshot.

    ``orders`` is most-recent-first. ``holdings`` is carried verbatim and
    never touched by the engine.
    """

    wallet: Wallet
    positions: tuple[Position, ...] = ()
    orders: tuple[Order, ...] = ()
    holdings: tuple[Position, ...] = ()

    def position_for(self, instrument_id: str) -> Position | None:
        for p in self.positions:
            if p.instrument_id == instrument_id:
                return p
        return None

    @classmethod
    def fresh(cls, initial_balance: float) -> "LedgerState":
        return cls(wallet=Wallet(balance=initial_balance, initial_balance=initial_balance))
