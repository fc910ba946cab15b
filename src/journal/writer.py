"""
Structured journal: append-only JSON lines. One record per ledger event.
"""

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from ledger.contracts import Order


def _serialize(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return _serialize(asdict(obj))
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(x) for x in obj]
    return obj


class JournalWriter:
    """Append-only journal. Each line is a JSON object with event type and payload."""

    def __init__(self, path: str | Path, *, echo_stdout: bool = False) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._echo = echo_stdout

    def _write(self, event_type: str, payload: dict) -> None:
        record = {"ts_utc": datetime.now(timezone.utc).isoformat(), "event": event_type, **payload}
        line = json.dumps(_serialize(record)) + "\n"
        with open(self._path, "a") as f:
            f.write(line)
        if self._echo:
            print(line.rstrip())

    def order(self, order: Order, **extra: Any) -> None:
        """Every executed order; auto-exits are also written as ``auto_exit``."""
        self._write("order", {"order": order, **extra})
        if order.trigger is not None:
            self.auto_exit(order)

    def auto_exit(self, order: Order) -> None:
        self._write(
            "auto_exit",
            {
                "order_id": order.id,
                "symbol": order.symbol,
                "trigger": order.trigger,
                "qty": order.quantity,
                "price": order.price,
                "realized_pnl": order.realized_pnl,
            },
        )

    def square_off(self, closed: int, realized_pnl: float) -> None:
        self._write("square_off", {"closed": closed, "realized_pnl": realized_pnl})

    def orders_cleared(self, count: int) -> None:
        self._write("orders_cleared", {"count": count})

    def wallet_reset(self, initial_balance: float) -> None:
        self._write("wallet_reset", {"initial_balance": initial_balance})

    def price_sync(self, source: str, updated: int, ok: bool, **extra: Any) -> None:
        self._write("price_sync", {"source": source, "updated": updated, "ok": ok, **extra})
