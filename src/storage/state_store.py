"""
Persist and restore the whole session aggregate as one JSON document.

{version, wallet, watchlist, orders, positions, holdings}: written atomically,
validated against STATE_SCHEMA on load. No partial writes, no migrations.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

import jsonschema

from ledger.contracts import (
    Exchange,
    Instrument,
    LedgerState,
    Order,
    OrderStatus,
    OrderType,
    Position,
    ProductType,
    TransactionType,
    TriggerKind,
    Wallet,
)
from storage.schema import STATE_SCHEMA, STATE_VERSION

logger = logging.getLogger("papertrade.storage")


class StateStoreError(Exception):
    """Persisted document is unreadable or fails schema validation."""


@dataclass(frozen=True)
class SessionSnapshot:
    ledger: LedgerState
    watchlist: tuple[Instrument, ...]


def _plain(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(x) for x in obj]
    return obj


def to_document(snapshot: SessionSnapshot) -> dict[str, Any]:
    ledger = snapshot.ledger
    return {
        "version": STATE_VERSION,
        "wallet": _plain(asdict(ledger.wallet)),
        "watchlist": [_plain(asdict(i)) for i in snapshot.watchlist],
        "orders": [_plain(asdict(o)) for o in ledger.orders],
        "positions": [_plain(asdict(p)) for p in ledger.positions],
        "holdings": [_plain(asdict(p)) for p in ledger.holdings],
    }


def _position(raw: dict[str, Any]) -> Position:
    return Position(
        instrument_id=raw["instrument_id"],
        symbol=raw["symbol"],
        quantity=int(raw["quantity"]),
        avg_price=float(raw["avg_price"]),
        stop_loss=raw.get("stop_loss"),
        take_profit=raw.get("take_profit"),
    )


def _instrument(raw: dict[str, Any]) -> Instrument:
    return Instrument(
        id=raw["id"],
        symbol=raw["symbol"],
        name=raw["name"],
        exchange=Exchange(raw["exchange"]),
        price=float(raw["price"]),
        change=float(raw.get("change", 0.0)),
        change_percent=float(raw.get("change_percent", 0.0)),
        open_price=raw.get("open_price"),
    )


def _order(raw: dict[str, Any]) -> Order:
    ts = datetime.fromisoformat(raw["timestamp"].replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    trigger = raw.get("trigger")
    return Order(
        id=raw["id"],
        instrument_id=raw["instrument_id"],
        symbol=raw["symbol"],
        order_type=OrderType(raw["order_type"]),
        product_type=ProductType(raw["product_type"]),
        transaction_type=TransactionType(raw["transaction_type"]),
        quantity=int(raw["quantity"]),
        price=float(raw["price"]),
        status=OrderStatus(raw["status"]),
        timestamp=ts,
        realized_pnl=raw.get("realized_pnl"),
        trigger=TriggerKind(trigger) if trigger else None,
    )


def from_document(doc: Any) -> SessionSnapshot:
    """Validate and rebuild a snapshot. Raises StateStoreError on any schema violation."""
    try:
        jsonschema.validate(instance=doc, schema=STATE_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise StateStoreError(f"State document validation failed: {exc.message}") from exc
    try:
        ledger = LedgerState(
            wallet=Wallet(
                balance=float(doc["wallet"]["balance"]),
                initial_balance=float(doc["wallet"]["initial_balance"]),
            ),
            positions=tuple(_position(p) for p in doc["positions"]),
            orders=tuple(_order(o) for o in doc["orders"]),
            holdings=tuple(_position(p) for p in doc["holdings"]),
        )
    except ValueError as exc:
        raise StateStoreError(f"State document is malformed: {exc}") from exc
    return SessionSnapshot(ledger=ledger, watchlist=tuple(_instrument(i) for i in doc["watchlist"]))


class StateStore:
    """JSON file holding one session. One file per path."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> SessionSnapshot | None:
        """Return the saved snapshot, or None if nothing has been saved yet."""
        if not self._path.exists():
            return None
        try:
            with open(self._path) as f:
                doc = json.load(f)
        except json.JSONDecodeError as exc:
            raise StateStoreError(f"State file is not valid JSON: {exc}") from exc
        snapshot = from_document(doc)
        logger.debug("Loaded state from %s (%d orders)", self._path, len(snapshot.ledger.orders))
        return snapshot

    def save(self, snapshot: SessionSnapshot) -> None:
        """Write the whole document; readers never see a half-written file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(to_document(snapshot), indent=2)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(data)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
