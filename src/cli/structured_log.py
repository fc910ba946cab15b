"""
Structured JSON event logger for Docker observability.

Emits one JSON object per line to stderr. Events are designed to be
parsed by log aggregators (Grafana Loki, CloudWatch, ELK).

Optional webhook: when configured, trade-level events (order_executed,
auto_exit, order_rejected, error) are POSTed to the URL.
"""

from __future__ import annotations

import json
import logging
import sys
import urllib.request
from datetime import datetime, timezone
from typing import Any

from ledger.contracts import Order

logger = logging.getLogger("papertrade.events")


class StructuredEventLogger:
    """Emit structured JSON events to stderr and optional webhook."""

    def __init__(
        self,
        session: str,
        *,
        enabled: bool = True,
        webhook_url: str = "",
        stream: Any = None,
    ) -> None:
        self._session = session
        self._enabled = enabled
        self._webhook_url = webhook_url.strip()
        self._stream = stream or sys.stderr
        self._ALERT_EVENTS = {
            "order_executed",
            "auto_exit",
            "order_rejected",
            "error",
        }

    def _emit(self, event_type: str, **fields: Any) -> dict:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event_type,
            "session": self._session,
            **fields,
        }
        if self._enabled:
            self._stream.write(json.dumps(record) + "\n")
            self._stream.flush()

        if self._webhook_url and event_type in self._ALERT_EVENTS:
            self._post_webhook(record)

        return record

    def _post_webhook(self, record: dict) -> None:
        try:
            data = json.dumps(record).encode("utf-8")
            req = urllib.request.Request(
                self._webhook_url,
                data=data,
                headers={"Content-Type": "application/json"},
                method="POST",
            )
            urllib.request.urlopen(req, timeout=5)
        except Exception as exc:
            logger.warning("Webhook POST failed: %s", exc)

    def order_executed(self, order: Order) -> dict:
        """Listener-compatible: pass as LedgerEngine on_order."""
        if order.trigger is not None:
            return self.auto_exit(order)
        return self._emit(
            "order_executed",
            order_id=order.id,
            symbol=order.symbol,
            side=order.transaction_type.value,
            qty=order.quantity,
            price=order.price,
            realized_pnl=order.realized_pnl,
        )

    def auto_exit(self, order: Order) -> dict:
        return self._emit(
            "auto_exit",
            order_id=order.id,
            symbol=order.symbol,
            trigger=order.trigger.value if order.trigger else None,
            qty=order.quantity,
            price=order.price,
            realized_pnl=order.realized_pnl,
        )

    def order_rejected(self, reason: str) -> dict:
        return self._emit("order_rejected", reason=reason)

    def tick_complete(self, tick: int, exits: int, equity: float) -> dict:
        return self._emit("tick_complete", tick=tick, exits=exits, equity=round(equity, 2))

    def price_sync(self, source: str, updated: int, ok: bool) -> dict:
        return self._emit("price_sync", source=source, updated=updated, ok=ok)

    def error(self, message: str, detail: str = "") -> dict:
        return self._emit("error", message=message, detail=detail)

    def shutdown(self, ticks: int) -> dict:
        return self._emit("shutdown", ticks=ticks)
