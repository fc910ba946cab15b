"""Tests for structured JSON event logger."""

import io
import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from cli.structured_log import StructuredEventLogger
from ledger.contracts import Order, OrderStatus, OrderType, ProductType, TransactionType, TriggerKind


def _order(trigger=None) -> Order:
    return Order(
        id="o1",
        instrument_id="inf",
        symbol="INFY",
        order_type=OrderType.MARKET,
        product_type=ProductType.CNC,
        transaction_type=TransactionType.BUY,
        quantity=5,
        price=100.0,
        status=OrderStatus.EXECUTED,
        timestamp=datetime(2026, 2, 17, tzinfo=timezone.utc),
        realized_pnl=12.5 if trigger else None,
        trigger=trigger,
    )


@pytest.fixture
def buf() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(buf: io.StringIO) -> StructuredEventLogger:
    return StructuredEventLogger("data/paper_state.json", enabled=True, stream=buf)


class TestEmit:
    """Basic event emission and format."""

    def test_order_executed_json(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.order_executed(_order())
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "order_executed"
        assert record["session"] == "data/paper_state.json"
        assert record["side"] == "BUY"
        assert record["qty"] == 5
        assert record["realized_pnl"] is None
        assert "ts" in record

    def test_triggered_order_is_auto_exit(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.order_executed(_order(trigger=TriggerKind.TAKE_PROFIT))
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "auto_exit"
        assert record["trigger"] == "take_profit"
        assert record["realized_pnl"] == 12.5

    def test_order_rejected(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.order_rejected(reason="Insufficient funds")
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "order_rejected"
        assert record["reason"] == "Insufficient funds"

    def test_tick_complete(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.tick_complete(tick=3, exits=1, equity=1_000_123.456)
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "tick_complete"
        assert record["tick"] == 3
        assert record["exits"] == 1
        assert record["equity"] == 1_000_123.46

    def test_price_sync(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.price_sync(source="alpaca", updated=0, ok=False)
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "price_sync"
        assert record["ok"] is False

    def test_error_event(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.error(message="State save failed", detail="PermissionError")
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "error"
        assert record["message"] == "State save failed"
        assert record["detail"] == "PermissionError"

    def test_shutdown(self, logger: StructuredEventLogger, buf: io.StringIO) -> None:
        logger.shutdown(ticks=42)
        record = json.loads(buf.getvalue().strip())
        assert record["event"] == "shutdown"
        assert record["ticks"] == 42


class TestDisabled:
    """When structured_logs=False, nothing is written to stream."""

    def test_no_output_when_disabled(self, buf: io.StringIO) -> None:
        logger = StructuredEventLogger("s", enabled=False, stream=buf)
        logger.order_executed(_order())
        logger.tick_complete(tick=1, exits=0, equity=1.0)
        logger.shutdown(ticks=1)
        assert buf.getvalue() == ""


class TestWebhook:
    """Alert events go to the webhook; routine events do not."""

    def test_alert_events_posted(self, buf: io.StringIO) -> None:
        logger = StructuredEventLogger("s", stream=buf, webhook_url="https://hooks.example.com/x")
        with patch("cli.structured_log.urllib.request.urlopen") as urlopen:
            logger.order_executed(_order())
            logger.tick_complete(tick=1, exits=0, equity=1.0)
            logger.order_rejected(reason="nope")
        assert urlopen.call_count == 2

    def test_webhook_failure_does_not_raise(self, buf: io.StringIO) -> None:
        logger = StructuredEventLogger("s", stream=buf, webhook_url="https://hooks.example.com/x")
        with patch("cli.structured_log.urllib.request.urlopen", side_effect=OSError("refused")):
            record = logger.error(message="boom")
        assert record["event"] == "error"


class TestReturnValue:
    """Each method returns the record dict for testability."""

    def test_returns_record(self, logger: StructuredEventLogger) -> None:
        record = logger.shutdown(ticks=3)
        assert isinstance(record, dict)
        assert record["event"] == "shutdown"
        assert record["ticks"] == 3
