"""Tests for journal writer. Append-only; auto-exits recorded twice (order + auto_exit)."""

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from journal.writer import JournalWriter
from ledger.contracts import Order, OrderStatus, OrderType, ProductType, TransactionType, TriggerKind


def _order(trigger=None, realized=None) -> Order:
    return Order(
        id="abc123",
        instrument_id="inf",
        symbol="INFY",
        order_type=OrderType.MARKET,
        product_type=ProductType.MIS if trigger else ProductType.CNC,
        transaction_type=TransactionType.SELL,
        quantity=10,
        price=112.5,
        status=OrderStatus.EXECUTED,
        timestamp=datetime(2026, 2, 17, 10, 0, tzinfo=timezone.utc),
        realized_pnl=realized,
        trigger=trigger,
    )


def _lines(path: Path) -> list[dict]:
    with open(path) as f:
        return [json.loads(line) for line in f]


def test_journal_writer_append_only() -> None:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".jsonl", delete=False) as f:
        path = Path(f.name)
    try:
        j = JournalWriter(path)
        j.order(_order())
        j.orders_cleared(3)
        records = _lines(path)
        assert len(records) == 2
        r0 = records[0]
        assert r0["event"] == "order"
        assert r0["order"]["symbol"] == "INFY"
        assert r0["order"]["transaction_type"] == "SELL"
        assert r0["order"]["timestamp"].startswith("2026-02-17T10:00:00")
        assert "ts_utc" in r0
        assert records[1]["event"] == "orders_cleared"
        assert records[1]["count"] == 3
    finally:
        path.unlink(missing_ok=True)


def test_journal_auto_exit_written_after_order(tmp_path: Path) -> None:
    path = tmp_path / "journal.jsonl"
    JournalWriter(path).order(_order(trigger=TriggerKind.STOP_LOSS, realized=-25.0))
    records = _lines(path)
    assert [r["event"] for r in records] == ["order", "auto_exit"]
    exit_rec = records[1]
    assert exit_rec["trigger"] == "stop_loss"
    assert exit_rec["qty"] == 10
    assert exit_rec["realized_pnl"] == -25.0


def test_journal_session_events(tmp_path: Path) -> None:
    path = tmp_path / "sub" / "journal.jsonl"
    j = JournalWriter(path)
    j.square_off(2, 150.0)
    j.wallet_reset(1_000_000.0)
    j.price_sync("file", 4, True, exits=1)
    records = _lines(path)
    assert [r["event"] for r in records] == ["square_off", "wallet_reset", "price_sync"]
    assert records[0]["closed"] == 2
    assert records[1]["initial_balance"] == 1_000_000.0
    assert records[2]["ok"] is True
    assert records[2]["exits"] == 1


def test_journal_echo_stdout(tmp_path: Path, capsys) -> None:
    JournalWriter(tmp_path / "j.jsonl", echo_stdout=True).orders_cleared(0)
    assert '"orders_cleared"' in capsys.readouterr().out
