"""
Read-only data access for the paper trading dashboard.

Paths come from the same config the CLI uses (session.state_path, journal.path),
so the dashboard always reads the file the CLI writes. Valuation reuses
ledger.valuation; nothing here re-implements P&L.
"""

import json
import os
from pathlib import Path
from typing import Any

from config import load_config
from ledger.contracts import Order
from ledger.valuation import position_pnl, summarize
from storage import SessionSnapshot, StateStore, StateStoreError


def _config_path() -> Path:
    """config.yaml at repo root, or PAPERTRADE_CONFIG if set."""
    if env := os.environ.get("PAPERTRADE_CONFIG"):
        return Path(env)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def resolve_paths(config_path: str | Path | None = None) -> tuple[Path, Path]:
    """(state_path, journal_path) from the app config.

    Relative paths resolve against the working directory, as in the CLI.
    """
    cfg = load_config(config_path or _config_path())
    return Path(cfg.session.state_path), Path(cfg.journal.path)


def load_state(state_path: Path) -> SessionSnapshot | None:
    """Return the saved session, or None if missing or unreadable."""
    try:
        return StateStore(state_path).load()
    except StateStoreError:
        return None


def _latest_prices(snapshot: SessionSnapshot) -> dict[str, float]:
    return {i.id: i.price for i in snapshot.watchlist}


def get_positions(snapshot: SessionSnapshot) -> list[dict[str, Any]]:
    """Open positions with LTP and mark-to-market P&L (LTP falls back to avg price)."""
    prices = _latest_prices(snapshot)
    out = []
    for p in snapshot.ledger.positions:
        ltp = prices.get(p.instrument_id) or p.avg_price
        out.append(
            {
                "symbol": p.symbol,
                "quantity": p.quantity,
                "avg_price": p.avg_price,
                "ltp": ltp,
                "pnl": position_pnl(p, ltp),
                "stop_loss": p.stop_loss,
                "take_profit": p.take_profit,
            }
        )
    return out


def get_wallet_summary(snapshot: SessionSnapshot) -> dict[str, float]:
    summary = summarize(snapshot.ledger, _latest_prices(snapshot).get)
    return {
        "balance": summary.balance,
        "invested": summary.invested_value,
        "m2m": summary.unrealized_pnl,
        "realized": summary.realized_pnl,
        "equity": summary.total_equity,
    }


def get_recent_orders(snapshot: SessionSnapshot, limit: int = 20) -> list[Order]:
    """Most recent orders first (the ledger already keeps them newest-first)."""
    return list(snapshot.ledger.orders[:limit])


def get_recent_journal_events(
    journal_path: Path,
    event_type: str | None = None,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """
    Read last `limit` journal events.
    If event_type is set, filter to that event (order, auto_exit, square_off, ...).
    Returns list of parsed JSON objects (newest first).
    """
    if not journal_path.exists():
        return []
    lines: list[str] = []
    try:
        with open(journal_path) as f:
            for line in f:
                line = line.strip()
                if line:
                    lines.append(line)
    except OSError:
        return []
    # Take last N, then reverse so newest first
    chosen = lines[-limit:] if limit else lines
    chosen.reverse()
    out = []
    for line in chosen:
        try:
            obj = json.loads(line)
            if event_type is None or obj.get("event") == event_type:
                out.append(obj)
        except json.JSONDecodeError:
            continue
    return out
