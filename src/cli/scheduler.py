"""
Live paper-trading loop: one price update per interval, then SL/TP exits,
then save.

feed.source = simulated  -> random-walk tick
feed.source = alpaca     -> latest trades from Alpaca
feed.source = file       -> quotes re-read from a text file

Feed failures keep the previous prices; the loop never stops on them.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable

import click

from cli.structured_log import StructuredEventLogger
from config.loader import AppConfig
from execution.session import PaperSession
from ledger.triggers import TriggerHit
from market.feed import PriceFeed, QuoteFilePriceFeed

logger = logging.getLogger("papertrade.scheduler")


def build_feed(cfg: AppConfig) -> PriceFeed | None:
    """Quote feed for the configured source; None means simulate."""
    if cfg.feed.source == "alpaca":
        from market import get_alpaca_feed

        return get_alpaca_feed(cfg.feed.api_key, cfg.feed.api_secret)
    if cfg.feed.source == "file":
        if not cfg.feed.quotes_path:
            raise ValueError("feed.quotes_path is required when feed.source is 'file'")
        return QuoteFilePriceFeed(cfg.feed.quotes_path)
    return None


def run_cycle(session: PaperSession, feed: PriceFeed | None) -> tuple[list[TriggerHit], bool]:
    """One update: tick or sync, then triggers. Returns (exits, prices_updated)."""
    if feed is None:
        return session.process_tick(), True
    result = session.sync_prices(feed)
    if result is None:
        return [], False
    _, hits = result
    return hits, True


def echo_exits(hits: list[TriggerHit]) -> None:
    for hit in hits:
        click.echo(
            f"[{datetime.now():%H:%M:%S}] {hit.kind.value.replace('_', ' ').title()} hit: "
            f"{hit.intent.transaction_type.value} {hit.intent.quantity} {hit.position.symbol} @ {hit.price:.2f}"
        )


def run_tick_loop(
    session: PaperSession,
    cfg: AppConfig,
    *,
    max_ticks: int | None = None,
    events: StructuredEventLogger | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Main loop: update prices, fire exits, save, sleep. Ctrl+C for graceful shutdown.
    Returns the number of completed ticks.
    """
    feed = build_feed(cfg)
    interval = cfg.market.tick_interval_seconds
    ticks = 0

    click.echo(f"Paper session running ({cfg.feed.source} prices, every {interval:g}s)  |  Ctrl+C to stop\n")

    try:
        while max_ticks is None or ticks < max_ticks:
            hits, ok = run_cycle(session, feed)
            if not ok:
                click.echo(f"[{datetime.now():%H:%M:%S}] Price sync failed; keeping previous prices.")
                if events:
                    events.price_sync(cfg.feed.source, 0, False)
            echo_exits(hits)
            session.save()
            ticks += 1
            if events:
                events.tick_complete(ticks, len(hits), session.summary().total_equity)
            if max_ticks is None or ticks < max_ticks:
                sleep(interval)
    except KeyboardInterrupt:
        session.save()
        click.echo(f"\n\nShutting down after {ticks} tick(s). Goodbye.")

    if events:
        events.shutdown(ticks)
    return ticks
