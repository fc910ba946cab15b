"""
CLI entry point: papertrade status | buy | sell | exit | square-off | orders | tick | sync | run ...

Every command loads config from --config (default config.yaml), restores the
saved session, prints a human-readable result, journals every executed order
and saves the session before returning.
"""

import logging
import sys

import click
from dotenv import load_dotenv

from config import load_config

load_dotenv()

logger = logging.getLogger("papertrade")

EXCHANGES = click.Choice(["NSE", "BSE"], case_sensitive=False)
PRODUCTS = click.Choice(["CNC", "MIS"], case_sensitive=False)


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """papertrade: paper trading ledger with stop-loss / take-profit auto-exits."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _open(ctx: click.Context):
    """Load config and session; wire journal and structured events to the ledger."""
    from cli.structured_log import StructuredEventLogger
    from execution import PaperSession
    from journal import JournalWriter
    from storage import StateStoreError

    cfg = load_config(ctx.obj["config_path"])
    try:
        session = PaperSession.open(cfg)
    except StateStoreError as exc:
        raise click.ClickException(f"Cannot load saved session: {exc}")
    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout)
    events = StructuredEventLogger(
        cfg.session.state_path,
        enabled=cfg.alerting.structured_logs,
        webhook_url=cfg.alerting.webhook_url,
    )
    session.engine.subscribe(journal.order)
    session.engine.subscribe(events.order_executed)
    return cfg, session, journal, events


def _resolve(session, symbol: str, exchange: str):
    inst = session.registry.find(symbol, exchange)
    if inst is None:
        raise click.ClickException(
            f"{symbol.upper()} ({exchange.upper()}) is not in the watchlist. Add it with 'papertrade add'."
        )
    return inst


# ---------- status / watchlist ----------


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show wallet, P&L and open positions."""
    from cli.output import format_positions, format_summary

    _, session, _, _ = _open(ctx)
    click.echo(format_summary(session.summary()))
    click.echo(format_positions(session.state.positions, session.registry.price_of))


@cli.command()
@click.pass_context
def watchlist(ctx: click.Context) -> None:
    """List instruments with latest price and session change."""
    from cli.output import format_watchlist

    _, session, _, _ = _open(ctx)
    click.echo(format_watchlist(session.registry))


@cli.command()
@click.argument("symbol")
@click.option("--exchange", type=EXCHANGES, default="NSE", show_default=True)
@click.option("--price", type=float, default=None, help="Starting price (default: random).")
@click.pass_context
def add(ctx: click.Context, symbol: str, exchange: str, price: float | None) -> None:
    """Add a custom instrument to the watchlist."""
    from market.registry import DuplicateInstrumentError

    _, session, _, _ = _open(ctx)
    if price is not None and price <= 0:
        raise click.ClickException("Price must be positive.")
    try:
        inst = session.registry.add(symbol, exchange.upper(), price=price)
    except DuplicateInstrumentError:
        raise click.ClickException(f"{symbol.upper()} ({exchange.upper()}) is already in the watchlist.")
    session.save()
    click.echo(f"Added {inst.symbol} ({inst.exchange.value}) @ {inst.price:.2f}")


# ---------- buy / sell ----------


def _trade(
    ctx: click.Context,
    side: str,
    symbol: str,
    qty: int,
    exchange: str,
    limit: float | None,
    product: str,
    stop_loss: float | None,
    take_profit: float | None,
) -> None:
    from cli.output import format_order
    from ledger.contracts import OrderType, ProductType, TradeIntent, TransactionType

    _, session, _, events = _open(ctx)
    inst = _resolve(session, symbol, exchange)
    intent = TradeIntent(
        instrument_id=inst.id,
        symbol=inst.symbol,
        transaction_type=TransactionType(side),
        quantity=qty,
        price=limit if limit is not None else inst.price,
        product_type=ProductType(product.upper()),
        order_type=OrderType.LIMIT if limit is not None else OrderType.MARKET,
        stop_loss=stop_loss,
        take_profit=take_profit,
    )
    check = session.place(intent)
    if not check.allowed:
        events.order_rejected(check.reason)
        click.echo(f"Order rejected: {check.reason}")
        raise SystemExit(1)
    session.save()
    click.echo(f"Executed: {format_order(session.state.orders[0])}")


def _trade_options(fn):
    fn = click.option("--tp", "take_profit", type=float, default=None, help="Take-profit trigger price.")(fn)
    fn = click.option("--sl", "stop_loss", type=float, default=None, help="Stop-loss trigger price.")(fn)
    fn = click.option("--product", type=PRODUCTS, default="CNC", show_default=True, help="CNC delivery / MIS intraday.")(fn)
    fn = click.option("--limit", type=float, default=None, help="Limit price (default: market at LTP).")(fn)
    fn = click.option("--exchange", type=EXCHANGES, default="NSE", show_default=True)(fn)
    fn = click.argument("qty", type=int)(fn)
    fn = click.argument("symbol")(fn)
    return fn


@cli.command()
@_trade_options
@click.pass_context
def buy(ctx, symbol, qty, exchange, limit, product, stop_loss, take_profit) -> None:
    """Buy QTY of SYMBOL."""
    _trade(ctx, "BUY", symbol, qty, exchange, limit, product, stop_loss, take_profit)


@cli.command()
@_trade_options
@click.pass_context
def sell(ctx, symbol, qty, exchange, limit, product, stop_loss, take_profit) -> None:
    """Sell QTY of SYMBOL (opens a short when flat)."""
    _trade(ctx, "SELL", symbol, qty, exchange, limit, product, stop_loss, take_profit)


# ---------- exit / square-off ----------


@cli.command(name="exit")
@click.argument("symbol")
@click.option("--exchange", type=EXCHANGES, default="NSE", show_default=True)
@click.pass_context
def exit_(ctx: click.Context, symbol: str, exchange: str) -> None:
    """Close the open position in SYMBOL at its latest price."""
    from cli.output import format_order

    _, session, _, _ = _open(ctx)
    inst = _resolve(session, symbol, exchange)
    order = session.exit_position(inst.id)
    if order is None:
        click.echo(f"No open position in {inst.symbol} ({inst.exchange.value}).")
        return
    session.save()
    click.echo(f"Exited: {format_order(order)}")


@cli.command(name="square-off")
@click.pass_context
def square_off(ctx: click.Context) -> None:
    """Close all open positions at market."""
    from cli.output import format_order
    from ledger.valuation import realized_pnl

    _, session, journal, _ = _open(ctx)
    orders = session.square_off_all()
    if not orders:
        click.echo("No open positions.")
        return
    pnl = realized_pnl(orders)
    journal.square_off(len(orders), pnl)
    session.save()
    for order in orders:
        click.echo(f"Exited: {format_order(order)}")
    click.echo(f"Closed {len(orders)} position(s). Realized P&L: {pnl:+,.2f}")


# ---------- order log ----------


@cli.command()
@click.option("--limit", default=None, type=click.IntRange(min=1), help="Show only the N most recent orders.")
@click.pass_context
def orders(ctx: click.Context, limit: int | None) -> None:
    """Order history grouped by date, newest first."""
    from cli.output import format_orders

    _, session, _, _ = _open(ctx)
    log = session.state.orders
    click.echo(format_orders(log[:limit] if limit is not None else log))


@cli.command(name="clear-orders")
@click.pass_context
def clear_orders(ctx: click.Context) -> None:
    """Empty the order log. Wallet and positions are untouched."""
    _, session, journal, _ = _open(ctx)
    count = len(session.state.orders)
    session.engine.clear_order_log()
    journal.orders_cleared(count)
    session.save()
    click.echo(f"Cleared {count} order(s).")


@cli.command()
@click.option("--balance", type=float, default=None, help="New starting balance (default: from config).")
@click.confirmation_option(prompt="Reset wallet and clear all positions and orders?")
@click.pass_context
def reset(ctx: click.Context, balance: float | None) -> None:
    """Reset the wallet and discard all positions and orders."""
    cfg, session, journal, _ = _open(ctx)
    amount = balance if balance is not None else cfg.session.initial_balance
    session.engine.reset_wallet(amount)
    journal.wallet_reset(amount)
    session.save()
    click.echo(f"Wallet reset to ₹{amount:,.2f}.")


# ---------- prices ----------


@cli.command()
@click.option("--count", default=1, show_default=True, help="Number of simulated ticks.")
@click.pass_context
def tick(ctx: click.Context, count: int) -> None:
    """Advance simulated prices and fire any stop-loss / take-profit exits."""
    from cli.scheduler import echo_exits

    _, session, _, _ = _open(ctx)
    exits = 0
    for _ in range(count):
        hits = session.process_tick()
        echo_exits(hits)
        exits += len(hits)
    session.save()
    click.echo(f"Ticked {count} time(s); {exits} auto-exit(s).")


@cli.command()
@click.option("--quotes", "quotes_path", default=None, help="Read 'SYMBOL: PRICE' lines from this file instead of the configured feed.")
@click.pass_context
def sync(ctx: click.Context, quotes_path: str | None) -> None:
    """Pull real quotes from the configured feed and apply them."""
    from cli.scheduler import build_feed, echo_exits
    from market.feed import QuoteFilePriceFeed

    cfg, session, journal, events = _open(ctx)
    feed = QuoteFilePriceFeed(quotes_path) if quotes_path else build_feed(cfg)
    source = "file" if quotes_path else cfg.feed.source
    if feed is None:
        click.echo("feed.source is 'simulated'; nothing to sync. Use --quotes or configure a feed.")
        return
    result = session.sync_prices(feed)
    if result is None:
        journal.price_sync(source, 0, False)
        events.price_sync(source, 0, False)
        click.echo("Price sync failed; prices unchanged.")
        return
    updated, hits = result
    journal.price_sync(source, updated, True, exits=len(hits))
    events.price_sync(source, updated, True)
    echo_exits(hits)
    session.save()
    click.echo(f"Updated {updated} listing(s); {len(hits)} auto-exit(s).")


@cli.command()
@click.option("--ticks", "max_ticks", default=None, type=int, help="Stop after N ticks (default: run until Ctrl+C).")
@click.pass_context
def run(ctx: click.Context, max_ticks: int | None) -> None:
    """Run continuously: update prices every interval and auto-exit on SL/TP."""
    from cli.scheduler import run_tick_loop

    cfg, session, _, events = _open(ctx)
    run_tick_loop(session, cfg, max_ticks=max_ticks, events=events)


# ---------- commentary ----------


@cli.command()
@click.option("--symbol", default=None, help="Also show the insight for this symbol.")
@click.pass_context
def news(ctx: click.Context, symbol: str | None) -> None:
    """Market headlines (static fallback when no feed is configured)."""
    from market.commentary import HeadlineFileFeed, fetch_headlines, fetch_insight

    cfg = load_config(ctx.obj["config_path"])
    feed = HeadlineFileFeed(cfg.commentary.headlines_path) if cfg.commentary.headlines_path else None
    for headline in fetch_headlines(feed):
        click.echo(f"  * {headline}")
    if symbol:
        click.echo(f"\n{symbol.upper()}: {fetch_insight(feed, symbol.upper())}")


# ---------- health ----------


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check system health: config, saved state, price feed.

    Exit code 0 = healthy, 1 = unhealthy. Designed for Docker HEALTHCHECK.
    """
    checks: list[tuple[str, bool, str]] = []

    try:
        cfg = load_config(ctx.obj["config_path"])
        checks.append(("config", True, f"loaded (feed={cfg.feed.source})"))
    except Exception as e:
        checks.append(("config", False, str(e)))
        _print_health(checks)
        raise SystemExit(1)

    try:
        from storage import StateStore

        store = StateStore(cfg.session.state_path)
        snapshot = store.load()
        if snapshot is None:
            checks.append(("state", True, f"no saved session at {store.path} (will initialize)"))
        else:
            checks.append((
                "state",
                True,
                f"{len(snapshot.ledger.positions)} positions, {len(snapshot.ledger.orders)} orders, "
                f"{len(snapshot.watchlist)} instruments",
            ))
    except Exception as e:
        checks.append(("state", False, str(e)))

    try:
        from cli.scheduler import build_feed

        build_feed(cfg)
        checks.append(("feed", True, cfg.feed.source))
    except Exception as e:
        checks.append(("feed", False, str(e)))

    _print_health(checks)
    healthy = all(ok for _, ok, _ in checks)
    raise SystemExit(0 if healthy else 1)


def _print_health(checks: list[tuple[str, bool, str]]) -> None:
    for name, ok, detail in checks:
        status = "OK" if ok else "FAIL"
        click.echo(f"  [{status}] {name}: {detail}")
    healthy = all(ok for _, ok, _ in checks)
    click.echo(f"\nHealth: {'HEALTHY' if healthy else 'UNHEALTHY'}")


if __name__ == "__main__":
    cli()
