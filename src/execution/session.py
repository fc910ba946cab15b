"""
Paper session: the application context that owns the registry, the ledger
engine and the state store, and drives the tick cycle.

tick/sync -> publish prices to registry -> evaluate triggers -> apply exits.
State is persisted only through save(); nothing here writes implicitly.
"""

from __future__ import annotations

import logging
import random

from config.loader import AppConfig
from execution.validation import OrderCheck, check_intent
from ledger.contracts import LedgerState, Order, TradeIntent
from ledger.engine import LedgerEngine
from ledger.triggers import TriggerHit, run_triggers
from ledger.valuation import PortfolioSummary, summarize
from market.feed import PriceFeed, safe_fetch
from market.prices import apply_quotes, tick_all
from market.registry import DEFAULT_INSTRUMENTS, InstrumentRegistry
from storage.state_store import SessionSnapshot, StateStore

logger = logging.getLogger("papertrade.session")


class PaperSession:
    """
    One trader's paper account plus the instruments it trades.

    Single-threaded: ticks and orders are processed one at a time to
    completion. The engine still serializes its own mutations.
    """

    def __init__(
        self,
        registry: InstrumentRegistry,
        engine: LedgerEngine,
        store: StateStore | None = None,
        *,
        volatility: float = 0.0015,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self._store = store
        self._volatility = volatility
        self._rng = rng or random.Random()

    @classmethod
    def open(cls, cfg: AppConfig, *, rng: random.Random | None = None) -> "PaperSession":
        """Restore the saved session, or start fresh with the configured balance and default watchlist."""
        store = StateStore(cfg.session.state_path)
        snapshot = store.load()
        if snapshot is None:
            logger.info("No saved state at %s; starting with %.2f", store.path, cfg.session.initial_balance)
            registry = InstrumentRegistry(DEFAULT_INSTRUMENTS)
            ledger = LedgerState.fresh(cfg.session.initial_balance)
        else:
            registry = InstrumentRegistry(snapshot.watchlist)
            ledger = snapshot.ledger
        return cls(
            registry,
            LedgerEngine(ledger),
            store,
            volatility=cfg.market.volatility,
            rng=rng,
        )

    @property
    def state(self) -> LedgerState:
        return self.engine.state

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(ledger=self.engine.state, watchlist=tuple(self.registry))

    def save(self) -> None:
        if self._store is None:
            return
        self._store.save(self.snapshot())

    def place(self, intent: TradeIntent) -> OrderCheck:
        """Validate, then apply. Rejected intents never reach the ledger."""
        check = check_intent(intent, self.registry, self.engine.state.wallet)
        if not check.allowed:
            logger.info("Order rejected: %s", check.reason)
            return check
        self.engine.apply_trade(intent)
        return check

    def exit_position(self, instrument_id: str) -> Order | None:
        return self.engine.exit_position(instrument_id, self.registry.price_of)

    def square_off_all(self) -> list[Order]:
        return self.engine.square_off_all(self.registry.price_of)

    def process_tick(self) -> list[TriggerHit]:
        """Random-walk every instrument once, then fire any SL/TP exits."""
        self.registry.replace_all(tick_all(self.registry, self._volatility, self._rng))
        return run_triggers(self.engine, self.registry.prices())

    def sync_prices(self, feed: PriceFeed) -> tuple[int, list[TriggerHit]] | None:
        """Pull quotes from *feed* and apply them. None (and no state change) on feed failure."""
        quotes = safe_fetch(feed, self.registry.symbols())
        if quotes is None:
            return None
        instruments, updated = apply_quotes(self.registry, quotes)
        self.registry.replace_all(instruments)
        hits = run_triggers(self.engine, self.registry.prices())
        logger.info("Synced %d listing(s) from feed", updated)
        return updated, hits

    def summary(self) -> PortfolioSummary:
        return summarize(self.engine.state, self.registry.price_of)
