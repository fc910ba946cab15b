"""
Commentary / news feed. Free text only; never time-sensitive, no retries.
Failures and empty answers degrade to static fallbacks.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

logger = logging.getLogger("papertrade.feed")

FALLBACK_HEADLINES: tuple[str, ...] = (
    "Nifty reaches all-time high amid global rally",
    "RBI maintains interest rates, outlook positive",
    "Tech stocks lead market gains today",
)
FALLBACK_INSIGHT = "Market insights currently unavailable."


class CommentaryFeed(Protocol):
    def headlines(self) -> list[str]:
        ...

    def insight(self, symbol: str) -> str:
        ...


class StaticCommentaryFeed:
    def __init__(self, headlines: Sequence[str] = (), insights: dict[str, str] | None = None) -> None:
        self._headlines = list(headlines)
        self._insights = dict(insights or {})

    def headlines(self) -> list[str]:
        return list(self._headlines)

    def insight(self, symbol: str) -> str:
        return self._insights.get(symbol, "")


class HeadlineFileFeed:
    """One headline per non-blank line of a text file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def headlines(self) -> list[str]:
        return [line.strip() for line in self._path.read_text().splitlines() if line.strip()]

    def insight(self, symbol: str) -> str:
        return ""


def fetch_headlines(feed: CommentaryFeed | None) -> list[str]:
    if feed is None:
        return list(FALLBACK_HEADLINES)
    try:
        items = feed.headlines()
    except Exception as exc:
        logger.warning("Headline feed failed: %s", exc)
        return list(FALLBACK_HEADLINES)
    items = [h for h in items if isinstance(h, str) and h.strip()]
    return items or list(FALLBACK_HEADLINES)


def fetch_insight(feed: CommentaryFeed | None, symbol: str) -> str:
    if feed is None:
        return FALLBACK_INSIGHT
    try:
        text = feed.insight(symbol)
    except Exception as exc:
        logger.warning("Insight feed failed for %s: %s", symbol, exc)
        return FALLBACK_INSIGHT
    return text.strip() if text and text.strip() else FALLBACK_INSIGHT
