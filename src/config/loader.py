"""
Config loader: YAML file -> frozen dataclass tree.

API secrets resolved from environment variables (APCA_API_KEY_ID, APCA_API_SECRET_KEY).
Config file holds only non-secret values.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

FEED_SOURCES = ("simulated", "alpaca", "file")


@dataclass(frozen=True)
class SessionConfig:
    state_path: str = "data/paper_state.json"
    initial_balance: float = 1_000_000.0  # 10 lakh INR


@dataclass(frozen=True)
class MarketConfig:
    volatility: float = 0.0015
    tick_interval_seconds: float = 2.0


@dataclass(frozen=True)
class FeedConfig:
    source: str = "simulated"  # "simulated" | "alpaca" | "file"
    quotes_path: str = ""
    api_key: str = ""
    api_secret: str = ""


@dataclass(frozen=True)
class CommentaryConfig:
    headlines_path: str = ""


@dataclass(frozen=True)
class JournalConfig:
    path: str = "data/journal.jsonl"
    echo_stdout: bool = False


@dataclass(frozen=True)
class AlertingConfig:
    structured_logs: bool = True
    webhook_url: str = ""


@dataclass(frozen=True)
class AppConfig:
    session: SessionConfig = SessionConfig()
    market: MarketConfig = MarketConfig()
    feed: FeedConfig = FeedConfig()
    commentary: CommentaryConfig = CommentaryConfig()
    journal: JournalConfig = JournalConfig()
    alerting: AlertingConfig = AlertingConfig()


def load_config(path: str | Path = "config.yaml") -> AppConfig:
    """
    Load configuration from a YAML file.

    API keys are resolved from environment variables:
      - APCA_API_KEY_ID
      - APCA_API_SECRET_KEY
    These follow Alpaca's standard env var names.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    s_raw = raw.get("session", {})
    s_cfg = SessionConfig(
        state_path=s_raw.get("state_path", "data/paper_state.json"),
        initial_balance=float(s_raw.get("initial_balance", 1_000_000)),
    )

    m_raw = raw.get("market", {})
    m_cfg = MarketConfig(
        volatility=float(m_raw.get("volatility", 0.0015)),
        tick_interval_seconds=float(m_raw.get("tick_interval_seconds", 2.0)),
    )

    f_raw = raw.get("feed", {})
    source = str(f_raw.get("source", "simulated")).lower()
    if source not in FEED_SOURCES:
        raise ValueError(f"feed.source must be one of {FEED_SOURCES}, got {source!r}")
    f_cfg = FeedConfig(
        source=source,
        quotes_path=str(f_raw.get("quotes_path", "")),
        api_key=os.environ.get("APCA_API_KEY_ID", ""),
        api_secret=os.environ.get("APCA_API_SECRET_KEY", ""),
    )

    c_raw = raw.get("commentary", {})
    c_cfg = CommentaryConfig(headlines_path=str(c_raw.get("headlines_path", "")))

    j_raw = raw.get("journal", {})
    j_cfg = JournalConfig(
        path=j_raw.get("path", "data/journal.jsonl"),
        echo_stdout=bool(j_raw.get("echo_stdout", False)),
    )

    a_raw = raw.get("alerting", {})
    a_cfg = AlertingConfig(
        structured_logs=bool(a_raw.get("structured_logs", True)),
        webhook_url=str(a_raw.get("webhook_url", "")),
    )

    return AppConfig(
        session=s_cfg,
        market=m_cfg,
        feed=f_cfg,
        commentary=c_cfg,
        journal=j_cfg,
        alerting=a_cfg,
    )
