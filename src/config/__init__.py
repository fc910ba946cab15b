"""
Configuration loader.

App config: reads config.yaml, resolves env vars for secrets.
"""

from config.loader import (
    AlertingConfig,
    AppConfig,
    CommentaryConfig,
    FeedConfig,
    JournalConfig,
    MarketConfig,
    SessionConfig,
    load_config,
)

__all__ = [
    "AlertingConfig",
    "AppConfig",
    "CommentaryConfig",
    "FeedConfig",
    "JournalConfig",
    "MarketConfig",
    "SessionConfig",
    "load_config",
]
