"""
Paper execution: validated intents into the ledger, tick cycle, save/load boundary.
Single-threaded. No live capital.
"""

from execution.session import PaperSession
from execution.validation import OrderCheck, check_intent

__all__ = ["OrderCheck", "PaperSession", "check_intent"]
