"""Lottery jackpot threshold watcher."""

__version__ = "0.1.0"
