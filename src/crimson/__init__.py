"""Crimson - helper leaderboard and cookie payouts."""

__version__ = "0.1.0"
