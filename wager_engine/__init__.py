"""Wagering round engine: six chance games, optimistic wallet, ledger reconciliation."""

__version__ = "1.0.0"
