"""commctl — commissioned-artwork marketplace ledger."""

__version__ = "0.1.0"
