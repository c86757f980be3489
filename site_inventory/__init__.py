"""Unit inventory and flat financial ledger for construction-site back offices."""

__version__ = "0.1.0"
