"""Moneybox product explorer: catalog admin API and client."""

__version__ = "1.0.0"
