"""Data-access layer for a personal-finance aggregation schema."""

__version__ = "0.1.0"
