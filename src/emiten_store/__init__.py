"""Data-access layer for stock analysis results and session values."""

__version__ = "0.3.0"
