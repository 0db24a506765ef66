"""Daily Top 10 news ranking archive."""

__version__ = "0.3.0"
