"""QuickQuote — grid editing state machine for blind and curtain quotes."""

__version__ = "0.1.0"
