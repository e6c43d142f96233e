"""Personal book collection with automatic cover backfill."""

__version__ = "0.1.0"
