"""Tech Ink Insights engagement service."""

__version__ = "0.1.0"
