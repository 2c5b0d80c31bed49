"""PIPA tag lookup: scrape, normalize and cache playground inspection records."""

__version__ = "1.0.0"
