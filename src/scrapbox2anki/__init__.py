"""Scrapbox pages to Anki notes."""

__version__ = "0.1.0"
