"""USFM scripture ingestion: canon registry, text cleaning, and verse parsing."""

__version__ = "0.1.0"
