"""Ingestion services: canon lookup, text cleaning, parsing, and import runs."""
