"""I/O adapters feeding lines into the parser and persisting its records."""
