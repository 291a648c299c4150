"""Framework-free models, settings, logging, and error types."""
