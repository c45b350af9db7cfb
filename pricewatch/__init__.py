"""Market price report ingestion and analytics worker."""

__version__ = "0.1.0"
