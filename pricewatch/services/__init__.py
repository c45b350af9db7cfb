"""Domain services for ingestion, catalog curation and analytics."""
