"""arq task functions for the price ingestion worker."""
