"""Ingestion orchestration and unit of work."""
from pricewatch.services.ingestion.orchestrator import (
    STATUS_INGESTED,
    STATUS_NO_PRODUCTS,
    STATUS_SKIPPED_DUPLICATE,
    IngestionResult,
    ingest_scrape_result,
    process_scrape_result,
)

__all__ = [
    "STATUS_INGESTED",
    "STATUS_NO_PRODUCTS",
    "STATUS_SKIPPED_DUPLICATE",
    "IngestionResult",
    "ingest_scrape_result",
    "process_scrape_result",
]
