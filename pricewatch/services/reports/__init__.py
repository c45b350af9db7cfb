"""Report deduplication services."""
from pricewatch.services.reports.deduplicator import (
    parse_report_date,
    report_exists,
    create_report,
)

__all__ = [
    "parse_report_date",
    "report_exists",
    "create_report",
]
