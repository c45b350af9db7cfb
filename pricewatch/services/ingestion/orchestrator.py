"""Ingestion orchestrator: one scrape result, one all-or-nothing batch.

Pipeline per scrape result:
    1. Deduplicate on the reported date (already ingested -> no-op)
    2. Create the report header
    3. Bulk-resolve the covered markets
    4. For each scraped commodity: match the product, broadcast the price

The whole pipeline runs inside a single transaction owned by
ingest_scrape_result. A run that loses a unique-constraint race against a
concurrent run is rolled back and retried; on retry it either sees the
winner's report and becomes a duplicate no-op, or finds the winner's
market/product rows.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
import structlog

from pricewatch.config import ingestion_settings
from pricewatch.db.base import async_session_maker
from pricewatch.errors.exceptions import DatabaseError
from pricewatch.models.scrape_result import ScrapeResult
from pricewatch.services.broadcast import broadcast_price
from pricewatch.services.markets import find_or_create_markets
from pricewatch.services.matching import find_or_create_product
from pricewatch.services.reports import create_report, parse_report_date, report_exists

logger = structlog.get_logger(__name__)

STATUS_INGESTED = "ingested"
STATUS_SKIPPED_DUPLICATE = "skipped_duplicate"
STATUS_NO_PRODUCTS = "no_products"


@dataclass
class IngestionResult:
    """Outcome of one ingestion run."""
    status: str
    report_date: Optional[str] = None
    report_id: Optional[str] = None
    markets_resolved: int = 0
    products_processed: int = 0
    records_written: int = 0
    match_outcomes: Dict[str, int] = field(default_factory=dict)
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/response."""
        return {
            "status": self.status,
            "report_date": self.report_date,
            "report_id": self.report_id,
            "markets_resolved": self.markets_resolved,
            "products_processed": self.products_processed,
            "records_written": self.records_written,
            "match_outcomes": dict(self.match_outcomes),
            "duration_seconds": round(self.duration_seconds, 3),
        }


async def process_scrape_result(
    session: AsyncSession,
    scrape_result: ScrapeResult,
) -> IngestionResult:
    """Run the ingestion pipeline inside the caller's transaction.

    Args:
        session: Async database session with an open transaction
        scrape_result: Parsed scrape result

    Returns:
        IngestionResult describing what was written

    Raises:
        ConsistencyError: If product history and catalog disagree
        SQLAlchemyError: On storage failure (caller rolls back)
    """
    start_time = time.monotonic()
    log = logger.bind(report_date=scrape_result.date_processed)

    report_date = parse_report_date(scrape_result.date_processed)
    if await report_exists(session, report_date):
        log.info("report_already_ingested")
        return IngestionResult(
            status=STATUS_SKIPPED_DUPLICATE,
            report_date=report_date.isoformat(),
            duration_seconds=time.monotonic() - start_time,
        )

    report = await create_report(session, scrape_result, report_date=report_date)
    result = IngestionResult(
        status=STATUS_INGESTED,
        report_date=report.date_reported.isoformat(),
        report_id=str(report.id),
    )
    log = log.bind(report_id=result.report_id)

    markets = await find_or_create_markets(session, scrape_result.covered_markets)
    result.markets_resolved = len(markets)

    if not scrape_result.products:
        log.info("scrape_result_has_no_products", markets_resolved=len(markets))
        result.status = STATUS_NO_PRODUCTS
        result.duration_seconds = time.monotonic() - start_time
        return result

    for item in scrape_result.products:
        match = await find_or_create_product(session, item)
        outcome = match.outcome.value
        result.match_outcomes[outcome] = result.match_outcomes.get(outcome, 0) + 1

        result.records_written += await broadcast_price(
            session, item, match.product, report, markets
        )
        result.products_processed += 1

    result.duration_seconds = time.monotonic() - start_time
    log.info("scrape_result_processed", **result.to_dict())
    return result


async def ingest_scrape_result(
    scrape_result: ScrapeResult,
    session_factory: Optional[Callable[[], AsyncSession]] = None,
) -> IngestionResult:
    """Ingest a scrape result as one atomic unit of work.

    Opens a session, begins a transaction, runs the pipeline and commits.
    Any exception rolls the whole batch back. Unique-constraint conflicts
    are retried up to INGEST_MAX_CONFLICT_RETRIES attempts.

    Args:
        scrape_result: Parsed scrape result
        session_factory: Session factory (defaults to the shared async_session_maker)

    Returns:
        IngestionResult of the committed attempt

    Raises:
        ConsistencyError: If product history and catalog disagree
        DatabaseError: On storage failure, including conflicts that outlast retries
    """
    session_factory = session_factory or async_session_maker

    log = logger.bind(report_date=scrape_result.date_processed)

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(ingestion_settings.max_conflict_retries),
            wait=wait_exponential(multiplier=0.1, max=2),
            retry=retry_if_exception_type(IntegrityError),
            reraise=True,
        ):
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                if attempt_number > 1:
                    log.warning("ingestion_conflict_retry", attempt=attempt_number)
                async with session_factory() as session:
                    async with session.begin():
                        result = await process_scrape_result(session, scrape_result)
    except SQLAlchemyError as e:
        log.error("ingestion_database_error", error=str(e), error_type=type(e).__name__)
        raise DatabaseError(f"Failed to ingest scrape result: {e}") from e

    return result
