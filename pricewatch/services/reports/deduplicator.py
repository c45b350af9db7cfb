"""Report deduplication and report header creation.

A scrape result is identified by the calendar date it reports. The
transport delivers results at least once, so every run first asks whether
that date has already been ingested.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.db.models import PriceReport, ReportStatus
from pricewatch.models.scrape_result import ScrapeResult

logger = structlog.get_logger(__name__)


def parse_report_date(value: Optional[str], today: Optional[date] = None) -> date:
    """Parse a YYYY-MM-DD report date.

    Missing or unparsable values fall back to today instead of failing the
    run. The fallback is logged because a malformed date then reads as
    "today's report", which can make a later valid delivery look like a
    duplicate.
    """
    fallback = today or date.today()
    if not value:
        logger.warning("report_date_missing", fallback=fallback.isoformat())
        return fallback
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.warning(
            "report_date_unparsable",
            raw_value=value,
            fallback=fallback.isoformat(),
        )
        return fallback


async def report_exists(
    session: AsyncSession,
    date_processed: Union[date, str, None],
    today: Optional[date] = None,
) -> bool:
    """Return True if a report for this date has already been ingested.

    Accepts the raw date string or a date already parsed by the caller.
    """
    if isinstance(date_processed, date):
        report_date = date_processed
    else:
        report_date = parse_report_date(date_processed, today=today)
    found = await session.scalar(
        select(exists().where(PriceReport.date_reported == report_date))
    )
    return bool(found)


async def create_report(
    session: AsyncSession,
    scrape_result: ScrapeResult,
    report_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> PriceReport:
    """Create and flush the report header for a scrape result.

    Args:
        session: Async database session (caller owns the transaction)
        scrape_result: Parsed scrape result
        report_date: Date already parsed by the caller (parsed from the
            scrape result when omitted)
        now: Processing timestamp override (defaults to current UTC time)

    Returns:
        The persisted PriceReport with its id assigned
    """
    report = PriceReport(
        date_reported=report_date or parse_report_date(scrape_result.date_processed),
        date_processed=now or datetime.now(timezone.utc),
        url=scrape_result.url,
        status=ReportStatus.from_scrape_status(scrape_result.status),
    )
    session.add(report)
    await session.flush()

    logger.info(
        "price_report_created",
        report_id=str(report.id),
        date_reported=report.date_reported.isoformat(),
        status=report.status.value,
    )
    return report
