"""Fan-out of one reported price onto every covered market."""
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.db.models import DailyPriceRecord, MarketLocation, PriceReport, ProductInfo
from pricewatch.models.scrape_result import ScrapedProduct

logger = structlog.get_logger(__name__)


async def broadcast_price(
    session: AsyncSession,
    item: ScrapedProduct,
    product: ProductInfo,
    report: PriceReport,
    markets: Optional[List[MarketLocation]],
) -> int:
    """Write one DailyPriceRecord per market for a scraped commodity.

    The report publishes a single prevailing price per commodity, so every
    covered market receives the same price, unit and origin.

    Args:
        session: Async database session (caller owns the transaction)
        item: Scraped commodity line carrying price/unit/origin
        product: Resolved product
        report: Report header the prices belong to
        markets: Resolved markets covered by the report

    Returns:
        Number of records written (0 when no markets are covered)
    """
    if not markets:
        logger.debug("broadcast_skipped_no_markets", commodity=item.commodity)
        return 0

    records = [
        DailyPriceRecord(
            price=item.price,
            unit=item.unit,
            origin=item.origin,
            price_report_id=report.id,
            product_info_id=product.id,
            market_location_id=market.id,
        )
        for market in markets
    ]
    session.add_all(records)
    await session.flush()

    logger.debug(
        "price_broadcast",
        product_id=str(product.id),
        report_id=str(report.id),
        records=len(records),
    )
    return len(records)
