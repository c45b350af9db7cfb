"""Read-only price analytics over the daily price time-series.

Key Functions:
    - classify_volatility: Bucket (max - min) / avg into LOW/MEDIUM/HIGH
    - get_product_analytics: Min/max/average and history for a product,
      scoped to one market or national

Statistics are computed in the database (MIN/MAX/AVG) and only the
history points are fetched as rows.
"""
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.config import analytics_settings
from pricewatch.db.models import DailyPriceRecord, MarketLocation, PriceReport, ProductInfo
from pricewatch.errors.exceptions import ValidationError
from pricewatch.models.analytics import PriceHistoryPoint, ProductAnalytics, Volatility

logger = structlog.get_logger(__name__)


def classify_volatility(
    min_price: float,
    max_price: float,
    average_price: float,
) -> Volatility:
    """Classify price fluctuation relative to the average.

    pct = (max - min) / avg * 100. Below ANALYTICS_LOW_VOLATILITY_PCT is LOW,
    at or above ANALYTICS_HIGH_VOLATILITY_PCT is HIGH, MEDIUM in between.
    A zero average is LOW.
    """
    if average_price == 0:
        return Volatility.LOW

    fluctuation_pct = (max_price - min_price) / average_price * 100
    if fluctuation_pct < analytics_settings.low_volatility_pct:
        return Volatility.LOW
    if fluctuation_pct < analytics_settings.high_volatility_pct:
        return Volatility.MEDIUM
    return Volatility.HIGH


def _window_start(days: Optional[int], today: Optional[date]) -> date:
    if days is None:
        days = analytics_settings.default_window_days
    if days < 0:
        raise ValidationError(f"days must be non-negative, got {days}")
    return (today or date.today()) - timedelta(days=days)


async def _resolve_market_label(session: AsyncSession, market_id: Optional[UUID]) -> str:
    if market_id is None:
        return analytics_settings.national_label
    market = await session.get(MarketLocation, market_id)
    if market is None:
        logger.info("analytics_market_not_found", market_id=str(market_id))
        return analytics_settings.unknown_market_label
    return market.name


async def _fetch_history(
    session: AsyncSession,
    product_name: str,
    market_id: Optional[UUID],
    start_date: date,
) -> List[PriceHistoryPoint]:
    if market_id is not None:
        query = (
            select(PriceReport.date_reported, DailyPriceRecord.price)
            .join(PriceReport, DailyPriceRecord.price_report_id == PriceReport.id)
            .join(ProductInfo, DailyPriceRecord.product_info_id == ProductInfo.id)
            .where(ProductInfo.product_name == product_name)
            .where(DailyPriceRecord.market_location_id == market_id)
            .where(PriceReport.date_reported >= start_date)
            .order_by(PriceReport.date_reported.asc())
        )
    else:
        query = (
            select(PriceReport.date_reported, func.avg(DailyPriceRecord.price))
            .join(PriceReport, DailyPriceRecord.price_report_id == PriceReport.id)
            .join(ProductInfo, DailyPriceRecord.product_info_id == ProductInfo.id)
            .where(ProductInfo.product_name == product_name)
            .where(PriceReport.date_reported >= start_date)
            .group_by(PriceReport.date_reported)
            .order_by(PriceReport.date_reported.asc())
        )

    result = await session.execute(query)
    return [
        PriceHistoryPoint(date=reported, price=round(float(price), 2))
        for reported, price in result.all()
    ]


async def get_product_analytics(
    session: AsyncSession,
    product_name: str,
    market_id: Optional[UUID] = None,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> ProductAnalytics:
    """Compute price statistics for a product over a lookback window.
    
    Args:
        session: AsyncSession for database operations
        product_name: Product name (matched across categories)
        market_id: Restrict to one market; None for the national view
        days: Lookback window in days (defaults to ANALYTICS_DEFAULT_WINDOW_DAYS)
        today: Reference date for the window (defaults to today)
        
    Returns:
        ProductAnalytics with zeros, empty history and LOW volatility when
        no observations fall inside the window
        
    Raises:
        ValidationError: If days is negative
    """
    start_date = _window_start(days, today)
    log = logger.bind(
        product_name=product_name,
        market_id=str(market_id) if market_id else None,
        start_date=start_date.isoformat(),
    )

    market_label = await _resolve_market_label(session, market_id)

    stats_query = (
        select(
            func.min(DailyPriceRecord.price),
            func.max(DailyPriceRecord.price),
            func.avg(DailyPriceRecord.price),
        )
        .join(PriceReport, DailyPriceRecord.price_report_id == PriceReport.id)
        .join(ProductInfo, DailyPriceRecord.product_info_id == ProductInfo.id)
        .where(ProductInfo.product_name == product_name)
        .where(PriceReport.date_reported >= start_date)
    )
    if market_id is not None:
        stats_query = stats_query.where(DailyPriceRecord.market_location_id == market_id)

    stats = (await session.execute(stats_query)).one()
    min_price, max_price, avg_price = (
        float(value) if value is not None else 0.0 for value in stats
    )
    average_price = round(avg_price, 2)

    history = await _fetch_history(session, product_name, market_id, start_date)

    analytics = ProductAnalytics(
        product_name=product_name,
        market_name=market_label,
        min_price=min_price,
        max_price=max_price,
        average_price=average_price,
        volatility=classify_volatility(min_price, max_price, average_price),
        history=history,
    )
    log.debug(
        "product_analytics_computed",
        points=len(history),
        volatility=analytics.volatility.value,
    )
    return analytics
