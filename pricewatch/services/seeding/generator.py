"""Synthetic price history for demo and development databases.

Builds a month of plausible observations from one scrape result so that
analytics have something to show on a fresh database. Never used on the
ingestion path.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
import random
import uuid
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.config import settings
from pricewatch.db.models import (
    DailyPriceRecord,
    MarketLocation,
    MarketStatus,
    MarketType,
    PriceReport,
    ProductInfo,
    ProductStatus,
    ReportStatus,
)
from pricewatch.models.scrape_result import ScrapeResult
from pricewatch.services.markets import normalize_market_names

logger = structlog.get_logger(__name__)

SUPERMARKET_KEYWORDS = ("Supermarket", "Mall", "Complex")


def infer_market_type(name: str) -> MarketType:
    """Guess the venue kind from its name."""
    if any(keyword in name for keyword in SUPERMARKET_KEYWORDS):
        return MarketType.SUPERMARKET
    return MarketType.WET_MARKET


@dataclass
class SeedPlan:
    """Rows to insert, with ids pre-assigned so records can reference parents."""
    markets: List[MarketLocation] = field(default_factory=list)
    products: List[ProductInfo] = field(default_factory=list)
    reports: List[PriceReport] = field(default_factory=list)
    records: List[DailyPriceRecord] = field(default_factory=list)


class SyntheticHistoryGenerator:
    """Generate daily reports and noisy price records from a template scrape.

    Each day every market independently goes unreported with
    skip_probability. Reported prices deviate from the template by up to
    ±variance, and supermarkets charge supermarket_markup on top.

    Args:
        rng: Random source (inject a seeded random.Random for reproducible plans)
        days: Number of days before today to cover (today is included)
        skip_probability: Chance a market has no prices on a given day
        variance: Maximum relative deviation from the template price
        supermarket_markup: Price multiplier applied to supermarkets
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        days: int = 30,
        skip_probability: float = 0.10,
        variance: float = 0.05,
        supermarket_markup: float = 1.10,
    ):
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")
        if not 0.0 <= skip_probability <= 1.0:
            raise ValueError(f"skip_probability must be within [0, 1], got {skip_probability}")
        self.rng = rng or random.Random()
        self.days = days
        self.skip_probability = skip_probability
        self.variance = variance
        self.supermarket_markup = supermarket_markup

    def _price(self, base: Decimal, market_type: MarketType) -> Decimal:
        noise = self.rng.uniform(-self.variance, self.variance)
        markup = self.supermarket_markup if market_type == MarketType.SUPERMARKET else 1.0
        return Decimal(str(round(float(base) * (1.0 + noise) * markup, 2)))

    def build(self, source: ScrapeResult, today: Optional[date] = None) -> SeedPlan:
        """Build the rows for days+1 consecutive reports ending today."""
        today = today or date.today()
        plan = SeedPlan()

        for name in normalize_market_names(source.covered_markets):
            plan.markets.append(
                MarketLocation(
                    id=uuid.uuid4(),
                    name=name,
                    market_type=infer_market_type(name),
                    status=MarketStatus.ACTIVE,
                    rating=round(4.0 + self.rng.random(), 1),
                )
            )

        products: Dict[Tuple[str, str], ProductInfo] = {}
        for item in source.products or []:
            key = (item.category, item.commodity)
            if key not in products:
                products[key] = ProductInfo(
                    id=uuid.uuid4(),
                    category=item.category,
                    product_name=item.commodity,
                    status=ProductStatus.ACTIVE,
                )
        plan.products = list(products.values())

        base_url = (source.url or settings.scrape_target_url).rstrip("/")
        for offset in range(self.days, -1, -1):
            day = today - timedelta(days=offset)
            report = PriceReport(
                id=uuid.uuid4(),
                date_reported=day,
                date_processed=datetime.combine(day, time.min, tzinfo=timezone.utc),
                url=f"{base_url}/{day.isoformat()}",
                status=ReportStatus.COMPLETED,
            )
            plan.reports.append(report)

            for market in plan.markets:
                if self.rng.random() < self.skip_probability:
                    continue
                for item in source.products or []:
                    plan.records.append(
                        DailyPriceRecord(
                            id=uuid.uuid4(),
                            price=self._price(item.price, market.market_type),
                            unit=item.unit,
                            origin=item.origin,
                            price_report_id=report.id,
                            product_info_id=products[(item.category, item.commodity)].id,
                            market_location_id=market.id,
                        )
                    )

        return plan


async def seed_history(
    session: AsyncSession,
    generator: SyntheticHistoryGenerator,
    source: ScrapeResult,
    today: Optional[date] = None,
) -> Optional[SeedPlan]:
    """Persist a synthetic history plan unless markets already exist.

    Returns:
        The persisted plan, or None when the database already has markets
    """
    market_count = await session.scalar(select(func.count(MarketLocation.id)))
    if market_count:
        logger.info("seed_skipped_existing_data", markets=market_count)
        return None

    plan = generator.build(source, today=today)

    session.add_all([*plan.markets, *plan.products, *plan.reports])
    await session.flush()
    session.add_all(plan.records)
    await session.flush()

    logger.info(
        "seed_history_complete",
        markets=len(plan.markets),
        products=len(plan.products),
        reports=len(plan.reports),
        records=len(plan.records),
    )
    return plan
