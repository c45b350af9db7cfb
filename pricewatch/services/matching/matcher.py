"""Product identity resolution for scraped commodities.

A scraped line is classified against the catalog by two lookups:

    - Origin history: has any price been recorded for this
      (category, product name, origin) triple? History means the
      combination is verified, so the product is forced ACTIVE.
    - Identity: does a product exist for (category, product name)?
      Without origin history an existing product is returned untouched and
      an unknown one is created PENDING for administrators to curate.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.db.models import DailyPriceRecord, ProductInfo, ProductStatus
from pricewatch.errors.exceptions import ConsistencyError
from pricewatch.models.scrape_result import ScrapedProduct

logger = structlog.get_logger(__name__)


class MatchOutcome(str, Enum):
    """How a scraped commodity was resolved."""
    ACTIVE = "active"
    REACTIVATED = "reactivated"
    EXISTING_UNVERIFIED = "existing_unverified"
    CREATED_PENDING = "created_pending"


@dataclass
class ProductMatch:
    """Resolved product plus the path that produced it."""
    product: ProductInfo
    outcome: MatchOutcome


async def product_has_origin_history(
    session: AsyncSession,
    *,
    category: str,
    product_name: str,
    origin: Optional[str],
) -> bool:
    """Return True if a price was ever recorded for this product and origin."""
    if origin is None:
        origin_clause = DailyPriceRecord.origin.is_(None)
    else:
        origin_clause = DailyPriceRecord.origin == origin

    found = await session.scalar(
        select(
            exists()
            .where(DailyPriceRecord.product_info_id == ProductInfo.id)
            .where(ProductInfo.category == category)
            .where(ProductInfo.product_name == product_name)
            .where(origin_clause)
        )
    )
    return bool(found)


async def find_product(
    session: AsyncSession,
    *,
    category: str,
    product_name: str,
) -> Optional[ProductInfo]:
    """Look up a product by its (category, product name) identity."""
    result = await session.execute(
        select(ProductInfo)
        .where(ProductInfo.category == category)
        .where(ProductInfo.product_name == product_name)
    )
    return result.scalar_one_or_none()


async def find_or_create_product(
    session: AsyncSession,
    item: ScrapedProduct,
) -> ProductMatch:
    """Resolve the catalog product for a scraped commodity.
    
    Args:
        session: Async database session (caller owns the transaction)
        item: Scraped commodity line
    
    Returns:
        ProductMatch with the resolved product and outcome
    
    Raises:
        ConsistencyError: If origin history exists but the product does not
    """
    log = logger.bind(category=item.category, commodity=item.commodity, origin=item.origin)

    has_history = await product_has_origin_history(
        session,
        category=item.category,
        product_name=item.commodity,
        origin=item.origin,
    )
    product = await find_product(
        session,
        category=item.category,
        product_name=item.commodity,
    )

    if has_history:
        if product is None:
            log.error("product_missing_for_recorded_history")
            raise ConsistencyError(
                f"Product '{item.commodity}' in category '{item.category}' has price "
                f"history for origin '{item.origin}' but does not exist"
            )
        if product.status != ProductStatus.ACTIVE:
            previous = product.status
            product.status = ProductStatus.ACTIVE
            await session.flush()
            log.info(
                "product_reactivated",
                product_id=str(product.id),
                previous_status=previous.value,
            )
            return ProductMatch(product=product, outcome=MatchOutcome.REACTIVATED)
        log.debug("product_already_active", product_id=str(product.id))
        return ProductMatch(product=product, outcome=MatchOutcome.ACTIVE)

    if product is not None:
        log.debug(
            "product_known_without_origin_history",
            product_id=str(product.id),
            status=product.status.value,
        )
        return ProductMatch(product=product, outcome=MatchOutcome.EXISTING_UNVERIFIED)

    product = ProductInfo(
        category=item.category,
        product_name=item.commodity,
        status=ProductStatus.PENDING,
    )
    session.add(product)
    await session.flush()
    log.info("pending_product_created", product_id=str(product.id))
    return ProductMatch(product=product, outcome=MatchOutcome.CREATED_PENDING)
