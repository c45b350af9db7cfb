"""Catalog curation: statistics, newcomer review and admin status updates.

Key Functions:
    - get_product_stats / get_market_stats: Dashboard counters
    - find_newcomer_products: PENDING products awaiting review
    - update_product_status / update_product_details: Product curation
    - create_market / update_market_details / update_market_status: Market curation
    - get_product_markets / get_market_products: Product and market cross views

Ingestion only ever promotes products to ACTIVE. Every other status
transition happens here.
"""
from datetime import time
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import case, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.db.models import (
    DailyPriceRecord,
    MarketLocation,
    MarketStatus,
    MarketType,
    PriceReport,
    ProductInfo,
    ProductStatus,
)
from pricewatch.errors.exceptions import ResourceNotFoundError, ValidationError
from pricewatch.models.catalog import (
    MarketDetail,
    MarketProduct,
    MarketProducts,
    MarketStats,
    NewcomerProduct,
    ProductMarkets,
    ProductStats,
)

logger = structlog.get_logger(__name__)


async def get_product_stats(session: AsyncSession) -> ProductStats:
    """Count products per lifecycle status."""
    result = await session.execute(
        select(ProductInfo.status, func.count(ProductInfo.id))
        .group_by(ProductInfo.status)
    )
    counts: Dict[ProductStatus, int] = {status: count for status, count in result.all()}

    return ProductStats(
        total=sum(counts.values()),
        active=counts.get(ProductStatus.ACTIVE, 0),
        pending=counts.get(ProductStatus.PENDING, 0),
        inactive=counts.get(ProductStatus.INACTIVE, 0),
    )


async def get_market_stats(session: AsyncSession) -> MarketStats:
    """Count markets in total, active, and per kind."""
    result = await session.execute(
        select(
            func.count(MarketLocation.id),
            func.sum(case((MarketLocation.status == MarketStatus.ACTIVE, 1), else_=0)),
            func.sum(case((MarketLocation.market_type == MarketType.WET_MARKET, 1), else_=0)),
            func.sum(case((MarketLocation.market_type == MarketType.SUPERMARKET, 1), else_=0)),
        )
    )
    total, active, wet_markets, supermarkets = result.one()

    return MarketStats(
        total=total or 0,
        active=active or 0,
        wet_markets=wet_markets or 0,
        supermarkets=supermarkets or 0,
    )


async def find_newcomer_products(session: AsyncSession) -> List[NewcomerProduct]:
    """List PENDING products for administrator review.
    
    A pending product whose name is already ACTIVE under another category
    is not a newcomer and is left out. Each newcomer carries the price,
    unit and origin of its earliest observation, the report date of that
    observation and the number of distinct markets it was seen in.
    
    Args:
        session: AsyncSession for database operations
        
    Returns:
        Newcomer products ordered by name
    """
    pending = (
        await session.scalars(
            select(ProductInfo)
            .where(ProductInfo.status == ProductStatus.PENDING)
            .order_by(ProductInfo.product_name)
        )
    ).all()
    active_names = set(
        (
            await session.scalars(
                select(ProductInfo.product_name)
                .where(ProductInfo.status == ProductStatus.ACTIVE)
            )
        ).all()
    )
    newcomers = [p for p in pending if p.product_name not in active_names]
    if not newcomers:
        return []

    # Single batched read of all observations for the newcomers
    result = await session.execute(
        select(
            DailyPriceRecord.product_info_id,
            DailyPriceRecord.price,
            DailyPriceRecord.unit,
            DailyPriceRecord.origin,
            DailyPriceRecord.market_location_id,
            PriceReport.date_reported,
        )
        .join(PriceReport, DailyPriceRecord.price_report_id == PriceReport.id)
        .where(DailyPriceRecord.product_info_id.in_([p.id for p in newcomers]))
        .order_by(PriceReport.date_reported.asc(), DailyPriceRecord.created_at.asc())
    )

    first_seen: Dict[UUID, tuple] = {}
    markets_seen: Dict[UUID, set] = {}
    for product_id, price, unit, origin, market_id, reported in result.all():
        first_seen.setdefault(product_id, (price, unit, origin, reported))
        markets_seen.setdefault(product_id, set()).add(market_id)

    responses = []
    for product in newcomers:
        response = NewcomerProduct(
            id=product.id,
            product_name=product.product_name,
            category=product.category,
            local_name=product.local_name,
            origin=product.local_name,
        )
        if product.id in first_seen:
            price, unit, origin, reported = first_seen[product.id]
            response.price = price
            response.unit = unit or "N/A"
            response.origin = origin
            response.detected_date = reported
            response.total_markets = len(markets_seen[product.id])
        responses.append(response)

    logger.debug("newcomer_products_listed", count=len(responses))
    return responses


def _coerce_status(enum_cls, status):
    if isinstance(status, enum_cls):
        return status
    try:
        return enum_cls(str(status).lower())
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {enum_cls.__name__} value '{status}'. Expected one of: {allowed}"
        ) from e


async def _get_product(session: AsyncSession, product_id: UUID) -> ProductInfo:
    product = await session.get(ProductInfo, product_id)
    if product is None:
        raise ResourceNotFoundError("Product", "id", product_id)
    return product


async def update_product_status(
    session: AsyncSession,
    product_id: UUID,
    status: Union[ProductStatus, str],
) -> ProductInfo:
    """Set a product's lifecycle status.

    Raises:
        ResourceNotFoundError: If the product does not exist
        ValidationError: If status is not a ProductStatus value
    """
    new_status = _coerce_status(ProductStatus, status)
    product = await _get_product(session, product_id)

    previous = product.status
    product.status = new_status
    await session.flush()

    logger.info(
        "product_status_updated",
        product_id=str(product_id),
        previous_status=previous.value,
        new_status=new_status.value,
    )
    return product


async def update_product_details(
    session: AsyncSession,
    product_id: UUID,
    *,
    product_name: Optional[str] = None,
    category: Optional[str] = None,
    local_name: Optional[str] = None,
) -> ProductInfo:
    """Edit a product's descriptive fields. None leaves a field unchanged.

    Raises:
        ResourceNotFoundError: If the product does not exist
    """
    product = await _get_product(session, product_id)

    changes = {
        "product_name": product_name,
        "category": category,
        "local_name": local_name,
    }
    changed = []
    for field_name, value in changes.items():
        if value is not None:
            setattr(product, field_name, value.strip())
            changed.append(field_name)

    if changed:
        await session.flush()
    logger.info("product_details_updated", product_id=str(product_id), fields=changed)
    return product


async def update_market_status(
    session: AsyncSession,
    market_id: UUID,
    status: Union[MarketStatus, str],
) -> MarketLocation:
    """Set a market's status.

    Raises:
        ResourceNotFoundError: If the market does not exist
        ValidationError: If status is not a MarketStatus value
    """
    new_status = _coerce_status(MarketStatus, status)
    market = await session.get(MarketLocation, market_id)
    if market is None:
        raise ResourceNotFoundError("Market", "id", market_id)

    previous = market.status
    market.status = new_status
    await session.flush()

    logger.info(
        "market_status_updated",
        market_id=str(market_id),
        previous_status=previous.value,
        new_status=new_status.value,
    )
    return market


async def _market_name_taken(
    session: AsyncSession,
    name: str,
    exclude_id: Optional[UUID] = None,
) -> bool:
    condition = exists().where(MarketLocation.name == name)
    if exclude_id is not None:
        condition = condition.where(MarketLocation.id != exclude_id)
    return bool(await session.scalar(select(condition)))


def _clean_market_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Market name cannot be empty")
    return cleaned


async def create_market(
    session: AsyncSession,
    name: str,
    *,
    market_type: Union[MarketType, str, None] = None,
    status: Union[MarketStatus, str, None] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    opening_time: Optional[time] = None,
    closing_time: Optional[time] = None,
    description: Optional[str] = None,
) -> MarketLocation:
    """Register a market by hand.

    New markets start ACTIVE with a 0.0 rating unless a status is given.

    Raises:
        ValidationError: If the name is blank, already used, or a type or
            status value is unknown
    """
    cleaned = _clean_market_name(name)
    new_type = _coerce_status(MarketType, market_type) if market_type is not None else None
    new_status = _coerce_status(MarketStatus, status) if status is not None else MarketStatus.ACTIVE

    if await _market_name_taken(session, cleaned):
        raise ValidationError(f"Market '{cleaned}' already exists")

    market = MarketLocation(
        name=cleaned,
        market_type=new_type,
        status=new_status,
        latitude=latitude,
        longitude=longitude,
        opening_time=opening_time,
        closing_time=closing_time,
        rating=0.0,
        description=description,
    )
    session.add(market)
    await session.flush()

    logger.info(
        "market_created",
        market_id=str(market.id),
        name=cleaned,
        market_type=new_type.value if new_type else None,
    )
    return market


async def update_market_details(
    session: AsyncSession,
    market_id: UUID,
    *,
    name: Optional[str] = None,
    market_type: Union[MarketType, str, None] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    opening_time: Optional[time] = None,
    closing_time: Optional[time] = None,
    description: Optional[str] = None,
) -> MarketLocation:
    """Edit a market's descriptive fields. None leaves a field unchanged.

    Renaming keeps market identity unique: a name held by another market
    is rejected.

    Raises:
        ResourceNotFoundError: If the market does not exist
        ValidationError: If the new name is blank or taken, or the type is unknown
    """
    market = await session.get(MarketLocation, market_id)
    if market is None:
        raise ResourceNotFoundError("Market", "id", market_id)

    changes = {
        "market_type": _coerce_status(MarketType, market_type) if market_type is not None else None,
        "latitude": latitude,
        "longitude": longitude,
        "opening_time": opening_time,
        "closing_time": closing_time,
        "description": description,
    }
    if name is not None:
        cleaned = _clean_market_name(name)
        if await _market_name_taken(session, cleaned, exclude_id=market_id):
            raise ValidationError(f"Market name '{cleaned}' is used by another market")
        changes["name"] = cleaned

    changed = []
    for field_name, value in changes.items():
        if value is not None:
            setattr(market, field_name, value)
            changed.append(field_name)

    if changed:
        await session.flush()
    logger.info("market_details_updated", market_id=str(market_id), fields=changed)
    return market


async def get_product_markets(session: AsyncSession, product_id: UUID) -> ProductMarkets:
    """List the distinct markets where a product was ever observed.

    Raises:
        ResourceNotFoundError: If the product does not exist
    """
    product = await _get_product(session, product_id)

    result = await session.execute(
        select(
            MarketLocation.id,
            MarketLocation.name,
            MarketLocation.market_type,
            MarketLocation.opening_time,
            MarketLocation.closing_time,
        )
        .join(DailyPriceRecord, DailyPriceRecord.market_location_id == MarketLocation.id)
        .where(DailyPriceRecord.product_info_id == product_id)
        .distinct()
        .order_by(MarketLocation.name)
    )
    markets = [
        MarketDetail(
            id=market_id,
            name=name,
            market_type=market_type.value if market_type else None,
            opening_time=opening_time,
            closing_time=closing_time,
        )
        for market_id, name, market_type, opening_time, closing_time in result.all()
    ]

    return ProductMarkets(
        product_id=product.id,
        product_name=product.product_name,
        markets=markets,
    )


async def get_market_products(session: AsyncSession, market_id: UUID) -> MarketProducts:
    """List every product observation recorded at one market.

    Rows are ordered by product name, then by report date.

    Raises:
        ResourceNotFoundError: If the market does not exist
    """
    market = await session.get(MarketLocation, market_id)
    if market is None:
        raise ResourceNotFoundError("Market", "id", market_id)

    total_records = await session.scalar(
        select(func.count(DailyPriceRecord.id))
        .where(DailyPriceRecord.market_location_id == market_id)
    )
    result = await session.execute(
        select(
            ProductInfo.product_name,
            ProductInfo.category,
            DailyPriceRecord.price,
            DailyPriceRecord.unit,
            PriceReport.date_reported,
        )
        .join(ProductInfo, DailyPriceRecord.product_info_id == ProductInfo.id)
        .join(PriceReport, DailyPriceRecord.price_report_id == PriceReport.id)
        .where(DailyPriceRecord.market_location_id == market_id)
        .order_by(ProductInfo.product_name, PriceReport.date_reported)
    )
    products = [
        MarketProduct(
            product_name=product_name,
            category=category,
            price=price,
            unit=unit,
            date_reported=reported,
        )
        for product_name, category, price, unit, reported in result.all()
    ]

    return MarketProducts(
        market_id=market.id,
        market_name=market.name,
        market_type=market.market_type.value if market.market_type else None,
        total_records=total_records or 0,
        products=products,
    )
