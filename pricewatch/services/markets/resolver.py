"""Bulk find-or-create for market identity.

Markets are identified by their exact trimmed name. A whole report's
market list is resolved with one read and at most one write, whatever its
size.
"""
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from pricewatch.db.models import MarketLocation, MarketStatus

logger = structlog.get_logger(__name__)


def normalize_market_names(names: Optional[Iterable[str]]) -> List[str]:
    """Trim names and collapse duplicates, keeping first-seen order.

    Names that are blank after trimming are dropped.
    """
    if not names:
        return []
    unique: dict[str, None] = {}
    for name in names:
        if name is None:
            continue
        trimmed = name.strip()
        if trimmed:
            unique.setdefault(trimmed, None)
    return list(unique)


async def find_or_create_markets(
    session: AsyncSession,
    names: Optional[List[str]],
) -> List[MarketLocation]:
    """Resolve market names to MarketLocation rows, creating missing ones.
    
    Args:
        session: Async database session (caller owns the transaction)
        names: Raw market names as scraped (may contain duplicates/whitespace)
    
    Returns:
        Existing rows followed by newly created rows, one per distinct name
    """
    unique_names = normalize_market_names(names)
    if not unique_names:
        return []

    result = await session.scalars(
        select(MarketLocation).where(MarketLocation.name.in_(unique_names))
    )
    markets = list(result.all())
    existing_names = {market.name for market in markets}

    new_markets = [
        MarketLocation(name=name, status=MarketStatus.ACTIVE)
        for name in unique_names
        if name not in existing_names
    ]

    if new_markets:
        session.add_all(new_markets)
        await session.flush()
        markets.extend(new_markets)

    logger.info(
        "markets_resolved",
        requested=len(unique_names),
        existing=len(existing_names),
        created=len(new_markets),
    )
    return markets
