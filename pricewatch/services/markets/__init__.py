"""Market identity resolution."""
from pricewatch.services.markets.resolver import (
    find_or_create_markets,
    normalize_market_names,
)

__all__ = [
    "find_or_create_markets",
    "normalize_market_names",
]
