"""Catalog curation services."""
from pricewatch.services.catalog.service import (
    create_market,
    find_newcomer_products,
    get_market_products,
    get_market_stats,
    get_product_markets,
    get_product_stats,
    update_market_details,
    update_market_status,
    update_product_details,
    update_product_status,
)

__all__ = [
    "create_market",
    "find_newcomer_products",
    "get_market_products",
    "get_market_stats",
    "get_product_markets",
    "get_product_stats",
    "update_market_details",
    "update_market_status",
    "update_product_details",
    "update_product_status",
]
