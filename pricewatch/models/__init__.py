"""Pydantic models for messages and results."""
from pricewatch.models.scrape_result import ScrapeResult, ScrapedProduct
from pricewatch.models.queue_message import ScrapeRequestMessage
from pricewatch.models.analytics import PriceHistoryPoint, ProductAnalytics, Volatility
from pricewatch.models.catalog import (
    MarketDetail,
    MarketProduct,
    MarketProducts,
    MarketStats,
    NewcomerProduct,
    ProductMarkets,
    ProductStats,
)

__all__ = [
    "ScrapeResult",
    "ScrapedProduct",
    "ScrapeRequestMessage",
    "PriceHistoryPoint",
    "ProductAnalytics",
    "Volatility",
    "MarketDetail",
    "MarketProduct",
    "MarketProducts",
    "MarketStats",
    "NewcomerProduct",
    "ProductMarkets",
    "ProductStats",
]
