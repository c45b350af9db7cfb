"""Database models for the price ingestion pipeline."""
from pricewatch.db.models.price_report import PriceReport, ReportStatus
from pricewatch.db.models.market_location import MarketLocation, MarketStatus, MarketType
from pricewatch.db.models.product_info import ProductInfo, ProductStatus
from pricewatch.db.models.daily_price_record import DailyPriceRecord

__all__ = [
    "PriceReport",
    "ReportStatus",
    "MarketLocation",
    "MarketStatus",
    "MarketType",
    "ProductInfo",
    "ProductStatus",
    "DailyPriceRecord",
]
