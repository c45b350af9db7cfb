"""Price analytics (read-only)."""
from pricewatch.services.analytics.service import (
    classify_volatility,
    get_product_analytics,
)

__all__ = [
    "classify_volatility",
    "get_product_analytics",
]
