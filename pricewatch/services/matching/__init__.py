"""Product identity matching.

Key Components:
    - find_or_create_product: Classify a scraped commodity against the catalog
    - ProductMatch / MatchOutcome: Result of the classification
"""
from pricewatch.services.matching.matcher import (
    MatchOutcome,
    ProductMatch,
    find_or_create_product,
    find_product,
    product_has_origin_history,
)

__all__ = [
    "MatchOutcome",
    "ProductMatch",
    "find_or_create_product",
    "find_product",
    "product_has_origin_history",
]
