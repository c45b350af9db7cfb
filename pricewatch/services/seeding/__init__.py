"""Synthetic price history for development databases."""
from pricewatch.services.seeding.generator import (
    SeedPlan,
    SyntheticHistoryGenerator,
    infer_market_type,
    seed_history,
)

__all__ = [
    "SeedPlan",
    "SyntheticHistoryGenerator",
    "infer_market_type",
    "seed_history",
]
