"""Pydantic models for price analytics results."""
from pydantic import BaseModel, Field
import datetime
from enum import Enum
from typing import List


class Volatility(str, Enum):
    """Three-bucket classification of (max - min) / avg over a window."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PriceHistoryPoint(BaseModel):
    """Price on one report date (a market's price or the national average)."""
    date: datetime.date
    price: float


class ProductAnalytics(BaseModel):
    """Price statistics for one product over a lookback window."""

    product_name: str
    market_name: str = Field(
        ...,
        description="Market name, 'Unknown Market' or 'National Average'"
    )
    min_price: float = 0.0
    max_price: float = 0.0
    average_price: float = Field(
        default=0.0,
        description="Average rounded to 2 decimal places"
    )
    volatility: Volatility = Volatility.LOW
    history: List[PriceHistoryPoint] = Field(default_factory=list)
