"""Pydantic models for catalog curation views."""
from pydantic import BaseModel, Field
import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID


class ProductStats(BaseModel):
    """Product counts by lifecycle status."""
    total: int = 0
    active: int = 0
    pending: int = 0
    inactive: int = 0


class MarketStats(BaseModel):
    """Market counts by status and kind."""
    total: int = 0
    active: int = 0
    wet_markets: int = 0
    supermarkets: int = 0


class NewcomerProduct(BaseModel):
    """A PENDING product awaiting administrator review.

    Price, unit and origin come from the product's earliest observation.
    """

    id: UUID
    product_name: str
    category: str
    local_name: Optional[str] = None
    origin: Optional[str] = None
    unit: str = Field(default="N/A", description="'N/A' when never observed")
    price: Decimal = Decimal("0")
    total_markets: int = Field(default=0, description="Distinct markets observed")
    detected_date: Optional[datetime.date] = Field(
        default=None,
        description="Report date of the earliest observation"
    )


class MarketDetail(BaseModel):
    """A market that carries a product."""
    id: UUID
    name: str
    market_type: Optional[str] = None
    opening_time: Optional[datetime.time] = None
    closing_time: Optional[datetime.time] = None


class ProductMarkets(BaseModel):
    """Distinct markets where a product was ever observed."""
    product_id: UUID
    product_name: str
    markets: List[MarketDetail] = Field(default_factory=list)


class MarketProduct(BaseModel):
    """One observation of a product at a market."""
    product_name: str
    category: str
    price: Decimal
    unit: Optional[str] = None
    date_reported: datetime.date


class MarketProducts(BaseModel):
    """Products and prices observed at one market."""
    market_id: UUID
    market_name: str
    market_type: Optional[str] = None
    total_records: int = Field(default=0, description="All observations stored for the market")
    products: List[MarketProduct] = Field(default_factory=list)
