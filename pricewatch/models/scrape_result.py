"""Pydantic models for scrape results delivered by the price scraper."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from decimal import Decimal
from typing import List, Optional


class ScrapedProduct(BaseModel):
    """One commodity line of a scrape result.

    The price is the prevailing price for every market the report covers.
    """

    category: str = Field(
        ...,
        min_length=1,
        max_length=250,
        description="Commodity category (e.g. COMMERCIAL RICE)"
    )
    commodity: str = Field(
        ...,
        min_length=1,
        max_length=250,
        description="Commodity name (e.g. Premium Rice)"
    )
    origin: Optional[str] = Field(
        default=None,
        max_length=250,
        description="Origin label (e.g. Local, Imported)"
    )
    unit: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Unit of measure (e.g. kg)"
    )
    price: Decimal = Field(
        ...,
        ge=0,
        description="Prevailing price (non-negative)"
    )

    @field_validator('category', 'commodity')
    @classmethod
    def strip_identity_fields(cls, v: str) -> str:
        """Strip whitespace from identity fields."""
        if not v.strip():
            raise ValueError('identity fields cannot be empty or whitespace')
        return v.strip()


class ScrapeResult(BaseModel):
    """A parsed scrape result, one per scraped report document.

    Field aliases match the scraper's JSON keys. Every field is optional
    because the pipeline tolerates partial documents: a missing date falls
    back to today, missing markets or price lines are treated as empty.
    """

    status: Optional[str] = Field(
        default=None,
        description="Free-form scraper status; contains 'success' when the scrape worked"
    )
    date_processed: Optional[str] = Field(
        default=None,
        description="Report date as YYYY-MM-DD"
    )
    url: Optional[str] = Field(
        default=None,
        alias="original_url",
        description="Source document URL"
    )
    covered_markets: Optional[List[str]] = Field(
        default=None,
        description="Markets the reported prices apply to"
    )
    products: Optional[List[ScrapedProduct]] = Field(
        default=None,
        alias="price_data",
        description="Scraped commodity prices"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "status": "Success",
                "date_processed": "2025-12-15",
                "original_url": "https://www.da.gov.ph/price-monitoring/",
                "covered_markets": ["Agora Public Market", "Bicutan Market"],
                "price_data": [
                    {
                        "category": "COMMERCIAL RICE",
                        "commodity": "Premium Rice",
                        "origin": "Local",
                        "unit": "kg",
                        "price": 50.59
                    }
                ]
            }
        },
    )
