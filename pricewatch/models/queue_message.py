"""Pydantic models for messages published to the scraper."""
from pydantic import BaseModel, Field, field_validator
from typing import Literal
from datetime import datetime, timezone


class ScrapeRequestMessage(BaseModel):
    """Request for the scraper to fetch and parse a price report page.

    Published as JSON onto the scrape request Redis list. The scraper
    answers with a ScrapeResult on the scraped data list.
    """

    url: str = Field(
        ...,
        min_length=1,
        description="Page the scraper should process"
    )
    triggered_by: Literal["manual", "scheduled"] = Field(
        default="manual",
        description="What initiated the scrape"
    )
    requested_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO 8601 timestamp when the scrape was requested"
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Strip whitespace and require an http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError('url must start with http:// or https://')
        return v
