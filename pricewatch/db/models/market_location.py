"""MarketLocation ORM model for physical market venues."""
from sqlalchemy import String, Float, Text, Time
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from pricewatch.db.base import Base, UUIDMixin, TimestampMixin
from datetime import time
from enum import Enum as PyEnum


class MarketType(PyEnum):
    """Kind of venue."""
    WET_MARKET = "wet_market"
    SUPERMARKET = "supermarket"


class MarketStatus(PyEnum):
    """Market lifecycle status. Ingestion never deactivates a market."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class MarketLocation(Base, UUIDMixin, TimestampMixin):
    """MarketLocation model identified by its exact trimmed name.
    
    Attributes:
        name: Trimmed market name (unique identity key)
        market_type: Wet market or supermarket (unset for auto-created rows)
        status: Lifecycle status, ACTIVE on creation
        latitude/longitude: Geocoordinates (optional)
        opening_time/closing_time: Operating hours (optional)
        rating: Average rating (optional)
        description: Free text (optional)
    """
    
    __tablename__ = "market_locations"
    
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    market_type: Mapped[MarketType | None] = mapped_column(
        SQLEnum(
            MarketType,
            name="market_type",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x]
        ),
        nullable=True,
        index=True,
    )
    status: Mapped[MarketStatus] = mapped_column(
        SQLEnum(
            MarketStatus,
            name="market_status",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x]
        ),
        nullable=False,
        default=MarketStatus.ACTIVE,
        index=True,
    )
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    opening_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    closing_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    
    def __repr__(self) -> str:
        return f"<MarketLocation(id={self.id}, name='{self.name}', status='{self.status.value}')>"
