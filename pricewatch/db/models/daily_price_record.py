"""DailyPriceRecord ORM model for the append-only price time-series."""
from sqlalchemy import ForeignKey, Numeric, String, CheckConstraint, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from pricewatch.db.base import Base, UUIDMixin
from decimal import Decimal
from datetime import datetime
import uuid


class DailyPriceRecord(Base, UUIDMixin):
    """One price observation for a (report, product, market) triple.

    Parents are referenced by id only; parent rows hold no collections.
    """
    
    __tablename__ = "daily_price_records"
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_positive_price'),
    )
    
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit: Mapped[str | None] = mapped_column(String(20), nullable=True)
    origin: Mapped[str | None] = mapped_column(String(250), nullable=True, index=True)
    price_report_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("price_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_info_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("product_info.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    market_location_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("market_locations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<DailyPriceRecord(id={self.id}, price={self.price}, market_location_id={self.market_location_id})>"
