"""PriceReport ORM model: one header row per ingested report date."""
from sqlalchemy import Date, DateTime, Text, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from pricewatch.db.base import Base, UUIDMixin
from datetime import date, datetime
from enum import Enum as PyEnum
from typing import Optional


class ReportStatus(PyEnum):
    """Outcome reported by the scraper for a report."""
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_scrape_status(cls, value: Optional[str]) -> "ReportStatus":
        """Map a free-form scraper status string onto a report status.

        Any string containing "success" (case-insensitive) is COMPLETED.
        Everything else, including None, is FAILED.
        """
        if value is None:
            return cls.FAILED
        if "success" in value.lower():
            return cls.COMPLETED
        return cls.FAILED


class PriceReport(Base, UUIDMixin):
    """PriceReport model, keyed logically by the reported calendar date.
    
    Attributes:
        date_reported: Calendar date the prices apply to (unique)
        date_processed: When this service ingested the report
        url: Source document URL
        status: Scraper outcome mapped onto ReportStatus
    """
    
    __tablename__ = "price_reports"
    
    date_reported: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        unique=True,
        index=True,
    )
    date_processed: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Note: values_callable stores enum VALUES (lowercase strings)
    status: Mapped[ReportStatus] = mapped_column(
        SQLEnum(
            ReportStatus,
            name="report_status",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x]
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<PriceReport(id={self.id}, date_reported={self.date_reported}, status='{self.status.value}')>"
