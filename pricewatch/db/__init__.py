"""Database module."""
from pricewatch.db.base import (
    Base,
    UUIDMixin,
    TimestampMixin,
    engine,
    async_session_maker,
)

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "engine",
    "async_session_maker",
]
