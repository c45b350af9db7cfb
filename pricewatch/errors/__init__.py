"""Error handling module."""
from pricewatch.errors.exceptions import (
    DataIngestionError,
    ValidationError,
    ConsistencyError,
    DatabaseError,
    ResourceNotFoundError,
)

__all__ = [
    "DataIngestionError",
    "ValidationError",
    "ConsistencyError",
    "DatabaseError",
    "ResourceNotFoundError",
]
